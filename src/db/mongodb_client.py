"""MongoDB connection and utilities."""

import logging

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from src.config import CARTS_COLLECTION, MONGO_CONFIG, SOUVENIRS_COLLECTION
from src.errors import translate_store_errors
from src.models import CART_INDEXES, SOUVENIR_INDEXES

logger = logging.getLogger(__name__)


class MongoDBClient:
    def __init__(
        self,
        uri: str = MONGO_CONFIG["uri"],
        database: str = MONGO_CONFIG["database"],
        timeout_ms: int = MONGO_CONFIG["timeout_ms"],
        souvenirs_collection: str = SOUVENIRS_COLLECTION,
        carts_collection: str = CARTS_COLLECTION,
    ):
        self.client = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
        self.db: Database = self.client[database]
        self.souvenirs_collection = souvenirs_collection
        self.carts_collection = carts_collection

    def get_collection(self, name: str) -> Collection:
        """Get a MongoDB collection."""
        return self.db[name]

    @property
    def souvenirs(self) -> Collection:
        return self.get_collection(self.souvenirs_collection)

    @property
    def carts(self) -> Collection:
        return self.get_collection(self.carts_collection)

    def create_indexes(self):
        """Create necessary indexes."""
        with translate_store_errors("create_indexes"):
            self.souvenirs.create_indexes(SOUVENIR_INDEXES)
            self.carts.create_indexes(CART_INDEXES)
        logger.info(f"Indexes ensured on {self.souvenirs_collection} and {self.carts_collection}")

    def ping(self) -> bool:
        """Round-trip to the server, raising StoreUnavailableError if it cannot be reached."""
        with translate_store_errors("ping"):
            self.client.admin.command("ping")
        return True

    def close(self):
        self.client.close()
