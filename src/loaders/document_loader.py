"""Load souvenir and cart documents into MongoDB."""

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from src.config import DATA_DIR, LOG_FORMAT, LOG_LEVEL
from src.db.mongodb_client import MongoDBClient
from src.errors import ValidationRejectedError, translate_store_errors
from src.models import Cart, Souvenir

logger = logging.getLogger(__name__)


class DocumentLoader:
    def __init__(self, client: MongoDBClient, data_dir: Path = DATA_DIR):
        self.client = client
        self.data_dir = Path(data_dir)

    def _read(self, filename: str) -> list[dict[str, Any]]:
        with open(self.data_dir / filename, encoding="utf-8") as f:
            return json.load(f)

    def _validate(self, model: type[BaseModel], raw_docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Run every raw document through its model, rejecting the whole batch on the first bad one."""
        docs = []
        for position, raw in enumerate(raw_docs):
            try:
                docs.append(model.model_validate(raw).to_document())
            except ValidationError as e:
                raise ValidationRejectedError(f"{model.__name__} #{position} rejected: {e}") from e
        return docs

    def load_souvenirs(self, filename: str = "souvenirs.json") -> int:
        """Replace the souvenirs collection with the documents in filename."""
        docs = self._validate(Souvenir, self._read(filename))
        col = self.client.souvenirs
        with translate_store_errors("load_souvenirs"):
            col.delete_many({})
            if docs:
                col.insert_many(docs)
        logger.info(f"Loaded {len(docs)} souvenirs into MongoDB")
        return len(docs)

    def load_carts(self, filename: str = "carts.json") -> int:
        """Replace the carts collection with the documents in filename."""
        docs = self._validate(Cart, self._read(filename))
        # Checked up front so the existing carts are not wiped for a batch the unique index would reject.
        logins = Counter(doc["login"] for doc in docs)
        duplicates = sorted(login for login, count in logins.items() if count > 1)
        if duplicates:
            raise ValidationRejectedError(f"Duplicate cart logins: {', '.join(duplicates)}")
        col = self.client.carts
        with translate_store_errors("load_carts"):
            col.delete_many({})
            if docs:
                col.insert_many(docs)
        logger.info(f"Loaded {len(docs)} carts into MongoDB")
        return len(docs)

    def load_all(self):
        """Execute all document loading tasks."""
        self.client.create_indexes()
        self.load_souvenirs()
        self.load_carts()
        logger.info("Document data loading complete!")


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    loader = DocumentLoader(MongoDBClient())
    loader.load_all()
