"""Query surface over the souvenir catalog and the user carts."""

import logging
from datetime import datetime
from typing import Any

from bson import ObjectId

from src.config import REVIEW_UPDATE_MODE
from src.db.mongodb_client import MongoDBClient
from src.services.cart_store import CartStore
from src.services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


class SouvenirQueries:
    """
    Stateless apart from the two store handles; every call is one or two
    round-trips to MongoDB and every store error reaches the caller.
    """

    def __init__(self, catalog: CatalogStore, carts: CartStore):
        self.catalog = catalog
        self.carts = carts

    @classmethod
    def from_client(cls, client: MongoDBClient, review_update_mode: str = REVIEW_UPDATE_MODE) -> "SouvenirQueries":
        return cls(
            CatalogStore(client.souvenirs, review_update_mode=review_update_mode),
            CartStore(client.carts, client.souvenirs_collection),
        )

    def get_all_souvenirs(self) -> list[dict[str, Any]]:
        return self.catalog.find_all()

    def get_cheap_souvenirs(self, price: float) -> list[dict[str, Any]]:
        """Souvenirs priced at or below price."""
        return self.catalog.find_cheaper_than(price)

    def get_top_rating_souvenirs(self, n: int) -> list[dict[str, Any]]:
        return self.catalog.find_top_rated(n)

    def get_souvenirs_by_tag(self, tag: str) -> list[dict[str, Any]]:
        """Name, image and price of souvenirs tagged exactly with tag; no _id."""
        return self.catalog.find_by_tag(tag)

    def get_souvenirs_count(self, country: str, rating: float, price: float) -> int:
        return self.catalog.count_matching(country, rating, price)

    def search_souvenirs(self, substring: str) -> list[dict[str, Any]]:
        """Case-insensitive substring search on name."""
        return self.catalog.search_by_name(substring)

    def get_discussed_souvenirs(self, date: datetime) -> list[dict[str, Any]]:
        """Souvenirs whose first review was left on or after date."""
        return self.catalog.find_first_reviewed_since(date)

    def delete_out_of_stock_souvenirs(self) -> dict[str, Any]:
        return self.catalog.delete_out_of_stock()

    def add_review(self, souvenir_id: str | ObjectId, login: str, rating: float, text: str) -> dict[str, Any]:
        return self.catalog.add_review(souvenir_id, login=login, rating=rating, text=text)

    def get_cart_sum(self, login: str) -> float:
        return self.carts.get_cart_sum(login)
