"""Cart store over the MongoDB 'carts' collection."""

import logging
from typing import Any

from pymongo.collection import Collection

from src.errors import NotFoundError, translate_store_errors

logger = logging.getLogger(__name__)


class CartStore:
    def __init__(self, collection: Collection, souvenirs_collection: str):
        self.collection = collection
        self.souvenirs_collection = souvenirs_collection

    def _cart_sum_pipeline(self, login: str) -> list[dict[str, Any]]:
        # Empty carts survive both unwinds as a single row, so "no cart" and
        # "empty cart" stay distinguishable. Items whose souvenir is gone have
        # no price and add nothing to the sum.
        return [
            {"$match": {"login": login}},
            {"$unwind": {"path": "$items", "preserveNullAndEmptyArrays": True}},
            {
                "$lookup": {
                    "from": self.souvenirs_collection,
                    "localField": "items.souvenirId",
                    "foreignField": "_id",
                    "as": "souvenir",
                }
            },
            {"$unwind": {"path": "$souvenir", "preserveNullAndEmptyArrays": True}},
            {
                "$group": {
                    "_id": "$_id",
                    "cost": {"$sum": {"$multiply": ["$souvenir.price", "$items.amount"]}},
                }
            },
        ]

    def get_cart_sum(self, login: str) -> float:
        """
        Total price of everything in the user's cart.

        Args:
            login: Cart owner

        Returns:
            Sum of price * amount over items whose souvenir still exists
        """
        with translate_store_errors("get_cart_sum"):
            result = list(self.collection.aggregate(self._cart_sum_pipeline(login)))
        if not result:
            raise NotFoundError(f"No cart for {login}")
        logger.debug(f"Cart sum for {login}: {result[0]['cost']}")
        return result[0]["cost"]
