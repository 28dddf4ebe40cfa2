"""Catalog store over the MongoDB 'souvenirs' collection."""

import logging
import re
from datetime import datetime
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import ValidationError
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection

from src.errors import NotFoundError, ValidationRejectedError, translate_store_errors
from src.models import COUNT_INDEX_NAME, NewReview

logger = logging.getLogger(__name__)

TWO_STEP = "two_step"
ATOMIC = "atomic"
REVIEW_UPDATE_MODES = (TWO_STEP, ATOMIC)

TAG_PROJECTION = {"_id": 0, "name": 1, "image": 1, "price": 1}


def _to_object_id(souvenir_id: str | ObjectId) -> ObjectId:
    try:
        return ObjectId(souvenir_id)
    except (InvalidId, TypeError) as e:
        raise NotFoundError(f"Souvenir {souvenir_id!r} not found") from e


class CatalogStore:
    def __init__(self, collection: Collection, review_update_mode: str = TWO_STEP):
        if review_update_mode not in REVIEW_UPDATE_MODES:
            raise ValueError(f"Unknown review update mode: {review_update_mode}")
        self.collection = collection
        self.review_update_mode = review_update_mode

    def find_all(self) -> list[dict[str, Any]]:
        with translate_store_errors("find_all"):
            return list(self.collection.find())

    def find_cheaper_than(self, price: float) -> list[dict[str, Any]]:
        with translate_store_errors("find_cheaper_than"):
            return list(self.collection.find({"price": {"$lte": price}}))

    def find_top_rated(self, n: int) -> list[dict[str, Any]]:
        """
        Top n souvenirs by rating, highest first.

        Ties keep whatever order the server returns them in, so equal ratings
        are not ordered deterministically.
        """
        # limit(0) means "no limit" to the server
        if n <= 0:
            return []
        with translate_store_errors("find_top_rated"):
            return list(self.collection.find().sort("rating", DESCENDING).limit(n))

    def find_by_tag(self, tag: str) -> list[dict[str, Any]]:
        with translate_store_errors("find_by_tag"):
            return list(self.collection.find({"tags": tag}, TAG_PROJECTION))

    def count_matching(self, country: str, rating: float, price: float) -> int:
        """
        Count souvenirs from country with rating >= rating and price <= price.

        Hinted to the (country, rating, price) index so the count is answered
        from the index without loading any document.
        """
        query = {"country": country, "rating": {"$gte": rating}, "price": {"$lte": price}}
        with translate_store_errors("count_matching"):
            return self.collection.count_documents(query, hint=COUNT_INDEX_NAME)

    def search_by_name(self, substring: str) -> list[dict[str, Any]]:
        query = {"name": {"$regex": re.escape(substring), "$options": "i"}}
        with translate_store_errors("search_by_name"):
            return list(self.collection.find(query))

    def find_first_reviewed_since(self, date: datetime) -> list[dict[str, Any]]:
        # Positional: only the earliest review counts.
        with translate_store_errors("find_first_reviewed_since"):
            return list(self.collection.find({"reviews.0.date": {"$gte": date}}))

    def delete_out_of_stock(self) -> dict[str, Any]:
        with translate_store_errors("delete_out_of_stock"):
            result = self.collection.delete_many({"amount": 0})
        logger.info(f"Deleted {result.deleted_count} out of stock souvenirs")
        return {"acknowledged": result.acknowledged, "deletedCount": result.deleted_count}

    def add_review(self, souvenir_id: str | ObjectId, login: str, rating: float, text: str) -> dict[str, Any]:
        """
        Append a review to a souvenir and refresh its rating.

        Args:
            souvenir_id: Souvenir ObjectId or its hex string
            login: Review author
            rating: Non-negative review rating
            text: Review body

        Returns:
            The souvenir document after the rating update
        """
        try:
            new_review = NewReview(login=login, rating=rating, text=text)
        except ValidationError as e:
            raise ValidationRejectedError(str(e)) from e

        object_id = _to_object_id(souvenir_id)
        review = new_review.to_review().to_document()

        if self.review_update_mode == ATOMIC:
            souvenir = self._append_and_rate(object_id, review)
        else:
            souvenir = self._append_then_rate(object_id, review)

        logger.info(f"Added review {review['id']} by {login} to souvenir {object_id}")
        return souvenir

    def _append_then_rate(self, object_id: ObjectId, review: dict[str, Any]) -> dict[str, Any]:
        """
        Push the review, then recompute and store the average in a second write.

        The two writes are not isolated from each other: a concurrent caller may
        push between them (its review is included in this average) or set the
        rating after this call does (last write wins). Reviews are never lost
        since $push is atomic per document.
        """
        with translate_store_errors("add_review.push"):
            pushed = self.collection.update_one({"_id": object_id}, {"$push": {"reviews": review}})
        if pushed.matched_count == 0:
            raise NotFoundError(f"Souvenir {object_id} not found")

        with translate_store_errors("add_review.average"):
            averages = list(
                self.collection.aggregate(
                    [
                        {"$match": {"_id": object_id}},
                        {"$unwind": "$reviews"},
                        {"$replaceRoot": {"newRoot": "$reviews"}},
                        {"$group": {"_id": None, "rating": {"$avg": "$rating"}}},
                    ]
                )
            )
        if not averages:
            raise NotFoundError(f"Souvenir {object_id} disappeared while adding a review")

        with translate_store_errors("add_review.set_rating"):
            souvenir = self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": {"rating": averages[0]["rating"]}},
                return_document=ReturnDocument.AFTER,
            )
        if souvenir is None:
            raise NotFoundError(f"Souvenir {object_id} disappeared while adding a review")
        return souvenir

    def _append_and_rate(self, object_id: ObjectId, review: dict[str, Any]) -> dict[str, Any]:
        """Push the review and set the average in a single pipeline update."""
        pipeline = [
            {"$set": {"reviews": {"$concatArrays": [{"$ifNull": ["$reviews", []]}, [{"$literal": review}]]}}},
            {"$set": {"rating": {"$avg": "$reviews.rating"}}},
        ]
        with translate_store_errors("add_review.atomic"):
            souvenir = self.collection.find_one_and_update(
                {"_id": object_id}, pipeline, return_document=ReturnDocument.AFTER
            )
        if souvenir is None:
            raise NotFoundError(f"Souvenir {object_id} not found")
        return souvenir
