"""
Pydantic models and index declarations for the MongoDB 'souvenirs' collection.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pymongo import ASCENDING, IndexModel

COUNT_INDEX_NAME = "country_rating_price"

# Equality on country first, then the two range filters, so the count query
# never falls back to a collection scan.
SOUVENIR_INDEXES = [
    IndexModel(
        [("country", ASCENDING), ("rating", ASCENDING), ("price", ASCENDING)],
        name=COUNT_INDEX_NAME,
    ),
]


def average_rating(ratings: list[float]) -> float:
    """Mean of the given ratings, 0 when there are none."""
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


class Review(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    login: str
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    text: str
    rating: float = Field(ge=0)
    is_approved: bool = Field(False, alias="isApproved")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class NewReview(BaseModel):
    """Review fields a caller is allowed to supply."""

    login: str
    rating: float = Field(ge=0)
    text: str

    def to_review(self) -> Review:
        return Review(login=self.login, rating=self.rating, text=self.text)


class Souvenir(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(None, alias="_id")
    name: str
    tags: list[str] = []
    reviews: list[Review] = []
    image: str = ""
    price: float = Field(ge=0)
    amount: int = Field(ge=0)
    country: str
    rating: float = Field(0.0, ge=0)
    is_recent: bool = Field(False, alias="isRecent")

    @field_validator("id", mode="before")
    @classmethod
    def check_object_id(cls, value: Any) -> str | None:
        if value is None:
            return None
        if not ObjectId.is_valid(value):
            raise ValueError(f"{value!r} is not a valid ObjectId")
        return str(value)

    @model_validator(mode="after")
    def derive_rating(self) -> "Souvenir":
        if self.reviews:
            self.rating = average_rating([review.rating for review in self.reviews])
        return self

    def to_document(self) -> dict[str, Any]:
        doc = self.model_dump(by_alias=True, exclude={"id", "reviews"})
        doc["reviews"] = [review.to_document() for review in self.reviews]
        if self.id is not None:
            doc["_id"] = ObjectId(self.id)
        return doc
