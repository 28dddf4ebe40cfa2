"""
Pydantic models and index declarations for the MongoDB 'carts' collection.
"""

from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pymongo import ASCENDING, IndexModel

# One cart per user.
CART_INDEXES = [
    IndexModel([("login", ASCENDING)], name="login_unique", unique=True),
]


class CartItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    souvenir_id: str = Field(alias="souvenirId")
    amount: int = Field(ge=0)

    @field_validator("souvenir_id")
    @classmethod
    def check_object_id(cls, value: str) -> str:
        if not ObjectId.is_valid(value):
            raise ValueError(f"{value!r} is not a valid ObjectId")
        return value


class Cart(BaseModel):
    login: str
    items: list[CartItem] = []

    def to_document(self) -> dict[str, Any]:
        return {
            "login": self.login,
            "items": [{"souvenirId": ObjectId(item.souvenir_id), "amount": item.amount} for item in self.items],
        }
