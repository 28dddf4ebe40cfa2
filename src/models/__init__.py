"""
Init file for the MongoDB document models.
"""

from .carts import CART_INDEXES, Cart, CartItem
from .souvenirs import COUNT_INDEX_NAME, SOUVENIR_INDEXES, NewReview, Review, Souvenir, average_rating

__all__ = [
    "CART_INDEXES",
    "COUNT_INDEX_NAME",
    "SOUVENIR_INDEXES",
    "Cart",
    "CartItem",
    "NewReview",
    "Review",
    "Souvenir",
    "average_rating",
]
