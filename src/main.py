"""FastAPI application for the Souvenir Market backend."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from bson import ObjectId
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder

from src.db.mongodb_client import MongoDBClient
from src.errors import NotFoundError, SouvenirStoreError, StoreUnavailableError, ValidationRejectedError
from src.models import NewReview
from src.services.souvenir_queries import SouvenirQueries

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = MongoDBClient()
    app.state.queries = SouvenirQueries.from_client(client)
    logger.info(f"Connected to MongoDB database {client.db.name}")
    yield
    client.close()


app = FastAPI(
    title="Souvenir Market API",
    description="Souvenir catalog with reviews, ratings and cart totals",
    version="1.0.0",
    lifespan=lifespan,
)


def get_queries(request: Request) -> SouvenirQueries:
    return request.app.state.queries


def to_json(documents: Any) -> Any:
    """Make Mongo documents JSON friendly."""
    return jsonable_encoder(documents, custom_encoder={ObjectId: str})


def to_http_error(error: SouvenirStoreError) -> HTTPException:
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ValidationRejectedError):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, StoreUnavailableError):
        return HTTPException(status_code=503, detail="Store unavailable")
    return HTTPException(status_code=500, detail="Internal server error")


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "Souvenir Market API"}


# Catalog Endpoints
@app.get("/api/souvenirs")
def get_all_souvenirs(queries: SouvenirQueries = Depends(get_queries)):
    try:
        return {"souvenirs": to_json(queries.get_all_souvenirs())}
    except SouvenirStoreError as e:
        logger.error(f"Error listing souvenirs: {e}")
        raise to_http_error(e)


@app.get("/api/souvenirs/cheap")
def get_cheap_souvenirs(price: float = Query(...), queries: SouvenirQueries = Depends(get_queries)):
    try:
        return {"souvenirs": to_json(queries.get_cheap_souvenirs(price))}
    except SouvenirStoreError as e:
        logger.error(f"Error getting cheap souvenirs: {e}")
        raise to_http_error(e)


@app.get("/api/souvenirs/top")
def get_top_rating_souvenirs(n: int = Query(10), queries: SouvenirQueries = Depends(get_queries)):
    try:
        return {"souvenirs": to_json(queries.get_top_rating_souvenirs(n))}
    except SouvenirStoreError as e:
        logger.error(f"Error getting top rated souvenirs: {e}")
        raise to_http_error(e)


@app.get("/api/souvenirs/tags/{tag}")
def get_souvenirs_by_tag(tag: str, queries: SouvenirQueries = Depends(get_queries)):
    try:
        return {"souvenirs": to_json(queries.get_souvenirs_by_tag(tag))}
    except SouvenirStoreError as e:
        logger.error(f"Error getting souvenirs by tag: {e}")
        raise to_http_error(e)


@app.get("/api/souvenirs/count")
def get_souvenirs_count(
    country: str = Query(...),
    rating: float = Query(...),
    price: float = Query(...),
    queries: SouvenirQueries = Depends(get_queries),
):
    try:
        return {"count": queries.get_souvenirs_count(country=country, rating=rating, price=price)}
    except SouvenirStoreError as e:
        logger.error(f"Error counting souvenirs: {e}")
        raise to_http_error(e)


@app.get("/api/souvenirs/search")
def search_souvenirs(q: str = Query(""), queries: SouvenirQueries = Depends(get_queries)):
    try:
        return {"souvenirs": to_json(queries.search_souvenirs(q))}
    except SouvenirStoreError as e:
        logger.error(f"Error searching souvenirs: {e}")
        raise to_http_error(e)


@app.get("/api/souvenirs/discussed")
def get_discussed_souvenirs(since: datetime = Query(...), queries: SouvenirQueries = Depends(get_queries)):
    try:
        return {"souvenirs": to_json(queries.get_discussed_souvenirs(since))}
    except SouvenirStoreError as e:
        logger.error(f"Error getting discussed souvenirs: {e}")
        raise to_http_error(e)


@app.delete("/api/souvenirs/out-of-stock")
def delete_out_of_stock_souvenirs(queries: SouvenirQueries = Depends(get_queries)):
    try:
        return queries.delete_out_of_stock_souvenirs()
    except SouvenirStoreError as e:
        logger.error(f"Error deleting out of stock souvenirs: {e}")
        raise to_http_error(e)


@app.post("/api/souvenirs/{souvenir_id}/reviews")
def add_review(souvenir_id: str, review: NewReview, queries: SouvenirQueries = Depends(get_queries)):
    try:
        souvenir = queries.add_review(souvenir_id, login=review.login, rating=review.rating, text=review.text)
        return {"souvenir": to_json(souvenir)}
    except SouvenirStoreError as e:
        logger.error(f"Error adding review to {souvenir_id}: {e}")
        raise to_http_error(e)


# Cart Endpoints
@app.get("/api/carts/{login}/sum")
def get_cart_sum(login: str, queries: SouvenirQueries = Depends(get_queries)):
    try:
        return {"login": login, "sum": queries.get_cart_sum(login)}
    except SouvenirStoreError as e:
        logger.error(f"Error getting cart sum for {login}: {e}")
        raise to_http_error(e)
