#!/usr/bin/env python3
"""
Souvenir Market Backend Startup Script
This script starts the FastAPI server.
"""

import logging

import uvicorn

from src.config import LOG_FORMAT, LOG_LEVEL

# Configure logging
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logger.info("Starting Souvenir Market Backend...")
    logger.info("Available endpoints:")
    logger.info("  - Health Check: GET /health")
    logger.info("  - Catalog: GET /api/souvenirs[/cheap|/top|/tags/{tag}|/count|/search|/discussed]")
    logger.info("  - Out of stock purge: DELETE /api/souvenirs/out-of-stock")
    logger.info("  - Reviews: POST /api/souvenirs/{souvenir_id}/reviews")
    logger.info("  - Cart total: GET /api/carts/{login}/sum")
    logger.info("  - API Docs: http://localhost:8000/docs")

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
