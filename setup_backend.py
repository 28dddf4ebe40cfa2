"""
Infrastructure Setup Script for Souvenir Market Backend
This script checks the MongoDB connection and creates the required indexes.
"""

import logging
import sys

from src.config import LOG_FORMAT, LOG_LEVEL
from src.db.mongodb_client import MongoDBClient
from src.errors import StoreUnavailableError

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


def check_database_connection(client: MongoDBClient) -> bool:
    """Check if MongoDB is reachable."""
    logger.info("Checking MongoDB connection...")
    try:
        client.ping()
    except StoreUnavailableError as e:
        logger.error(f"MongoDB connection error: {e}")
        return False
    logger.info("MongoDB connection: OK")
    return True


def check_data_availability(client: MongoDBClient) -> bool:
    """Check if sample data is available."""
    souvenir_count = client.souvenirs.estimated_document_count()
    cart_count = client.carts.estimated_document_count()
    logger.info(f"Souvenirs in database: {souvenir_count}")
    logger.info(f"Carts in database: {cart_count}")
    if souvenir_count == 0:
        logger.warning("No souvenirs found. Run the document loader first.")
        return False
    return True


def main() -> bool:
    """Main setup function."""
    logger.info("Setting up Souvenir Market Backend...")
    client = MongoDBClient()
    try:
        if not check_database_connection(client):
            logger.error("Database connection check failed!")
            return False

        client.create_indexes()

        if not check_data_availability(client):
            logger.info("To load sample data, run:")
            logger.info("   python -m src.loaders.document_loader")
            return False
    finally:
        client.close()

    logger.info("Setup complete! Ready to start the server.")
    return True


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
