"""Configuration for the Souvenir Market backend."""

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", PROJECT_ROOT / "data"))

MONGO_CONFIG = {
    "uri": os.getenv("MONGO_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGO_DATABASE", "souvenir_market"),
    "timeout_ms": int(os.getenv("MONGO_TIMEOUT_MS", "5000")),
}

SOUVENIRS_COLLECTION = os.getenv("SOUVENIRS_COLLECTION", "souvenirs")
CARTS_COLLECTION = os.getenv("CARTS_COLLECTION", "carts")

# "two_step" pushes the review and recomputes the rating in separate writes,
# "atomic" does both in one pipeline update.
REVIEW_UPDATE_MODE = os.getenv("REVIEW_UPDATE_MODE", "two_step")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
