"""Error kinds raised by the catalog and cart stores."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from pymongo.errors import (
    BulkWriteError,
    ConnectionFailure,
    ExecutionTimeout,
    NetworkTimeout,
    OperationFailure,
    ServerSelectionTimeoutError,
)

logger = logging.getLogger(__name__)

DUPLICATE_KEY = 11000
DOCUMENT_VALIDATION_FAILURE = 121
REJECTED_WRITE_CODES = (DUPLICATE_KEY, DOCUMENT_VALIDATION_FAILURE)


class SouvenirStoreError(Exception):
    """Base class for store failures surfaced to callers."""


class NotFoundError(SouvenirStoreError):
    """A souvenir id or cart login does not resolve."""


class ValidationRejectedError(SouvenirStoreError):
    """A write violates a field constraint."""


class StoreUnavailableError(SouvenirStoreError):
    """Connection, timeout or transport failure talking to MongoDB."""


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """Re-raise pymongo failures as the matching store error kind."""
    try:
        yield
    except (ConnectionFailure, ServerSelectionTimeoutError, NetworkTimeout, ExecutionTimeout) as e:
        logger.error(f"Store unavailable during {operation}: {e}")
        raise StoreUnavailableError(f"{operation}: {e}") from e
    except BulkWriteError as e:
        codes = [error.get("code") for error in (e.details or {}).get("writeErrors", [])]
        if not codes or any(code not in REJECTED_WRITE_CODES for code in codes):
            raise
        logger.error(f"Bulk write rejected during {operation}: codes {codes}")
        raise ValidationRejectedError(f"{operation}: {e}") from e
    except OperationFailure as e:
        # Covers WriteError and DuplicateKeyError as well as findAndModify failures
        if e.code not in REJECTED_WRITE_CODES:
            raise
        logger.error(f"Write rejected during {operation}: {e}")
        raise ValidationRejectedError(f"{operation}: {e}") from e
