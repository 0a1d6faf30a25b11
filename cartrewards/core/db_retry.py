"""
Retry helper for transient database connection failures
"""
import logging
import random
import time
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

from .config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# PostgreSQL SQLSTATEs that mean the connection went away, not that the query was bad
RETRYABLE_SQLSTATES = {
    "57P01",  # admin_shutdown
    "08006",  # connection_failure
    "08003",  # connection_does_not_exist
    "53300",  # too_many_connections
}


def is_transient_error(error: Exception) -> bool:
    """Return True when a DB error is worth retrying on a fresh connection"""
    if isinstance(error, DBAPIError):
        if error.connection_invalidated:
            return True
        sqlstate = getattr(error.orig, "sqlstate", None) or getattr(error.orig, "pgcode", None)
        if sqlstate in RETRYABLE_SQLSTATES:
            return True
        if isinstance(error, OperationalError):
            message = str(error.orig).lower()
            return "terminating connection" in message or "connection reset" in message or "server closed" in message
    return False


def with_retry(
    operation: Callable[[], T],
    max_attempts: Optional[int] = None,
    base_delay: Optional[float] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run `operation`, retrying transient connection errors with exponential backoff.

    The operation is responsible for rolling back its own session on failure,
    so every attempt starts from a clean transaction.
    """
    max_attempts = max_attempts or settings.DB_RETRY_ATTEMPTS
    base_delay = settings.DB_RETRY_BASE_DELAY if base_delay is None else base_delay

    for attempt in range(1, max_attempts + 1):
        try:
            return operation()
        except DBAPIError as e:
            if not is_transient_error(e) or attempt >= max_attempts:
                raise
            delay = base_delay * (2 ** (attempt - 1)) + random.uniform(0, base_delay)
            logger.warning(
                f"Database connection error on attempt {attempt}/{max_attempts}, "
                f"retrying in {delay:.2f}s: {e.orig}"
            )
            sleep(delay)

    raise RuntimeError("Max retry attempts exceeded")
