# matchpoint/services/transactions.py
"""
Retry wrapper for short read-check-write transactions.

The unit of work passed in must do all of its reads inside the call, so a
retry after a conflict starts again from fresh database state.
"""
import logging
import random
import time
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from matchpoint.core.config import settings
from matchpoint.core.exceptions import TransientStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Errors that mean "someone else wrote first": version mismatch on the game
# row, a racing insert hitting a unique constraint, or a lock timeout.
CONFLICT_ERRORS = (StaleDataError, IntegrityError, OperationalError)


def run_with_retry(
    db: Session,
    operation: Callable[[], T],
    *,
    description: str,
    max_attempts: Optional[int] = None,
) -> T:
    """
    Run `operation` and commit, retrying the whole unit on conflict.

    Domain errors raised by the operation roll back and propagate at once.
    Conflicts roll back and retry up to `max_attempts` times, after which
    TransientStoreError is raised.
    """
    attempts = max_attempts or settings.CAPACITY_TX_MAX_RETRIES
    last_error: Optional[Exception] = None

    for attempt in range(1, attempts + 1):
        try:
            result = operation()
            db.commit()
            return result
        except CONFLICT_ERRORS as e:
            db.rollback()
            last_error = e
            logger.warning(
                f"Transaction conflict during {description} "
                f"(attempt {attempt}/{attempts}): {e.__class__.__name__}"
            )
            if attempt < attempts:
                time.sleep(random.uniform(0, settings.CAPACITY_TX_RETRY_BACKOFF_SECONDS * attempt))
        except Exception:
            db.rollback()
            raise

    logger.error(f"Giving up on {description} after {attempts} attempts: {last_error}")
    raise TransientStoreError(
        f"Could not complete {description} due to concurrent updates, please retry"
    )
