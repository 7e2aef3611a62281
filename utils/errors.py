"""
Error types surfaced by the board

Validation problems are reported by pydantic (422) and business rules by
HTTPException in the routes. The classes below cover backend failures;
main.py maps them to responses carrying only the human-readable message.
"""
import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a database read or write fails"""

    def __init__(self, action: str, error: Optional[Exception] = None):
        self.action = action
        self.error = error
        super().__init__(f"Failed to {action}. Please try again.")


class UploadError(Exception):
    """Raised when an image cannot be stored; the note is not created"""

    def __init__(self, filename: str, error: Optional[Exception] = None):
        self.filename = filename
        self.error = error
        super().__init__("Failed to upload image. Please try again.")


@contextmanager
def storage_errors(db: Session, action: str):
    """
    Roll back and re-raise database failures as StorageError

    Usage:
        with storage_errors(db, "create note"):
            db.add(note)
            db.commit()
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error while trying to %s", action)
        raise StorageError(action, e) from e
