"""
Shared helpers for the data access layer.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from focusboard.exceptions import StoreException

logger = logging.getLogger("focusboard.store")


@contextmanager
def store_operation(db: Session, operation: str):
    """
    Roll back and re-raise any SQLAlchemy failure as StoreException.

    Args:
        db: Database session
        operation: Short name of the operation for the error message
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Store operation '{operation}' failed: {e}")
        raise StoreException(operation, str(e)) from e
