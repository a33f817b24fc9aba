# storefront/repos/base.py
import functools

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.domain.errors import DependencyError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def store_call(action: str):
    """
    Turns driver failures into DependencyError with a neutral message.
    The original exception is logged and chained, never shown to clients.
    """

    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(self, *args, **kwargs):
            try:
                return fn(self, *args, **kwargs)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"{type(self).__name__}.{fn.__name__} failed: {e}")
                raise DependencyError(f"Failed to {action}") from e

        return wrapper

    return decorator


class BaseRepo:
    def __init__(self, db: Session):
        self.db = db
