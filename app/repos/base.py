# app/repos/base.py
import functools

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.errors import StoreUnavailable
from app.utils.logging import get_logger

logger = get_logger(__name__)


def store_call(fn):
    """
    Bledy SQLAlchemy -> StoreUnavailable (retryable) po rollbacku sesji.
    """

    @functools.wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return fn(self, *args, **kwargs)
        except SQLAlchemyError as e:
            logger.error(f"Store error in {type(self).__name__}.{fn.__name__}: {e}")
            self.db.rollback()
            raise StoreUnavailable() from e

    return wrapper


class BaseRepo:
    def __init__(self, db: Session):
        self.db = db

    @store_call
    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
