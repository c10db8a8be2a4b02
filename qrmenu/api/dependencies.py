# qrmenu/api/dependencies.py
from functools import lru_cache

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from qrmenu.data.database import get_db
from qrmenu.domain.errors import (
    OrderingError,
    NotFoundError,
    InvalidQuantity,
    InvalidTransition,
    ConflictError,
    InconsistentError,
    StorageUnavailable,
)
from qrmenu.services.catalog import get_catalog
from qrmenu.services.lock_service import LockService

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (InvalidQuantity, 400),
    (InvalidTransition, 409),
    (ConflictError, 409),
    (InconsistentError, 500),
    (StorageUnavailable, 503),
)


def http_error(e: OrderingError) -> HTTPException:
    """Tylko kind + message, bez stack trace i wewnetrznych szczegolow."""
    for exc_type, status_code in _STATUS_BY_ERROR:
        if isinstance(e, exc_type):
            return HTTPException(status_code=status_code, detail=e.to_dict())
    return HTTPException(status_code=400, detail=e.to_dict())


@lru_cache
def get_lock_service() -> LockService:
    # jeden klient redis (pula polaczen) na proces
    return LockService()


def get_catalog_provider(db: Session = Depends(get_db)):
    return get_catalog(db)
