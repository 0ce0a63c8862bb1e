"""
Data access for the prompt storage service.

The prompt store owns the database and exposes every read and write operation.
"""
from .crud import PromptStore
from .errors import (
    StoreError,
    NotFoundError,
    InvalidRequestError,
    PoolError,
    UnhandledError,
)

__all__ = [
    "PromptStore",
    "StoreError",
    "NotFoundError",
    "InvalidRequestError",
    "PoolError",
    "UnhandledError",
]
