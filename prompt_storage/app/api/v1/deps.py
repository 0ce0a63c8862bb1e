from functools import lru_cache

from ...core.config import settings
from ...crud import PromptStore


@lru_cache(maxsize=1)
def get_store() -> PromptStore:
    """Dependency that provides the process-wide prompt store.

    The store is opened on first use from the configured database path and
    shared by every request; its pool bounds concurrent connections.
    """
    return PromptStore(
        settings.DATABASE_PATH,
        pool_size=settings.POOL_SIZE,
        pool_timeout=settings.POOL_TIMEOUT,
        busy_timeout=settings.BUSY_TIMEOUT,
    )


def close_store() -> None:
    """Dispose of the shared store if it was opened."""
    if get_store.cache_info().currsize:
        get_store().close()
        get_store.cache_clear()
