"""
Storage backends.

    from docqa.storage import create_store, LocalFileStore

    store = create_store(StorageConfig(backend="sql", database_url="sqlite:///docqa.db"))
    files = LocalFileStore("uploads")
"""

from docqa.base.store import BaseStore
from docqa.config import StorageBackend, StorageConfig

from .files import LocalFileStore
from .memory import InMemoryStore


def create_store(config: StorageConfig = None) -> BaseStore:
    """
    Factory that returns the record store named by config.backend.

    The SQL backend is imported lazily so the in-memory path doesn't pay
    for SQLAlchemy's import time.
    """
    config = config or StorageConfig()

    if config.backend == StorageBackend.MEMORY:
        return InMemoryStore()

    elif config.backend == StorageBackend.SQL:
        from .sql import SQLStore

        return SQLStore(config.database_url, echo=config.echo)

    else:
        raise ValueError(
            f"Unknown storage backend: '{config.backend}'. "
            f"Supported: 'memory', 'sql'."
        )


__all__ = [
    "InMemoryStore",
    "LocalFileStore",
    "create_store",
]
