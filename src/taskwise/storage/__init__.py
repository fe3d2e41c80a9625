from .kv_store import (
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    SqliteKeyValueStorage,
    open_storage,
)

__all__ = [
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
    "SqliteKeyValueStorage",
    "open_storage",
]
