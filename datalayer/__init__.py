"""
datalayer

Key-value persistence with an awaitable CRUD interface over a synchronous,
string-only namespace:
- localStorage (persistent, SQLite-backed)
- sessionStorage (in-memory, process lifetime)
"""

from datalayer.core.backend import (
    BackendError,
    BackendSelector,
    ConfigurationError,
    KeyResolutionError,
    LocalStorageBackend,
    StorageWriteError,
    VALID_BACKENDS,
)
from datalayer.core.config import StoreConfig, load_config
from datalayer.core.storage import HostEnvironment, QuotaExceededError

__all__ = [
    "BackendError",
    "BackendSelector",
    "ConfigurationError",
    "HostEnvironment",
    "KeyResolutionError",
    "LocalStorageBackend",
    "QuotaExceededError",
    "StorageWriteError",
    "StoreConfig",
    "VALID_BACKENDS",
    "load_config",
]
