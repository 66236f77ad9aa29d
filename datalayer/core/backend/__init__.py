"""
Backend Module.

Promise-style CRUD over a storage namespace:
- LocalStorageBackend: create/get/list/update/remove/remove_all
- BackendSelector: one-time choice of localStorage or sessionStorage
"""

from datalayer.core.backend.errors import (
    BackendError,
    ConfigurationError,
    KeyResolutionError,
    StorageWriteError,
)
from datalayer.core.backend.local_storage import LocalStorageBackend, wrap_result
from datalayer.core.backend.provider import VALID_BACKENDS, BackendConfig, BackendSelector

__all__ = [
    "BackendConfig",
    "BackendError",
    "BackendSelector",
    "ConfigurationError",
    "KeyResolutionError",
    "LocalStorageBackend",
    "StorageWriteError",
    "VALID_BACKENDS",
    "wrap_result",
]
