"""
Storage Namespaces.

Synchronous, string-only key-value stores a backend binds to:
- SQLiteStorage: persistent (localStorage)
- MemoryStorage: process-lifetime (sessionStorage)
"""

from datalayer.core.storage.base import DEFAULT_QUOTA_BYTES, QuotaExceededError, Storage
from datalayer.core.storage.host import HostEnvironment
from datalayer.core.storage.memory_storage import MemoryStorage
from datalayer.core.storage.sqlite_storage import SQLiteStorage

__all__ = [
    "DEFAULT_QUOTA_BYTES",
    "HostEnvironment",
    "MemoryStorage",
    "QuotaExceededError",
    "SQLiteStorage",
    "Storage",
]
