from pathlib import Path
from typing import Optional

from datalayer.core.storage.base import DEFAULT_QUOTA_BYTES, Storage
from datalayer.core.storage.memory_storage import MemoryStorage
from datalayer.core.storage.sqlite_storage import SQLiteStorage
from datalayer.utils.logger import get_logger

logger = get_logger("storage.host")


class HostEnvironment:
    """
    Owns the two storage namespaces a backend can be bound to.

    ``localStorage`` persists in an SQLite file under ``data_dir``;
    ``sessionStorage`` lives in memory for the lifetime of this object.
    Namespaces are looked up by backend name, e.g. ``host["sessionStorage"]``.
    """

    def __init__(
        self,
        local_storage: Storage,
        session_storage: Storage,
    ):
        self.local_storage = local_storage
        self.session_storage = session_storage

    @classmethod
    def create(
        cls,
        data_dir: Path,
        db_name: str = "local_storage.db",
        quota: Optional[int] = DEFAULT_QUOTA_BYTES,
    ) -> "HostEnvironment":
        """Build a host with a persistent local namespace under ``data_dir``."""
        db_path = Path(data_dir) / db_name
        host = cls(
            local_storage=SQLiteStorage(db_path, quota=quota),
            session_storage=MemoryStorage(quota=quota),
        )
        logger.info(f"HostEnvironment initialized at {db_path}")
        return host

    @classmethod
    def in_memory(cls, quota: Optional[int] = DEFAULT_QUOTA_BYTES) -> "HostEnvironment":
        """Build a host whose namespaces are both memory-backed."""
        return cls(
            local_storage=MemoryStorage(quota=quota),
            session_storage=MemoryStorage(quota=quota),
        )

    def __getitem__(self, name: str) -> Storage:
        if name == "localStorage":
            return self.local_storage
        if name == "sessionStorage":
            return self.session_storage
        raise KeyError(name)

    def close(self):
        for storage in (self.local_storage, self.session_storage):
            close = getattr(storage, "close", None)
            if close is not None:
                close()
