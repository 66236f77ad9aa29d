from itertools import islice
from typing import Dict, Iterator, Optional, Tuple

from datalayer.core.storage.base import DEFAULT_QUOTA_BYTES, Storage
from datalayer.utils.logger import get_logger

logger = get_logger("storage.memory")


class MemoryStorage(Storage):
    """
    Process-lifetime namespace kept in a dict.

    Backs ``sessionStorage``: contents vanish when the process exits.
    Enumeration follows insertion order; overwriting a key keeps its position.
    """

    def __init__(self, quota: Optional[int] = DEFAULT_QUOTA_BYTES):
        super().__init__(quota)
        self._items: Dict[str, str] = {}
        self._used = 0

        logger.debug(f"MemoryStorage initialized (quota={quota})")

    @property
    def length(self) -> int:
        return len(self._items)

    def key(self, index: int) -> Optional[str]:
        if index < 0 or index >= len(self._items):
            return None
        return next(islice(self._items, index, None))

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(str(key))

    def set_item(self, key: str, value: str) -> None:
        key, value = str(key), str(value)
        previous = self._items.get(key)
        existing = self.entry_size(key, previous) if previous is not None else 0

        self._ensure_capacity(key, value, self._used, existing)

        self._items[key] = value
        self._used += self.entry_size(key, value) - existing

    def remove_item(self, key: str) -> None:
        key = str(key)
        previous = self._items.pop(key, None)
        if previous is not None:
            self._used -= self.entry_size(key, previous)

    def clear(self) -> None:
        self._items.clear()
        self._used = 0

    def items(self) -> Iterator[Tuple[str, str]]:
        # Snapshot so callers may write while iterating
        return iter(list(self._items.items()))

    @property
    def used_bytes(self) -> int:
        return self._used
