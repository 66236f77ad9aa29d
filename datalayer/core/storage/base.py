from abc import ABC, abstractmethod
from typing import Iterator, Optional, Tuple

from datalayer.utils.validation import validate_quota

# Browsers cap a single origin's storage at roughly 5 MiB.
DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024


class QuotaExceededError(Exception):
    """Raised by ``set_item`` when a write would push a namespace over quota."""

    def __init__(self, key: str, required: int, quota: int):
        self.key = key
        self.required = required
        self.quota = quota
        super().__init__(
            f"Setting the value of '{key}' exceeded the quota "
            f"({required} > {quota} bytes)"
        )


class Storage(ABC):
    """
    Synchronous, string-only key-value namespace.

    Mirrors the browser Storage interface: ``set_item``, ``get_item``,
    ``remove_item``, ``clear``, ``length`` and ``key(index)``. Keys and values
    are always stored as strings. Enumeration order through ``key(index)`` is
    implementation-defined.
    """

    def __init__(self, quota: Optional[int] = DEFAULT_QUOTA_BYTES):
        valid, err = validate_quota(quota)
        if not valid:
            raise ValueError(err)
        self.quota = quota

    @property
    @abstractmethod
    def length(self) -> int:
        """Number of entries currently stored."""

    @abstractmethod
    def key(self, index: int) -> Optional[str]:
        """Return the key at ``index``, or None when out of range."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored at ``key``, or None when absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store ``value`` at ``key``, replacing any previous value.

        Raises:
            QuotaExceededError: If the write would exceed the quota. The
                namespace is left unchanged.
        """

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``; a missing key is a no-op."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every entry."""

    @abstractmethod
    def items(self) -> Iterator[Tuple[str, str]]:
        """
        Iterate ``(key, value)`` pairs in ``key(index)`` order, in one pass.

        Iterates over a snapshot, so the namespace may be written meanwhile.
        """

    def __len__(self) -> int:
        return self.length

    @staticmethod
    def entry_size(key: str, value: str) -> int:
        """Bytes an entry counts against the quota."""
        return len(key.encode("utf-8")) + len(value.encode("utf-8"))

    def _ensure_capacity(self, key: str, value: str, used: int, existing: int):
        """
        Check that replacing an entry of ``existing`` bytes with ``key=value``
        fits in the quota, given ``used`` bytes currently stored.
        """
        if self.quota is None:
            return
        required = used - existing + self.entry_size(key, value)
        if required > self.quota:
            raise QuotaExceededError(key, required, self.quota)
