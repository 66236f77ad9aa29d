"""
Errors raised by the backend layer.

Every rejected operation fails with a ``BackendError`` whose ``envelope``
carries the failure payload as ``{"data": <payload>}``.
"""

from typing import Any

KEY_REQUIRED_MESSAGE = "provide key or id"


class ConfigurationError(ValueError):
    """Invalid backend configuration. Raised synchronously at setup time."""


class BackendError(Exception):
    """Base class for rejected backend operations."""

    def __init__(self, payload: Any, message: str = ""):
        self.envelope = {"data": payload}
        super().__init__(message or str(payload))


class KeyResolutionError(BackendError):
    """No storage key could be derived for a write."""

    def __init__(self, message: str = KEY_REQUIRED_MESSAGE):
        super().__init__({"error": message}, message)


class StorageWriteError(BackendError):
    """The namespace, or record serialization, failed during a write."""

    def __init__(self, error: Exception):
        self.error = error
        super().__init__(error, f"{type(error).__name__}: {error}")
