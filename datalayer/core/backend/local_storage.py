"""
Record-level backend over a storage namespace.

Each operation touches the namespace synchronously when called and returns an
``asyncio.Future`` whose result is delivered on a later event-loop turn. Two
operations issued in sequence therefore apply their effects in issue order,
whichever completion is observed first.
"""

import asyncio
import json
from typing import Any, Callable, Mapping, Optional

from datalayer.core.backend.errors import (
    KEY_REQUIRED_MESSAGE,
    BackendError,
    KeyResolutionError,
    StorageWriteError,
)
from datalayer.core.storage.base import Storage
from datalayer.utils.logger import get_logger
from datalayer.utils.validation import validate_key

logger = get_logger("backend.local_storage")

Resolver = Callable[[Callable[[Any], None], Callable[[BaseException], None]], None]


def wrap_result(result: Any) -> dict:
    """Wrap a result in the envelope expected by clients."""
    return {"data": result}


def to_json(value: Optional[str]) -> Any:
    """Parse ``value`` as JSON, returning it unchanged when it is not JSON."""
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        return value


def resolve_key(record: Any, options: Optional[Mapping] = None) -> Optional[str]:
    """
    Derive the storage key for ``record``.

    An explicit ``options["key"]`` wins over the record's own ``id``. Returns
    None when neither yields a non-empty key.
    """
    if isinstance(options, Mapping) and "key" in options:
        key = options["key"]
    elif isinstance(record, Mapping):
        key = record.get("id")
    else:
        key = None

    if key is None:
        return None
    key = str(key)
    valid, _ = validate_key(key)
    return key if valid else None


def deferred(resolver: Resolver) -> asyncio.Future:
    """
    Run ``resolver(resolve, reject)`` now and return a future for its outcome.

    Settlement is delivered on the next loop iteration. Only the first call
    to ``resolve`` or ``reject`` counts; an exception escaping the resolver
    rejects the future wrapped in a ``BackendError``.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()
    settled = False

    def _deliver(value: Any, error: Optional[BaseException]):
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(value)

    def resolve(value: Any):
        nonlocal settled
        if not settled:
            settled = True
            loop.call_soon(_deliver, value, None)

    def reject(error: BaseException):
        nonlocal settled
        if not settled:
            settled = True
            loop.call_soon(_deliver, None, error)

    try:
        resolver(resolve, reject)
    except BackendError as e:
        reject(e)
    except Exception as e:
        logger.warning(f"Namespace access failed: {e}")
        error = BackendError(e, f"{type(e).__name__}: {e}")
        error.__cause__ = e
        reject(error)
    return future


class LocalStorageBackend:
    """
    Gives record-level access to a localStorage or sessionStorage namespace.

    Records are stored as JSON text. Every operation resolves with an envelope
    ``{"data": ...}``; failures reject with a ``BackendError`` whose
    ``envelope`` has the same shape.
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    def create(self, record: Any, options: Optional[Mapping] = None) -> asyncio.Future:
        """
        Store ``record`` under ``options["key"]``, or under ``record["id"]``.

        An existing entry at that key is overwritten. Rejects with
        ``KeyResolutionError`` when no key can be derived, without writing,
        and with ``StorageWriteError`` when serialization or the namespace
        fails (a full namespace, for one).
        """
        def resolver(resolve, reject):
            key = resolve_key(record, options)
            if key is None:
                logger.warning("create rejected: no key or id")
                reject(KeyResolutionError(KEY_REQUIRED_MESSAGE))
                return

            try:
                self.storage.set_item(key, json.dumps(record, separators=(",", ":")))
            except Exception as e:
                logger.warning(f"create rejected for '{key}': {e}")
                error = StorageWriteError(e)
                error.__cause__ = e
                reject(error)
                return

            logger.debug(f"Stored record at '{key}'")
            resolve(wrap_result(record))

        return deferred(resolver)

    def get(self, key: str) -> asyncio.Future:
        """
        Retrieve the record stored at ``key``.

        Resolves with ``{"data": None}`` when the key is absent, and with the
        raw string when the stored value is not JSON. Rejects only when the
        namespace itself fails.
        """
        def resolver(resolve, reject):
            resolve(wrap_result(to_json(self.storage.get_item(key))))

        return deferred(resolver)

    def list(self) -> asyncio.Future:
        """
        Retrieve every record in the namespace.

        Resolves with ``{"data": {"results": [...]}}`` in the namespace's
        enumeration order, reading each entry once.
        """
        def resolver(resolve, reject):
            results = [to_json(value) for _, value in self.storage.items()]
            logger.debug(f"Listed {len(results)} records")
            resolve(wrap_result({"results": results}))

        return deferred(resolver)

    def update(self, key: str, record: Mapping) -> asyncio.Future:
        """
        Update or create the record at ``key``.

        A shallow copy of ``record`` is stamped with ``id=key`` and passed to
        ``create``, so this rejects in the same cases. ``record`` itself is
        left untouched.
        """
        if not isinstance(record, Mapping):
            message = f"record must be a mapping, got {type(record).__name__}"

            def resolver(resolve, reject):
                reject(BackendError({"error": message}, message))

            return deferred(resolver)

        data = dict(record)
        data["id"] = key
        return self.create(data)

    def remove(self, key: str) -> asyncio.Future:
        """Remove the record at ``key``. Removing a missing key is not an error."""
        def resolver(resolve, reject):
            self.storage.remove_item(key)
            logger.debug(f"Removed '{key}'")
            resolve(wrap_result(None))

        return deferred(resolver)

    def remove_all(self) -> asyncio.Future:
        """Remove every record in the namespace."""
        def resolver(resolve, reject):
            self.storage.clear()
            logger.debug("Cleared namespace")
            resolve(wrap_result(None))

        return deferred(resolver)
