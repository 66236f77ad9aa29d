from dataclasses import dataclass
from typing import Optional

from datalayer.core.backend.errors import ConfigurationError
from datalayer.core.backend.local_storage import LocalStorageBackend
from datalayer.core.storage.host import HostEnvironment
from datalayer.utils.logger import get_logger
from datalayer.utils.validation import validate_backend_name

logger = get_logger("backend.provider")

VALID_BACKENDS = ("localStorage", "sessionStorage")


@dataclass(frozen=True)
class BackendConfig:
    """Backend selection, fixed once handed to ``BackendSelector.build``."""

    backend: str = VALID_BACKENDS[0]

    def __post_init__(self):
        valid, err = validate_backend_name(self.backend, VALID_BACKENDS)
        if not valid:
            raise ConfigurationError(err)


class BackendSelector:
    """
    Chooses which namespace a ``LocalStorageBackend`` is bound to.

    Usage:
        backend = BackendSelector().select_backend("sessionStorage").build(host)

    The selection is fixed once ``build`` has run: later ``select_backend``
    calls are still validated but otherwise ignored, so every backend a
    selector builds shares one namespace.
    """

    def __init__(self, backend: Optional[str] = None):
        self._config = BackendConfig() if backend is None else BackendConfig(backend)
        self._built = False

    @classmethod
    def from_config(cls, store_config) -> "BackendSelector":
        """Seed the selection from a ``StoreConfig``."""
        return cls(store_config.backend)

    @property
    def config(self) -> BackendConfig:
        return self._config

    @property
    def backend(self) -> str:
        return self._config.backend

    def select_backend(self, name: str) -> "BackendSelector":
        """
        Set the backend to use. Ignored once ``build`` has run.

        Args:
            name: ``"localStorage"`` or ``"sessionStorage"``

        Returns:
            This selector, for chaining

        Raises:
            ConfigurationError: If ``name`` is not a recognized backend
        """
        config = BackendConfig(name)
        if self._built:
            if config != self._config:
                logger.warning(
                    f"Ignoring backend '{name}': already built with "
                    f"'{self._config.backend}'"
                )
            return self
        self._config = config
        return self

    def build(self, host: HostEnvironment) -> LocalStorageBackend:
        """Resolve the selected namespace from ``host`` and bind a backend to it."""
        storage = host[self._config.backend]
        self._built = True
        logger.info(f"LocalStorageBackend bound to {self._config.backend}")
        return LocalStorageBackend(storage)
