"""
Store configuration for datalayer.

Defines which namespace backs the store, where persistent data lives and how
large a namespace may grow.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ValidationError

from datalayer.core.backend.errors import ConfigurationError
from datalayer.core.backend.provider import VALID_BACKENDS
from datalayer.core.storage.base import DEFAULT_QUOTA_BYTES
from datalayer.utils.validation import validate_backend_name, validate_quota

ENV_PREFIX = "DATALAYER_"


@dataclass
class StoreConfig:
    """Store-wide configuration parameters"""

    backend: str = VALID_BACKENDS[0]  # localStorage or sessionStorage
    quota_bytes: Optional[int] = DEFAULT_QUOTA_BYTES  # None disables the quota

    # Paths
    data_dir: Path = Path("data")
    db_name: str = "local_storage.db"
    log_dir: Path = Path("logs")

    def __post_init__(self):
        """Reject invalid settings up front"""
        valid, err = validate_backend_name(self.backend, VALID_BACKENDS)
        if not valid:
            raise ConfigurationError(err)

        valid, err = validate_quota(self.quota_bytes)
        if not valid:
            raise ConfigurationError(err)

        self.data_dir = Path(self.data_dir)
        self.log_dir = Path(self.log_dir)


class _EnvSettings(BaseModel):
    """Coerces raw environment strings into typed settings."""

    backend: str = VALID_BACKENDS[0]
    quota_bytes: Optional[int] = DEFAULT_QUOTA_BYTES
    data_dir: Path = Path("data")
    db_name: str = "local_storage.db"
    log_dir: Path = Path("logs")


def load_config(env_file: Optional[str] = None) -> StoreConfig:
    """
    Load configuration from the environment.

    Reads ``DATALAYER_BACKEND``, ``DATALAYER_QUOTA_BYTES``,
    ``DATALAYER_DATA_DIR``, ``DATALAYER_DB_NAME`` and ``DATALAYER_LOG_DIR``.
    Variables already set in the environment take precedence over the
    ``.env`` file.

    Args:
        env_file: Optional path to a .env file. If None, a ``.env`` in the
            working directory is used when present.

    Returns:
        StoreConfig instance

    Raises:
        ConfigurationError: If a value is missing its expected type or the
            backend name is not recognized
    """
    load_dotenv(env_file or find_dotenv(usecwd=True), override=False)

    raw = {}
    for field in _EnvSettings.model_fields:
        value = os.environ.get(f"{ENV_PREFIX}{field.upper()}")
        if value is not None:
            raw[field] = value

    # An empty quota disables it
    if raw.get("quota_bytes") == "":
        raw["quota_bytes"] = None

    try:
        settings = _EnvSettings(**raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid datalayer settings: {e}") from e

    return StoreConfig(**settings.model_dump())
