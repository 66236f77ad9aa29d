"""
Unit tests for store configuration.
"""

from pathlib import Path

import pytest

from datalayer.core.backend import ConfigurationError
from datalayer.core.config import StoreConfig, load_config
from datalayer.core.storage import DEFAULT_QUOTA_BYTES

ENV_VARS = [
    "DATALAYER_BACKEND",
    "DATALAYER_QUOTA_BYTES",
    "DATALAYER_DATA_DIR",
    "DATALAYER_DB_NAME",
    "DATALAYER_LOG_DIR",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Unset datalayer variables (restored afterwards) and run in an empty dir."""
    for name in ENV_VARS:
        # setenv first so anything load_dotenv writes is undone too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestStoreConfig:
    """Tests for the config dataclass."""

    def test_defaults(self):
        config = StoreConfig()
        assert config.backend == "localStorage"
        assert config.quota_bytes == DEFAULT_QUOTA_BYTES
        assert config.data_dir == Path("data")
        assert config.db_name == "local_storage.db"

    def test_invalid_backend(self):
        with pytest.raises(ConfigurationError, match="Valid backends are"):
            StoreConfig(backend="cookies")

    def test_invalid_quota(self):
        with pytest.raises(ConfigurationError):
            StoreConfig(quota_bytes=-1)

    def test_paths_coerced(self):
        config = StoreConfig(data_dir="somewhere")
        assert config.data_dir == Path("somewhere")


class TestLoadConfig:
    """Tests for environment loading."""

    def test_defaults(self, clean_env):
        config = load_config()
        assert config.backend == "localStorage"
        assert config.quota_bytes == DEFAULT_QUOTA_BYTES

    def test_environment(self, clean_env, tmp_path):
        clean_env.setenv("DATALAYER_BACKEND", "sessionStorage")
        clean_env.setenv("DATALAYER_QUOTA_BYTES", "1024")
        clean_env.setenv("DATALAYER_DATA_DIR", str(tmp_path))

        config = load_config()
        assert config.backend == "sessionStorage"
        assert config.quota_bytes == 1024
        assert config.data_dir == tmp_path

    def test_empty_quota_disables(self, clean_env):
        clean_env.setenv("DATALAYER_QUOTA_BYTES", "")
        assert load_config().quota_bytes is None

    def test_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / "store.env"
        env_file.write_text("DATALAYER_BACKEND=sessionStorage\nDATALAYER_DB_NAME=app.db\n")

        config = load_config(str(env_file))
        assert config.backend == "sessionStorage"
        assert config.db_name == "app.db"

    def test_environment_beats_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / "store.env"
        env_file.write_text("DATALAYER_BACKEND=sessionStorage\n")
        clean_env.setenv("DATALAYER_BACKEND", "localStorage")

        assert load_config(str(env_file)).backend == "localStorage"

    def test_invalid_backend(self, clean_env):
        clean_env.setenv("DATALAYER_BACKEND", "cookies")
        with pytest.raises(ConfigurationError):
            load_config()

    def test_invalid_quota(self, clean_env):
        clean_env.setenv("DATALAYER_QUOTA_BYTES", "lots")
        with pytest.raises(ConfigurationError, match="Invalid datalayer settings"):
            load_config()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
