"""
Key-value stores for per-collection card configurations.

The configuration is a convenience view, not a system of record: reads that
fail for any reason (nothing stored, unreadable backend, corrupt payload)
come back as "nothing stored" and the caller starts from an empty
configuration. Writes that fail are raised.
"""

import re
from pathlib import Path
from typing import Optional

import redis

from statcards.configs.logging_init import logger
from statcards.configs.settings_models import Settings, StorageConfig
from statcards.models.models.cards import StatsConfiguration
from statcards.storage.serialization import (
    dump_configuration,
    dump_flag,
    parse_configuration,
    parse_flag,
)


class ConfigurationStoreError(RuntimeError):
    """A store backend could not be read or written."""


class ConfigurationStore:
    """
    Interface for loading and saving card configurations.

    Concrete stores implement the three raw key operations; key naming,
    serialization and the degrade-to-empty policy live here.
    """

    def __init__(
        self,
        config_key_prefix: str = "job-stats-config-",
        collapsed_key_prefix: str = "job-stats-collapsed-",
    ) -> None:
        self.config_key_prefix = config_key_prefix
        self.collapsed_key_prefix = collapsed_key_prefix

    # Raw key operations -------------------------------------------------

    def _read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def _write(self, key: str, value: str) -> None:
        raise NotImplementedError

    def _delete(self, key: str) -> None:
        raise NotImplementedError

    # Keys ---------------------------------------------------------------

    def config_key(self, collection_id: str) -> str:
        return f"{self.config_key_prefix}{collection_id}"

    def collapsed_key(self, collection_id: str) -> str:
        return f"{self.collapsed_key_prefix}{collection_id}"

    # Public API ---------------------------------------------------------

    def _safe_read(self, key: str) -> Optional[str]:
        try:
            return self._read(key)
        except ConfigurationStoreError as e:
            logger.warning(f"Could not read '{key}': {e}")
            return None

    def load(self, collection_id: str) -> Optional[StatsConfiguration]:
        """Stored configuration for a collection; None when absent or unusable."""
        return parse_configuration(self._safe_read(self.config_key(collection_id)))

    def save(self, collection_id: str, configuration: StatsConfiguration) -> None:
        key = self.config_key(collection_id)
        try:
            self._write(key, dump_configuration(configuration))
        except ConfigurationStoreError as e:
            logger.error(f"Could not save '{key}': {e}")
            raise
        logger.debug(f"Saved '{key}' ({len(configuration.cards)} cards, {len(configuration.groups)} groups)")

    def load_collapsed(self, collection_id: str) -> bool:
        return parse_flag(self._safe_read(self.collapsed_key(collection_id)))

    def save_collapsed(self, collection_id: str, collapsed: bool) -> None:
        key = self.collapsed_key(collection_id)
        try:
            self._write(key, dump_flag(collapsed))
        except ConfigurationStoreError as e:
            logger.error(f"Could not save '{key}': {e}")
            raise

    def clear(self, collection_id: str) -> None:
        """Forget everything stored for a collection."""
        for key in (self.config_key(collection_id), self.collapsed_key(collection_id)):
            self._delete(key)
        logger.info(f"Cleared stored configuration for collection '{collection_id}'")


class MemoryConfigurationStore(ConfigurationStore):
    """Process-local store, used by default and in tests."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._data: dict[str, str] = {}

    def _read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def _write(self, key: str, value: str) -> None:
        self._data[key] = value

    def _delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileConfigurationStore(ConfigurationStore):
    """One JSON file per key under a directory."""

    _UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")

    def __init__(self, directory: Path | str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{self._UNSAFE_CHARS.sub('_', key)}.json"

    def _read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationStoreError(f"{path}: {e}") from e

    def _write(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise ConfigurationStoreError(f"{path}: {e}") from e

    def _delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise ConfigurationStoreError(f"{path}: {e}") from e


class RedisConfigurationStore(ConfigurationStore):
    """Store backed by a Redis server, keys stored as plain strings."""

    def __init__(self, client: "redis.Redis", **kwargs) -> None:
        super().__init__(**kwargs)
        self._redis = client

    @classmethod
    def from_config(cls, config: StorageConfig) -> "RedisConfigurationStore":
        client = redis.Redis(
            host=config.redis_host,
            port=config.redis_port,
            password=config.redis_password,
            db=config.redis_db,
            socket_timeout=config.redis_socket_timeout,
            decode_responses=True,
        )
        logger.info(f"Using Redis configuration store at {config.redis_host}:{config.redis_port}")
        return cls(
            client,
            config_key_prefix=config.config_key_prefix,
            collapsed_key_prefix=config.collapsed_key_prefix,
        )

    def _read(self, key: str) -> Optional[str]:
        try:
            return self._redis.get(key)
        except redis.RedisError as e:
            raise ConfigurationStoreError(str(e)) from e

    def _write(self, key: str, value: str) -> None:
        try:
            self._redis.set(key, value)
        except redis.RedisError as e:
            raise ConfigurationStoreError(str(e)) from e

    def _delete(self, key: str) -> None:
        try:
            self._redis.delete(key)
        except redis.RedisError as e:
            raise ConfigurationStoreError(str(e)) from e


def build_store(settings: Optional[Settings] = None) -> ConfigurationStore:
    """Store for the configured backend."""
    config = (settings or Settings()).storage
    prefixes = {
        "config_key_prefix": config.config_key_prefix,
        "collapsed_key_prefix": config.collapsed_key_prefix,
    }
    if config.backend == "redis":
        return RedisConfigurationStore.from_config(config)
    if config.backend == "file":
        logger.info(f"Using file configuration store in {config.file_path}")
        return JsonFileConfigurationStore(config.file_path, **prefixes)
    return MemoryConfigurationStore(**prefixes)
