"""Persistence of per-collection card configurations."""

from statcards.storage.stores import (  # noqa: F401
    ConfigurationStore,
    ConfigurationStoreError,
    JsonFileConfigurationStore,
    MemoryConfigurationStore,
    RedisConfigurationStore,
    build_store,
)
