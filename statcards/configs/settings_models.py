from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from statcards.models.utils import get_config


class LoggingConfig(BaseSettings):
    verbosity_level: str = Field(default="ERROR")

    model_config = SettingsConfigDict(env_prefix="STATCARDS_LOGGING_")


class StorageConfig(BaseSettings):
    """Where per-collection card configurations are kept."""

    backend: Literal["memory", "file", "redis"] = Field(
        default="memory", description="Configuration store implementation"
    )

    # File backend
    file_dir: str = Field(
        default=".statcards", description="Directory holding one JSON file per stored key"
    )

    # Key naming, shared by every backend
    config_key_prefix: str = Field(
        default="job-stats-config-", description="Prefix for card configuration keys"
    )
    collapsed_key_prefix: str = Field(
        default="job-stats-collapsed-", description="Prefix for collapse flag keys"
    )

    # Redis backend
    redis_host: str = Field(default="redis", description="Redis server hostname")
    redis_port: int = Field(default=6379, description="Redis server port")
    redis_password: Optional[str] = Field(default=None, description="Redis password")
    redis_db: int = Field(default=0, description="Redis database number")
    redis_socket_timeout: float = Field(
        default=2.0, description="Socket timeout in seconds for Redis calls"
    )

    model_config = SettingsConfigDict(env_prefix="STATCARDS_STORAGE_")

    @property
    def file_path(self) -> Path:
        """Resolved directory for the file backend."""
        return Path(self.file_dir).expanduser().resolve()


class Settings(BaseSettings):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    model_config = SettingsConfigDict(env_prefix="STATCARDS_")

    @classmethod
    def from_yaml(cls, filename: str) -> "Settings":
        """
        Build settings from a YAML file.

        Overwrite priority: environment variables > config file (.yaml) > default values.
        Sections are handed to the nested settings classes so that their own
        environment variables still win over what the file says.
        """
        raw = get_config(filename)
        sections: dict[str, Any] = {}
        for name, section_cls in (("logging", LoggingConfig), ("storage", StorageConfig)):
            file_values = raw.get(name) or {}
            env_values = section_cls().model_dump(exclude_unset=True)
            sections[name] = section_cls(**{**file_values, **env_values})
        return cls(**sections)
