"""Configuration models."""

from folio.config._models._config import Config
from folio.config._models._sections import (
    DEFAULT_CONFIG,
    SECTIONS,
    ConfigSchema,
    DispatchConfig,
    GitConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    StatusConfig,
)
from folio.config._models._sources import ConfigSource, ConfigSourceName

__all__ = [
    "DEFAULT_CONFIG",
    "SECTIONS",
    "Config",
    "ConfigSchema",
    "ConfigSource",
    "ConfigSourceName",
    "DispatchConfig",
    "GitConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "StatusConfig",
]
