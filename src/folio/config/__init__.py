"""folio configuration.

Values come from TOML files and the environment, merged in precedence
order (highest first):

1. CLI overrides (``--set section.key=value``)
2. Environment variables (``FOLIO_SECTION__KEY``)
3. Project file (``<repository>/.folio.toml``)
4. User file (``config.toml`` in the platform config directory)
5. Built-in defaults
"""

from folio.config._discovery import PROJECT_CONFIG_NAME, discover_sources
from folio.config._load import STRICT_ENV_VAR, safe_load_config
from folio.config._loader import (
    ENV_PREFIX,
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from folio.config._models import (
    DEFAULT_CONFIG,
    SECTIONS,
    Config,
    ConfigSchema,
    ConfigSource,
    ConfigSourceName,
    DispatchConfig,
    GitConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    StatusConfig,
)
from folio.config._validation import (
    ValidationIssue,
    raise_if_validation_errors,
    validate_config,
    validate_source,
)

__all__ = [
    "DEFAULT_CONFIG",
    "ENV_PREFIX",
    "PROJECT_CONFIG_NAME",
    "SECTIONS",
    "STRICT_ENV_VAR",
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
    "ValidationIssue",
    "deep_merge",
    "discover_sources",
    "parse_env_vars",
    "parse_string_value",
    "raise_if_validation_errors",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
    "validate_config",
    "validate_source",
]
