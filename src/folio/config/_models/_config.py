# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""The merged folio configuration."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar, cast, overload

import tomli_w
from pydantic import BaseModel, ConfigDict, PrivateAttr

from folio.config._loader import deep_merge, parse_env_vars, read_toml_file
from folio.config._models._sections import (
    DEFAULT_CONFIG,
    SECTIONS,
    DispatchConfig,
    GitConfig,
    LoggingConfig,
    StatusConfig,
)
from folio.config._models._sources import ConfigSource, ConfigSourceName
from folio.config._validation import raise_if_validation_errors, validate_config

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path
    from typing import Self

T = TypeVar("T")


def _read_values(source: ConfigSource) -> dict[str, Any]:
    if source.name == ConfigSourceName.ENV:
        return parse_env_vars()
    if source.path is not None:
        return read_toml_file(source.path) if source.exists else {}
    return source.values


def _without_defaults(data: Mapping[str, Any], defaults: Mapping[str, Any]) -> dict[str, Any]:
    changed: dict[str, Any] = {}
    for key, value in data.items():
        default = defaults.get(key)
        if isinstance(value, dict) and isinstance(default, dict):
            nested = _without_defaults(value, default)
            if nested:
                changed[key] = nested
        elif key not in defaults or value != default:
            changed[key] = copy.deepcopy(value)
    return changed


def _drop_unset(data: dict[str, Any]) -> dict[str, Any]:
    return {
        key: _drop_unset(value) if isinstance(value, dict) else value
        for key, value in data.items()
        if value is not None
    }


class Config(BaseModel):
    """Merged configuration with a typed model per section.

    Build instances with ``from_dict``, ``from_file`` or ``load``. Unknown
    keys are kept (``get`` and ``to_dict`` return them) but have no effect.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())
    _sections: dict[str, BaseModel] = PrivateAttr(default_factory=dict)

    def __init__(self, *, _data: dict[str, Any] | None = None, _sources: tuple[ConfigSource, ...] = ()) -> None:
        """Wrap an already merged and validated configuration dictionary."""
        super().__init__()
        self._data = _data if _data is not None else copy.deepcopy(DEFAULT_CONFIG)
        self._sources = _sources
        self._sections = {name: model.model_validate(self._data.get(name, {})) for name, model in SECTIONS.items()}

    # ==========================================================================
    # Factories
    # ==========================================================================

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, validate: bool = True) -> Self:
        """Build a configuration from ``data`` merged over the defaults.

        Raises:
            ConfigValidationError: If a value is invalid and ``validate`` is set.
        """
        merged = deep_merge(DEFAULT_CONFIG, data)
        if validate:
            raise_if_validation_errors(validate_config(merged))
        return cls(_data=merged)

    @classmethod
    def from_file(cls, path: Path, *, validate: bool = True) -> Self:
        """Build a configuration from one TOML file merged over the defaults.

        The file stands in for the project source; no other source is read.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file is not valid TOML.
            ConfigValidationError: If a value is invalid and ``validate`` is set.
        """
        values = read_toml_file(path)
        merged = deep_merge(DEFAULT_CONFIG, values)
        if validate:
            raise_if_validation_errors(validate_config(merged), source=str(path))
        source = ConfigSource(ConfigSourceName.PROJECT, path, values=values)
        return cls(_data=merged, _sources=(source,))

    @classmethod
    def load(
        cls,
        *,
        project_root: Path | None = None,
        include_env: bool = True,
        cli_overrides: dict[str, Any] | None = None,
        user_config_path: Path | None = None,
    ) -> Self:
        """Read and merge every applicable source.

        Precedence, lowest first: defaults, user file, project
        ``.folio.toml``, ``FOLIO_SECTION__KEY`` variables, CLI overrides.

        Args:
            project_root: Repository root whose ``.folio.toml`` applies.
            include_env: Read environment variables.
            cli_overrides: ``--set`` values.
            user_config_path: User config file to use instead of the
                platform one.

        Raises:
            ConfigLoadError: If a config file is not valid TOML.
            ConfigValidationError: If the merged configuration is invalid.
        """
        # Deferred import to avoid circular dependency
        from folio.config._discovery import discover_sources  # noqa: PLC0415

        sources = discover_sources(
            project_root,
            include_env=include_env,
            cli_overrides=cli_overrides,
            user_config_path=user_config_path,
        )
        loaded = [source.with_values(_read_values(source)) for source in sources]

        merged: dict[str, Any] = {}
        for source in reversed(loaded):
            merged = deep_merge(merged, source.values)
        raise_if_validation_errors(validate_config(merged))
        return cls(_data=merged, _sources=tuple(loaded))

    # ==========================================================================
    # Sections
    # ==========================================================================

    @property
    def sources(self) -> list[ConfigSource]:
        """Sources that were consulted, highest precedence first."""
        return list(self._sources)

    @property
    def logging(self) -> LoggingConfig:
        return cast("LoggingConfig", self._sections["logging"])

    @property
    def status(self) -> StatusConfig:
        return cast("StatusConfig", self._sections["status"])

    @property
    def git(self) -> GitConfig:
        return cast("GitConfig", self._sections["git"])

    @property
    def dispatch(self) -> DispatchConfig:
        return cast("DispatchConfig", self._sections["dispatch"])

    # ==========================================================================
    # Raw values
    # ==========================================================================

    @overload
    def get(self, key: str) -> Any: ...

    @overload
    def get(self, key: str, default: T) -> T: ...

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a raw value by dotted key.

        Examples:
            >>> Config.from_dict({}).get("status.context_lines")
            3
            >>> Config.from_dict({}).get("git.timeout_seconds", 60)
            60
        """
        value: Any = self._data
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def to_dict(self, *, include_defaults: bool = True) -> dict[str, Any]:
        """Return a copy of the raw values.

        Args:
            include_defaults: Include values equal to the defaults.
        """
        if include_defaults:
            return copy.deepcopy(self._data)
        return _without_defaults(self._data, DEFAULT_CONFIG)

    def to_toml(self, *, include_defaults: bool = False) -> str:
        """Render the raw values as TOML, leaving out unset (None) values."""
        return tomli_w.dumps(_drop_unset(self.to_dict(include_defaults=include_defaults)))
