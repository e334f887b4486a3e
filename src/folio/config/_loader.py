# pyright: reportAny=false, reportExplicitAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Reading and combining raw configuration values."""

import copy
import os
import tomllib
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from folio.exceptions import ConfigLoadError

if TYPE_CHECKING:
    from pathlib import Path

ENV_PREFIX = "FOLIO_"

# Separates the section from the key in environment variable names.
_ENV_SEPARATOR = "__"

_NULLS = frozenset({"none", "null"})


def read_toml_file(path: "Path") -> dict[str, Any]:
    """Read a TOML config file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file is not valid TOML, with the line and
            column of the problem.
    """
    with path.open("rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {path}: {e}"
            raise ConfigLoadError(msg, path=path, line=e.lineno, column=e.colno) from e


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` over ``base`` into a new dictionary.

    Tables merge key by key; any other value in ``override`` (lists
    included) replaces the one in ``base``. Neither input is modified and
    the result shares no mutable values with them.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def parse_string_value(value: str) -> Any:
    """Turn a string from the environment or ``--set`` into a config value.

    ``true``/``false`` become booleans and ``none``/``null`` become None
    (case-insensitive), whole numbers become ints and decimals floats.
    Anything else stays a string.

    Examples:
        >>> parse_string_value("False")
        False
        >>> parse_string_value("none") is None
        True
        >>> parse_string_value("2.5")
        2.5
        >>> parse_string_value("/usr/bin/git")
        '/usr/bin/git'
    """
    lowered = value.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in _NULLS:
        return None
    try:
        return int(value)
    except ValueError:
        pass
    if "." in value:
        try:
            return float(value)
        except ValueError:
            pass
    return value


def set_nested_key(d: dict[str, Any], key_path: str, value: Any) -> None:
    """Set ``section.key`` style paths in a nested dictionary.

    Missing tables are created and scalars in the way are replaced.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "git.timeout_seconds", 10)
        >>> d
        {'git': {'timeout_seconds': 10}}
    """
    *tables, leaf = key_path.split(".")
    current = d
    for table in tables:
        child = current.get(table)
        if not isinstance(child, dict):
            child = current[table] = {}
        current = child
    current[leaf] = value


def parse_env_vars(prefix: str = ENV_PREFIX, environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect ``FOLIO_SECTION__KEY`` variables into a config dictionary.

    A double underscore separates section and key, so
    ``FOLIO_STATUS__CONTEXT_LINES=1`` sets ``status.context_lines``.
    Variables without one, such as ``FOLIO_DEBUG``, are flags rather than
    config values and are skipped.

    Args:
        prefix: Variable name prefix.
        environ: Variables to read instead of ``os.environ``.
    """
    values: dict[str, Any] = {}
    for name, raw in (os.environ if environ is None else environ).items():
        if not name.startswith(prefix):
            continue
        key = name.removeprefix(prefix)
        if _ENV_SEPARATOR not in key:
            continue
        set_nested_key(values, key.replace(_ENV_SEPARATOR, ".").lower(), parse_string_value(raw))
    return values
