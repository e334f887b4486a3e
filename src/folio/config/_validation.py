# pyright: reportAny=false, reportExplicitAny=false
"""Configuration validation.

Values are checked against ``ConfigSchema``. Sections ignore unknown keys,
so only values of the wrong type or outside their range are reported.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from pydantic import ValidationError

from folio.config._models._sections import ConfigSchema
from folio.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from pydantic_core import ErrorDetails

    from folio.config._models._sources import ConfigSource

# Pydantic constraint context keys and how to describe them.
_BOUNDS: Final = (("ge", ">="), ("gt", ">"), ("le", "<="), ("lt", "<"))


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """A configuration value that does not validate.

    Attributes:
        key: Dotted key, e.g. ``status.context_lines``.
        message: Pydantic's description of the problem.
        expected: What would have been accepted, when known.
        actual: The rejected value.
        source: Name of the source the value came from, when known.
    """

    key: str
    message: str
    expected: str | None
    actual: Any
    source: str | None = None


def _expected(error: "ErrorDetails") -> str | None:
    ctx = error.get("ctx") or {}
    if "expected" in ctx:
        return str(ctx["expected"])
    for name, symbol in _BOUNDS:
        if name in ctx:
            return f"{symbol} {ctx[name]}"
    return None


def _check(values: "Mapping[str, Any]", source: str | None) -> list[ValidationIssue]:
    try:
        _ = ConfigSchema.model_validate(values)
    except ValidationError as e:
        return [
            ValidationIssue(
                key=".".join(str(part) for part in error["loc"]),
                message=error["msg"],
                expected=_expected(error),
                actual=error.get("input"),
                source=source,
            )
            for error in e.errors()
        ]
    return []


def validate_config(config: "Mapping[str, Any]") -> list[ValidationIssue]:
    """Validate a merged configuration dictionary.

    Returns:
        The issues found; empty when the configuration is valid.
    """
    return _check(config, None)


def validate_source(source: "ConfigSource") -> list[ValidationIssue]:
    """Validate the values of one source on their own.

    Returns:
        Issues tagged with the source name; empty for a missing or empty
        source.
    """
    if not source.exists or not source.values:
        return []
    return _check(source.values, source.name.value)


def raise_if_validation_errors(issues: "Sequence[ValidationIssue]", source: str | None = None) -> None:
    """Raise for the first issue, if any.

    Args:
        issues: Issues from ``validate_config`` or ``validate_source``.
        source: Source to name in the error instead of the issue's own.

    Raises:
        ConfigValidationError: If ``issues`` is not empty.
    """
    if not issues:
        return
    issue = issues[0]
    msg = f"Invalid configuration value for '{issue.key}'"
    raise ConfigValidationError(
        msg,
        key=issue.key,
        value=issue.actual,
        expected=issue.expected or issue.message,
        source=source or issue.source,
    )
