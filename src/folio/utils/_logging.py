"""structlog loggers for folio.

Every ``FolioContext`` owns one logger, built here and passed down to the
components it creates. Loggers are standalone: ``create_logger`` never
touches the global structlog configuration, so two contexts in one process
(as in the test suite) can log to different files.
"""

import logging
from logging.handlers import RotatingFileHandler
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

from ._paths import get_user_log_path

if TYPE_CHECKING:
    from typing import TextIO

    from structlog.typing import FilteringBoundLogger, Processor

LogFormatType = Literal["json", "text"]

DEBUG_ENV_VAR = "FOLIO_DEBUG"
LEVEL_ENV_VAR = "FOLIO_LOG_LEVEL"


def _effective_level(level: str) -> int:
    """Resolve the level to log at.

    ``FOLIO_DEBUG`` (any value) forces debug, then ``FOLIO_LOG_LEVEL``
    replaces ``level``. Unknown names fall back to info.
    """
    if getenv(DEBUG_ENV_VAR):
        return logging.DEBUG
    name = getenv(LEVEL_ENV_VAR) or level
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _rotating_logger(path: Path, level: int, max_bytes: int, backup_count: int) -> logging.Logger:
    # One stdlib logger per log file; creating it again replaces its handler.
    stdlib_logger = logging.getLogger(f"folio.{path}")
    stdlib_logger.handlers.clear()
    stdlib_logger.propagate = False
    stdlib_logger.setLevel(level)
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(message)s"))
    stdlib_logger.addHandler(handler)
    return stdlib_logger


def _sink(
    target: "Path | TextIO",
    level: int,
    max_bytes: int | None,
    backup_count: int | None,
) -> object:
    if not isinstance(target, Path):
        return structlog.WriteLoggerFactory(file=target)()
    target.parent.mkdir(parents=True, exist_ok=True)
    if max_bytes is not None and backup_count is not None:
        return _rotating_logger(target, level, max_bytes, backup_count)
    return structlog.WriteLoggerFactory(file=target.open("a", encoding="utf-8"))()


def _processors(log_format: LogFormatType) -> "list[Processor]":
    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if log_format == "json":
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        # "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def create_logger(
    *,
    level: str = "info",
    log_format: LogFormatType = "json",
    log_file: "str | Path | TextIO" = "",
    max_bytes: int | None = None,
    backup_count: int | None = None,
    **context: object,
) -> "FilteringBoundLogger":
    """Create the logger for a folio context.

    Args:
        level: Level threshold (debug, info, warning, error). The
            ``FOLIO_DEBUG`` and ``FOLIO_LOG_LEVEL`` variables override it.
        log_format: ``json`` lines, or ``text`` for people.
        log_file: File path or open text stream. An empty string logs to
            ``folio.log`` in the platform log directory.
        max_bytes: Rotate the file after this many bytes. Rotation needs
            both ``max_bytes`` and ``backup_count``; streams never rotate.
        backup_count: Rotated files to keep.
        **context: Values bound to every entry.
    """
    target = (Path(log_file) if log_file else get_user_log_path()) if isinstance(log_file, str) else log_file
    threshold = _effective_level(level)
    logger = cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            _sink(target, threshold, max_bytes, backup_count),
            processors=_processors(log_format),
            wrapper_class=structlog.make_filtering_bound_logger(threshold),
            context_class=dict,
        ),
    )
    return logger.bind(**context) if context else logger
