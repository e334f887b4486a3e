"""Which configuration sources apply, and in what order."""

from pathlib import Path
from typing import Any

from folio.config._models._sections import DEFAULT_CONFIG
from folio.config._models._sources import ConfigSource, ConfigSourceName
from folio.utils._paths import get_user_config_path

PROJECT_CONFIG_NAME = ".folio.toml"


def discover_sources(
    project_root: Path | None = None,
    *,
    include_env: bool = True,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
    user_config_path: Path | None = None,
) -> list[ConfigSource]:
    """List the sources that apply, highest precedence first.

    File sources are listed whether or not the file exists. Values of file
    and environment sources are read later, by ``Config.load``.

    Args:
        project_root: Repository root; its ``.folio.toml`` is the project
            source. No project source without one.
        include_env: Include ``FOLIO_SECTION__KEY`` variables.
        cli_overrides: ``--set`` values; no CLI source when None.
        user_config_path: User config file to use instead of the platform one.

    Examples:
        >>> [s.name.value for s in discover_sources(Path("/work/repo"))]
        ['env', 'project', 'user', 'default']
    """
    sources: list[ConfigSource] = []
    if cli_overrides is not None:
        sources.append(ConfigSource(ConfigSourceName.CLI, exists=bool(cli_overrides), values=cli_overrides))
    if include_env:
        sources.append(ConfigSource(ConfigSourceName.ENV))
    if project_root is not None:
        sources.append(ConfigSource.for_file(ConfigSourceName.PROJECT, project_root / PROJECT_CONFIG_NAME))
    sources.append(ConfigSource.for_file(ConfigSourceName.USER, user_config_path or get_user_config_path()))
    sources.append(ConfigSource(ConfigSourceName.DEFAULT, values=DEFAULT_CONFIG))
    return sources
