# pyright: reportAny=false, reportUnknownArgumentType=false
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from folio.config import deep_merge, parse_env_vars, parse_string_value, read_toml_file, set_nested_key
from folio.exceptions import ConfigLoadError

if TYPE_CHECKING:
    from pyfakefs.fake_filesystem import FakeFilesystem


class TestReadTomlFile:
    def test_parses_valid_toml(self, fs: "FakeFilesystem") -> None:
        path = Path("/repo/.folio.toml")
        fs.create_file(path, contents='[status]\ncontext_lines = 5\n\n[git]\nexecutable = "/usr/bin/git"\n')

        result = read_toml_file(path)

        assert result == {"status": {"context_lines": 5}, "git": {"executable": "/usr/bin/git"}}

    def test_missing_file(self, fs: "FakeFilesystem") -> None:
        with pytest.raises(FileNotFoundError):
            _ = read_toml_file(Path("/repo/missing.toml"))

    def test_invalid_toml_reports_location(self, fs: "FakeFilesystem") -> None:
        path = Path("/repo/.folio.toml")
        fs.create_file(path, contents='[status]\nfold_file_diffs = true\n\n[dispatch\n')

        with pytest.raises(ConfigLoadError) as exc_info:
            _ = read_toml_file(path)

        error = exc_info.value
        assert error.path == path
        assert error.line == 4
        assert error.column is not None
        assert error.__cause__ is not None


class TestDeepMerge:
    def test_nested_dicts_merge(self) -> None:
        base = {"status": {"context_lines": 3, "fold_file_diffs": True}}
        override = {"status": {"context_lines": 1}}

        assert deep_merge(base, override) == {"status": {"context_lines": 1, "fold_file_diffs": True}}

    def test_lists_are_replaced(self) -> None:
        assert deep_merge({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}

    def test_type_mismatch_override_wins(self) -> None:
        assert deep_merge({"a": {"b": 1}}, {"a": "flat"}) == {"a": "flat"}

    def test_inputs_are_not_modified(self) -> None:
        base = {"status": {"context_lines": 3}}
        override = {"status": {"show_untracked": False}}

        result = deep_merge(base, override)
        result["status"]["context_lines"] = 99

        assert base == {"status": {"context_lines": 3}}
        assert override == {"status": {"show_untracked": False}}


class TestParseStringValue:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("FALSE", False),
            ("42", 42),
            ("2.5", 2.5),
            ("None", None),
            ("null", None),
            ("[1, 2]", "[1, 2]"),
            ("nan", "nan"),
            ("git", "git"),
            ("1.2.3", "1.2.3"),
        ],
    )
    def test_infers_types(self, raw: str, expected: object) -> None:
        assert parse_string_value(raw) == expected


class TestSetNestedKey:
    def test_creates_intermediate_dicts(self) -> None:
        d: dict[str, object] = {}

        set_nested_key(d, "logging.level", "debug")

        assert d == {"logging": {"level": "debug"}}

    def test_replaces_scalar_on_the_path(self) -> None:
        d: dict[str, object] = {"logging": "flat"}

        set_nested_key(d, "logging.level", "debug")

        assert d == {"logging": {"level": "debug"}}


class TestParseEnvVars:
    def test_reads_section_qualified_variables(self) -> None:
        environ = {
            "FOLIO_STATUS__CONTEXT_LINES": "1",
            "FOLIO_DISPATCH__CONFIRM_DISCARD": "false",
            "HOME": "/home/me",
        }

        assert parse_env_vars(environ=environ) == {
            "status": {"context_lines": 1},
            "dispatch": {"confirm_discard": False},
        }

    def test_ignores_unqualified_flags(self) -> None:
        assert parse_env_vars(environ={"FOLIO_DEBUG": "1", "FOLIO_STRICT_CONFIG": "1"}) == {}

    def test_custom_prefix(self) -> None:
        assert parse_env_vars("X_", {"X_GIT__EXECUTABLE": "git2"}) == {"git": {"executable": "git2"}}
