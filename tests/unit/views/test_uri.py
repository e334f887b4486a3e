from pathlib import Path

import pytest

from folio.enums import ViewKind
from folio.exceptions import DocumentUriError
from folio.views import DocumentUri


class TestDocumentUri:
    def test_status_uri_string(self) -> None:
        uri = DocumentUri.status(Path("/home/me/project"))

        assert str(uri) == "folio://status/%2Fhome%2Fme%2Fproject"

    def test_commit_uri_carries_sha(self) -> None:
        uri = DocumentUri.commit(Path("/repo"), "abc123")

        assert str(uri) == "folio://commit/%2Frepo?arg=abc123"

    def test_stash_uri_carries_sha(self) -> None:
        uri = DocumentUri.stash(Path("/repo"), "5e6f7a8b")

        assert str(uri) == "folio://stash/%2Frepo?arg=5e6f7a8b"
        assert DocumentUri.parse(str(uri)) == uri

    def test_empty_argument_round_trips(self) -> None:
        uri = DocumentUri(ViewKind.COMMIT, Path("/repo"), "")

        assert str(uri) == "folio://commit/%2Frepo?arg="
        assert DocumentUri.parse(str(uri)) == uri

    def test_parse_round_trips_paths_with_spaces(self) -> None:
        uri = DocumentUri.status(Path("/tmp/my project/ünïcode"))

        assert DocumentUri.parse(str(uri)) == uri

    def test_parse_fields(self) -> None:
        uri = DocumentUri.parse("folio://commit/%2Frepo?arg=abc123")

        assert uri.kind == ViewKind.COMMIT
        assert uri.root == Path("/repo")
        assert uri.arg == "abc123"

    @pytest.mark.parametrize(
        "value",
        [
            "file:///repo/a.txt",
            "/repo/a.txt",
            "folio://branches/%2Frepo",
            "folio://status/",
        ],
    )
    def test_parse_rejects_invalid(self, value: str) -> None:
        with pytest.raises(DocumentUriError) as exc_info:
            _ = DocumentUri.parse(value)

        assert exc_info.value.uri == value

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError, match="Not a folio URI"):
            _ = DocumentUri.parse("http://example.com")
