"""Document URIs.

A document URI names one view of one repository::

    folio://status/%2Fhome%2Fme%2Fproject
    folio://commit/%2Fhome%2Fme%2Fproject?arg=1a2b3c4d...
    folio://stash/%2Fhome%2Fme%2Fproject?arg=5e6f7a8b...
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final, Self
from urllib.parse import parse_qs, quote, unquote, urlsplit

from folio.enums import ViewKind
from folio.exceptions import DocumentUriError

SCHEME: Final = "folio"


@dataclass(frozen=True, slots=True)
class DocumentUri:
    """Parsed document URI.

    Attributes:
        kind: Which document the URI names.
        root: Repository root.
        arg: Extra argument, a commit or stash SHA.
    """

    kind: ViewKind
    root: Path
    arg: str | None = None

    def __str__(self) -> str:
        uri = f"{SCHEME}://{self.kind.value}/{quote(self.root.as_posix(), safe='')}"
        if self.arg is not None:
            uri += f"?arg={quote(self.arg, safe='')}"
        return uri

    @classmethod
    def parse(cls, value: str) -> Self:
        """Parse a URI string.

        Raises:
            DocumentUriError: If the string is not a folio document URI.
        """
        parts = urlsplit(value)
        if parts.scheme != SCHEME:
            msg = f"Not a {SCHEME} URI: {value}"
            raise DocumentUriError(msg, uri=value)
        try:
            kind = ViewKind(parts.netloc)
        except ValueError:
            msg = f"Unknown document kind {parts.netloc!r}"
            raise DocumentUriError(msg, uri=value) from None

        root = unquote(parts.path.removeprefix("/"))
        if not root:
            msg = "Document URI has no repository root"
            raise DocumentUriError(msg, uri=value)

        args = parse_qs(parts.query, keep_blank_values=True).get("arg")
        return cls(kind, Path(root), args[0] if args else None)

    @classmethod
    def status(cls, root: Path) -> Self:
        """URI of the status document of ``root``."""
        return cls(ViewKind.STATUS, root)

    @classmethod
    def commit(cls, root: Path, sha: str) -> Self:
        """URI of the detail document of commit ``sha``."""
        return cls(ViewKind.COMMIT, root, sha)

    @classmethod
    def stash(cls, root: Path, sha: str) -> Self:
        """URI of the detail document of the stash entry whose commit is ``sha``."""
        return cls(ViewKind.STASH, root, sha)
