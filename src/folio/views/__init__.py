"""folio document views, URIs and the text provider."""

from folio.views._provider import DocumentProvider
from folio.views._uri import SCHEME, DocumentUri
from folio.views._view import CommitView, DocumentView, StashView, StatusView

__all__ = [
    "SCHEME",
    "CommitView",
    "DocumentProvider",
    "DocumentUri",
    "DocumentView",
    "StashView",
    "StatusView",
]
