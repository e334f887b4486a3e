"""folio: a git repository as a foldable, navigable text document."""

from folio.context import FolioContext
from folio.host import ConsoleHost, Editor, Host

__all__ = ["ConsoleHost", "Editor", "FolioContext", "Host"]
