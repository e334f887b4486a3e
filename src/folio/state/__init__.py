"""folio repository state.

Handles hold the latest snapshot of each open repository; the refresher
replaces that snapshot after every mutation.
"""

from folio.state._handle import RepositoryHandle
from folio.state._refresh import FACETS, Refresher
from folio.state._registry import Registry, RepositoryRegistry, ViewRegistry

__all__ = [
    "FACETS",
    "Refresher",
    "Registry",
    "RepositoryHandle",
    "RepositoryRegistry",
    "ViewRegistry",
]
