"""folio utility functions."""

from folio.utils._git import decode_bytes, discover_root, get_worktree_dir, strip_refs_heads
from folio.utils._logging import create_logger
from folio.utils._paths import get_user_config_dir, get_user_config_path, get_user_log_path

__all__ = [
    "create_logger",
    "decode_bytes",
    "discover_root",
    "get_user_config_dir",
    "get_user_config_path",
    "get_user_log_path",
    "get_worktree_dir",
    "strip_refs_heads",
]
