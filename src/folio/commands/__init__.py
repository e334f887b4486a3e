"""folio commands.

Commands are operations on an ``Invocation`` wrapped by the ``Dispatcher``
into host-callable coroutines that take the invoking ``Editor``.
"""

from folio.commands._errors import ClassifiedError, ErrorFormatter, classify, format_error
from folio.commands._pipeline import Dispatcher, Invocation, editor_path
from folio.commands._registry import COMMANDS, CommandSpec, build_command, build_commands, get_command_spec
from folio.commands._remote import default_remote, split_remote_ref
from folio.commands._targets import Target, resolve_target

__all__ = [
    "COMMANDS",
    "ClassifiedError",
    "CommandSpec",
    "Dispatcher",
    "ErrorFormatter",
    "Invocation",
    "Target",
    "build_command",
    "build_commands",
    "classify",
    "default_remote",
    "editor_path",
    "format_error",
    "get_command_spec",
    "resolve_target",
    "split_remote_ref",
]
