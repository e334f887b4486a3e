"""The command table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from folio.commands import _apply, _branching, _commit, _discard, _fold, _remote, _stash, _staging, _status, _visit
from folio.enums import CommandShape

if TYPE_CHECKING:
    from folio.commands._pipeline import Command, Dispatcher, Operation


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """A named command.

    Attributes:
        name: Command name as the host invokes it.
        operation: The operation run by the pipeline.
        shape: How the command resolves its repository.
        triggers_update: Refresh and redraw after running.
        description: One-line help text.
    """

    name: str
    operation: Operation
    shape: CommandShape
    triggers_update: bool = True
    description: str = ""


COMMANDS: Final[tuple[CommandSpec, ...]] = (
    CommandSpec("refresh", _status.refresh, CommandShape.REPO, description="Refresh repository state"),
    CommandSpec("stage", _staging.stage, CommandShape.REPO_AND_VIEW, description="Stage the item at point"),
    CommandSpec("stage-all", _staging.stage_all, CommandShape.REPO_AND_VIEW, description="Stage all tracked changes"),
    CommandSpec("unstage", _staging.unstage, CommandShape.REPO_AND_VIEW, description="Unstage the item at point"),
    CommandSpec("unstage-all", _staging.unstage_all, CommandShape.REPO_AND_VIEW, description="Unstage everything"),
    CommandSpec(
        "apply-at-point",
        _apply.apply_at_point,
        CommandShape.REPO_AND_VIEW,
        description="Apply the stash, commit or hunk at point",
    ),
    CommandSpec(
        "discard-at-point",
        _discard.discard_at_point,
        CommandShape.REPO_AND_VIEW,
        description="Discard the file, hunk or stash at point",
    ),
    CommandSpec("commit", _commit.commit, CommandShape.REPO, description="Commit staged changes"),
    CommandSpec("fetch", _remote.fetch, CommandShape.REPO, description="Fetch from the default remote"),
    CommandSpec("pull", _remote.pull, CommandShape.REPO, description="Pull the upstream branch"),
    CommandSpec("push", _remote.push, CommandShape.REPO, description="Push the current branch"),
    CommandSpec("checkout", _branching.checkout, CommandShape.REPO, description="Switch to a branch"),
    CommandSpec(
        "create-branch",
        _branching.create_branch,
        CommandShape.REPO,
        description="Create a branch at HEAD and switch to it",
    ),
    CommandSpec("merge", _branching.merge, CommandShape.REPO, description="Merge a branch"),
    CommandSpec("rebase", _branching.rebase, CommandShape.REPO, description="Rebase onto a branch"),
    CommandSpec("stash", _stash.stash, CommandShape.REPO, description="Stash local changes"),
    CommandSpec(
        "visit-at-point",
        _visit.visit_at_point,
        CommandShape.REPO_AND_VIEW,
        triggers_update=False,
        description="Open the file, commit or stash at point",
    ),
    CommandSpec(
        "toggle-fold",
        _fold.toggle_fold,
        CommandShape.REPO_AND_VIEW,
        triggers_update=False,
        description="Fold or unfold the section at point",
    ),
    CommandSpec(
        "show-refs",
        _status.show_refs,
        CommandShape.REPO,
        triggers_update=False,
        description="List branches and remotes",
    ),
    CommandSpec("stage-file", _staging.stage_file, CommandShape.FILE, description="Stage the current file"),
    CommandSpec("unstage-file", _staging.unstage_file, CommandShape.FILE, description="Unstage the current file"),
)


def get_command_spec(name: str) -> CommandSpec | None:
    """Return the command named ``name``, or None."""
    return next((spec for spec in COMMANDS if spec.name == name), None)


def build_command(dispatcher: Dispatcher, spec: CommandSpec) -> Command:
    """Wrap a command's operation in the pipeline shape it declares."""
    match spec.shape:
        case CommandShape.REPO:
            prime = dispatcher.prime_repo
        case CommandShape.REPO_AND_VIEW:
            prime = dispatcher.prime_repo_and_view
        case CommandShape.FILE:
            prime = dispatcher.prime_file
    return prime(spec.name, spec.operation, triggers_update=spec.triggers_update)


def build_commands(dispatcher: Dispatcher) -> dict[str, Command]:
    """Build every command in the table."""
    return {spec.name: build_command(dispatcher, spec) for spec in COMMANDS}
