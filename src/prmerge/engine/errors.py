from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prmerge.engine.preflight import GateOutcome
    from prmerge.workspace.git_ops import GitError


class MergeError(Exception):
    """Terminal failure of a merge run.

    ``guidance`` holds the manual steps shown to the user after the message.
    """

    exit_code = 2

    def __init__(self, message: str, guidance: list[str] | None = None) -> None:
        super().__init__(message)
        self.guidance = guidance or []


class GateBlocked(MergeError):
    exit_code = 1

    def __init__(self, outcome: GateOutcome) -> None:
        super().__init__(outcome.reason)
        self.outcome = outcome


class SyncMismatch(MergeError):
    def __init__(self, local_branch: str, remote_branch: str) -> None:
        super().__init__(
            f"Local branch '{local_branch}' differs from remote branch "
            f"'{remote_branch}'. Please reconcile before continuing."
        )
        self.local_branch = local_branch
        self.remote_branch = remote_branch


class NameCollision(MergeError):
    def __init__(self, branch: str) -> None:
        super().__init__(
            f"Local rebase branch '{branch}' already exists. Please remove before continuing."
        )
        self.branch = branch


class RebaseConflict(MergeError):
    def __init__(self, remote_source: str, source_branch: str, target_branch: str) -> None:
        super().__init__(
            f"Unable to automatically rebase {remote_source} on top of {target_branch}. "
            "Rebase manually and push before trying again.",
            guidance=[
                f"git checkout {source_branch}",
                f"git rebase {target_branch}  (and fix up any conflicts)",
                "git push --force-with-lease",
            ],
        )


class CommandFailure(MergeError):
    def __init__(self, message: str, error: GitError | None = None) -> None:
        super().__init__(message)
        self.error = error


class WorkflowInterrupted(MergeError):
    exit_code = 130
