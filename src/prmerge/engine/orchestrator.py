from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from prmerge.config.settings import MergeOptions
from prmerge.engine import preflight
from prmerge.engine.cleanup import CleanupGuard, EventEmitter
from prmerge.engine.comparator import branches_identical
from prmerge.engine.errors import (
    CommandFailure,
    GateBlocked,
    MergeError,
    NameCollision,
    RebaseConflict,
    SyncMismatch,
)
from prmerge.engine.state import WorkflowStage, WorkflowState
from prmerge.interviewer.base import Interviewer
from prmerge.interviewer.models import Question, QuestionType
from prmerge.models.pull_request import PullRequest
from prmerge.workspace import git_ops
from prmerge.workspace.git_ops import GitError
from prmerge.workspace.remotes import Remote, RemoteResolver

logger = logging.getLogger(__name__)


class MergeOrchestrator:
    """Rebases a pull request onto its target and merges it with ``--no-ff``.

    Stages run strictly in order. Anything that changes which branch is
    checked out, or creates a branch, registers its undo with a
    :class:`CleanupGuard` so the working copy ends up back on the branch the
    user started from, without a leftover temporary branch, however the run
    ends.
    """

    def __init__(
        self,
        pull: PullRequest,
        options: MergeOptions,
        *,
        resolver: RemoteResolver,
        interviewer: Interviewer,
        events: EventEmitter,
        repo_path: Path,
    ) -> None:
        self._pull = pull
        self._options = options
        self._resolver = resolver
        self._interviewer = interviewer
        self._events = events
        self._repo_path = repo_path
        self._original_detached = False
        self.state = WorkflowState()

    @property
    def source_branch(self) -> str:
        return self._pull.head.ref

    @property
    def target_branch(self) -> str:
        return self._pull.base.ref

    @property
    def temp_branch(self) -> str:
        return f"{self.source_branch}{self._options.temp_branch_suffix}"

    def run(self) -> WorkflowState:
        outcome = preflight.evaluate(self._pull, self._options.override)
        if not outcome.proceed:
            self._events.emit(
                "PreflightBlocked",
                pull_number=self._pull.number,
                severity=outcome.severity.value if outcome.severity else "",
                reason=outcome.reason,
                statuses=outcome.statuses,
            )
            raise GateBlocked(outcome)

        self._events.emit(
            "MergeStarted",
            summary=self._pull.summary,
            source_url=self._pull.head.git_url,
            source_branch=self.source_branch,
            target_url=self._pull.base.git_url,
            target_branch=self.target_branch,
        )

        with CleanupGuard(self._events) as guard:
            try:
                self._run_stages(guard)
            except MergeError as e:
                self._events.emit("MergeFailed", error=str(e), guidance=e.guidance)
                raise
        return self.state

    def _run_stages(self, guard: CleanupGuard) -> None:
        source_remote, target_remote = self._ensure_remotes()
        self._fetch_remotes(source_remote, target_remote)
        self._record_original_branch(guard)

        target = self.target_branch
        source = self.source_branch
        # Short names are for messages only; git always gets the qualified refs.
        remote_target = f"{target_remote.name}/{target}"
        remote_source = f"{source_remote.name}/{source}"
        target_ref = git_ops.remote_ref(target_remote.name, target)
        source_ref = git_ops.remote_ref(source_remote.name, source)

        self._sync_target(target_remote)

        if not self._identical(target_ref, git_ops.local_ref(target)):
            raise SyncMismatch(target, remote_target)
        self.state.advance(WorkflowStage.TARGET_VERIFIED)

        if self._is_local_branch(source) and not self._identical(
            source_ref, git_ops.local_ref(source)
        ):
            raise SyncMismatch(source, remote_source)
        self.state.advance(WorkflowStage.SOURCE_VERIFIED)

        self._create_temp_branch(source_ref, guard)
        self._rebase(remote_source)

        self._events.emit(
            "SourcePushing",
            branch=self.temp_branch,
            remote=source_remote.name,
            source_branch=source,
        )
        self._git(git_ops.push_force_with_lease, source_remote.name, f"HEAD:{source}")
        self.state.advance(WorkflowStage.SOURCE_PUSHED)

        self._merge_locally()
        self._present_review(target_ref)

        answer = self._interviewer.ask(
            Question(
                text="Do you want to proceed with the merge",
                type=QuestionType.CONFIRMATION,
            )
        )
        if answer.confirmed:
            self._complete(source_remote, target_remote, source_ref)
        else:
            self._roll_back(remote_target, target_ref)

    # -- stages --------------------------------------------------------------

    def _ensure_remotes(self) -> tuple[Remote, Remote]:
        head, base = self._pull.head, self._pull.base
        try:
            source_remote = self._resolver.ensure_remote(head.owner_login, head.ssh_url, head.git_url)
            target_remote = self._resolver.ensure_remote(base.owner_login, base.ssh_url, base.git_url)
        except GitError as e:
            raise CommandFailure(f"Unable to set up remotes: {e.stderr}", e) from e
        self.state.source_remote = source_remote.name
        self.state.target_remote = target_remote.name
        self.state.advance(WorkflowStage.REMOTES_ENSURED)
        return source_remote, target_remote

    def _fetch_remotes(self, source_remote: Remote, target_remote: Remote) -> None:
        remotes = [source_remote]
        if target_remote.name != source_remote.name:
            remotes.append(target_remote)
        for remote in remotes:
            self._events.emit("RemoteFetching", remote=remote.name)
            try:
                remote.fetch()
            except GitError as e:
                raise CommandFailure(e.stderr or str(e), e) from e
        self.state.advance(WorkflowStage.FETCHED)

    def _record_original_branch(self, guard: CleanupGuard) -> None:
        original = self._git(git_ops.current_branch)
        if original == "HEAD":
            self._original_detached = True
            original = self._git(git_ops.rev_parse_short, "HEAD")
        self.state.original_branch = original
        self.state.record_checkout(original)
        guard.register(
            f"Restore original branch '{original}'",
            lambda: self._restore_original_branch(guard),
        )
        self.state.advance(WorkflowStage.ORIGINAL_BRANCH_RECORDED)

    def _sync_target(self, target_remote: Remote) -> None:
        target = self.target_branch
        self._events.emit("TargetUpdating", branch=target)
        if self._is_local_branch(target):
            self._git(git_ops.checkout, target)
        else:
            self._git(
                git_ops.checkout_new_branch,
                target,
                git_ops.remote_ref(target_remote.name, target),
                track=True,
            )
        self.state.record_checkout(target)
        self._git(
            git_ops.pull_ff_only,
            target_remote.name,
            target,
            failure=(
                f"Unable to update local target branch '{target}'. "
                "Please repair manually before continuing."
            ),
        )
        self.state.advance(WorkflowStage.TARGET_SYNCED)

    def _create_temp_branch(self, source_ref: str, guard: CleanupGuard) -> None:
        temp = self.temp_branch
        self._events.emit("TempBranchCreating", branch=temp)
        if self._is_local_branch(temp):
            self._git(git_ops.checkout, self.state.original_branch)
            self.state.record_checkout(self.state.original_branch)
            raise NameCollision(temp)

        self._git(git_ops.checkout_new_branch, temp, source_ref)
        self.state.temp_branch = temp
        self.state.record_checkout(temp)
        guard.register(
            f"Remove temporary branch '{temp}'",
            lambda: self._remove_temp_branch(guard),
        )
        self.state.advance(WorkflowStage.TEMP_BRANCH_CREATED)

    def _rebase(self, remote_source: str) -> None:
        target = self.target_branch
        self._events.emit("Rebasing", branch=self.temp_branch, onto=target)
        try:
            git_ops.rebase(target, cwd=self._repo_path)
        except GitError as e:
            logger.debug("Rebase failed: %s", e.stderr)
            try:
                git_ops.rebase_abort(cwd=self._repo_path)
            except GitError:
                logger.warning("Failed to abort rebase of '%s'", self.temp_branch, exc_info=True)
            raise RebaseConflict(remote_source, self.source_branch, target) from e
        self.state.advance(WorkflowStage.REBASED)

    def _merge_locally(self) -> None:
        target = self.target_branch
        self._events.emit("LocalMerging", branch=self.temp_branch, target_branch=target)
        self._git(git_ops.checkout, target)
        self.state.record_checkout(target)
        message = f"Merge {self._pull.summary}\n\n{self._pull.body}\n"
        self._git(git_ops.merge_no_ff, self.temp_branch, message)
        self.state.advance(WorkflowStage.LOCALLY_MERGED)

    def _present_review(self, target_ref: str) -> None:
        # When the remote tip is a merge commit, start from its last parent so
        # the graph stops exactly where the new history branches off.
        base_commit = self._git(git_ops.rev_list_parents, target_ref)[-1]
        self._events.emit("ReviewStarted", target_branch=self.target_branch, base_commit=base_commit)
        tip = git_ops.local_ref(self.target_branch)
        self._git(git_ops.log_graph, tip, f"{base_commit}..{tip}")
        self.state.advance(WorkflowStage.REVIEW_PRESENTED)

    def _complete(self, source_remote: Remote, target_remote: Remote, source_ref: str) -> None:
        target = self.target_branch
        source = self.source_branch
        self._events.emit("TargetPushing", remote=target_remote.name, branch=target)
        self._git(git_ops.push, target_remote.name, target)

        if self._options.delete_source_branch:
            sha = self._git(git_ops.rev_parse_short, source_ref)
            self._git(git_ops.push_delete, source_remote.name, source)
            if self._is_local_branch(source):
                sha = self._git(git_ops.rev_parse_short, git_ops.local_ref(source))
                self._git(git_ops.branch_delete, source)
            self.state.restore_sha = sha
            self._events.emit("SourceBranchDeleted", branch=source, sha=sha)

        self._events.emit("MergeCompleted", summary=self._pull.summary)
        self.state.advance(WorkflowStage.COMPLETED)

    def _roll_back(self, remote_target: str, target_ref: str) -> None:
        self._events.emit("MergeRolledBack", branch=self.target_branch, reset_to=remote_target)
        self._git(git_ops.reset_hard, target_ref)
        self.state.advance(WorkflowStage.ROLLED_BACK)

    # -- cleanup actions -----------------------------------------------------

    def _remove_temp_branch(self, guard: CleanupGuard) -> None:
        temp = self.state.temp_branch
        if not git_ops.is_local_branch(temp, cwd=self._repo_path):
            return
        guard.narrate(f"Removing temporary branch {temp}")
        # git refuses to delete the branch that is checked out
        if self.state.checked_out == temp:
            git_ops.checkout(self.target_branch, cwd=self._repo_path)
            self.state.record_checkout(self.target_branch)
        git_ops.branch_delete(temp, cwd=self._repo_path)

    def _restore_original_branch(self, guard: CleanupGuard) -> None:
        original = self.state.original_branch
        if not self._original_detached and not git_ops.is_local_branch(original, cwd=self._repo_path):
            return
        guard.narrate(f"Restoring original branch '{original}'")
        git_ops.checkout(original, cwd=self._repo_path)
        self.state.record_checkout(original)

    # -- helpers -------------------------------------------------------------

    def _git(
        self, func: Callable[..., Any], *args: Any, failure: str | None = None, **kwargs: Any
    ) -> Any:
        try:
            return func(*args, cwd=self._repo_path, **kwargs)
        except GitError as e:
            raise CommandFailure(failure or e.stderr or str(e), e) from e

    def _is_local_branch(self, name: str) -> bool:
        return git_ops.is_local_branch(name, cwd=self._repo_path)

    def _identical(self, ref_a: str, ref_b: str) -> bool:
        try:
            return branches_identical(ref_a, ref_b, cwd=self._repo_path)
        except GitError as e:
            raise CommandFailure(e.stderr or str(e), e) from e
