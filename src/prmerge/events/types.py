from __future__ import annotations

from pydantic import BaseModel, Field

from prmerge.models.pull_request import Status


class Event(BaseModel):
    event_type: str


class PreflightBlocked(Event):
    event_type: str = "PreflightBlocked"
    pull_number: int
    severity: str
    reason: str
    statuses: list[Status] = Field(default_factory=list)


class MergeStarted(Event):
    event_type: str = "MergeStarted"
    summary: str
    source_url: str
    source_branch: str
    target_url: str
    target_branch: str


class RemoteFetching(Event):
    event_type: str = "RemoteFetching"
    remote: str


class TargetUpdating(Event):
    event_type: str = "TargetUpdating"
    branch: str


class TempBranchCreating(Event):
    event_type: str = "TempBranchCreating"
    branch: str


class Rebasing(Event):
    event_type: str = "Rebasing"
    branch: str
    onto: str


class SourcePushing(Event):
    event_type: str = "SourcePushing"
    branch: str
    remote: str
    source_branch: str


class LocalMerging(Event):
    event_type: str = "LocalMerging"
    branch: str
    target_branch: str


class ReviewStarted(Event):
    event_type: str = "ReviewStarted"
    target_branch: str
    base_commit: str


class TargetPushing(Event):
    event_type: str = "TargetPushing"
    remote: str
    branch: str


class SourceBranchDeleted(Event):
    event_type: str = "SourceBranchDeleted"
    branch: str
    sha: str


class MergeCompleted(Event):
    event_type: str = "MergeCompleted"
    summary: str


class MergeRolledBack(Event):
    event_type: str = "MergeRolledBack"
    branch: str
    reset_to: str


class MergeFailed(Event):
    event_type: str = "MergeFailed"
    error: str
    guidance: list[str] = Field(default_factory=list)


class CleanupActionRun(Event):
    event_type: str = "CleanupActionRun"
    description: str


EVENT_TYPE_MAP: dict[str, type[Event]] = {
    "PreflightBlocked": PreflightBlocked,
    "MergeStarted": MergeStarted,
    "RemoteFetching": RemoteFetching,
    "TargetUpdating": TargetUpdating,
    "TempBranchCreating": TempBranchCreating,
    "Rebasing": Rebasing,
    "SourcePushing": SourcePushing,
    "LocalMerging": LocalMerging,
    "ReviewStarted": ReviewStarted,
    "TargetPushing": TargetPushing,
    "SourceBranchDeleted": SourceBranchDeleted,
    "MergeCompleted": MergeCompleted,
    "MergeRolledBack": MergeRolledBack,
    "MergeFailed": MergeFailed,
    "CleanupActionRun": CleanupActionRun,
}
