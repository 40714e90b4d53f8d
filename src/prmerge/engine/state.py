from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class WorkflowStage(str, Enum):
    START = "START"
    REMOTES_ENSURED = "REMOTES_ENSURED"
    FETCHED = "FETCHED"
    ORIGINAL_BRANCH_RECORDED = "ORIGINAL_BRANCH_RECORDED"
    TARGET_SYNCED = "TARGET_SYNCED"
    TARGET_VERIFIED = "TARGET_VERIFIED"
    SOURCE_VERIFIED = "SOURCE_VERIFIED"
    TEMP_BRANCH_CREATED = "TEMP_BRANCH_CREATED"
    REBASED = "REBASED"
    SOURCE_PUSHED = "SOURCE_PUSHED"
    LOCALLY_MERGED = "LOCALLY_MERGED"
    REVIEW_PRESENTED = "REVIEW_PRESENTED"
    COMPLETED = "COMPLETED"
    ROLLED_BACK = "ROLLED_BACK"


@dataclass
class WorkflowState:
    stage: WorkflowStage = WorkflowStage.START
    reached: list[WorkflowStage] = field(default_factory=list)
    original_branch: str = ""
    checked_out: str = ""
    source_remote: str = ""
    target_remote: str = ""
    temp_branch: str = ""
    restore_sha: str = ""

    def advance(self, stage: WorkflowStage) -> None:
        self.stage = stage
        self.reached.append(stage)

    def has_reached(self, stage: WorkflowStage) -> bool:
        return stage in self.reached

    def record_checkout(self, branch: str) -> None:
        self.checked_out = branch
