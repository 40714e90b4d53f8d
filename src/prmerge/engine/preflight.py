from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from prmerge.models.pull_request import (
    STATE_FAILURE,
    STATE_PENDING,
    STATE_SUCCESS,
    PullRequest,
    Status,
)


class GateStatus(str, Enum):
    PROCEED = "PROCEED"
    BLOCKED = "BLOCKED"


class GateSeverity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"


class GateOutcome(BaseModel):
    status: GateStatus
    severity: GateSeverity | None = None
    reason: str = ""
    statuses: list[Status] = Field(default_factory=list)

    @property
    def proceed(self) -> bool:
        return self.status == GateStatus.PROCEED


def evaluate(pull: PullRequest, override: bool) -> GateOutcome:
    """Decide whether the pull request's status checks allow a merge.

    The combined ``pull.state`` is authoritative: a ``success`` state
    proceeds even if individual statuses disagree. Pending or unknown states
    block only when there is at least one status to wait on.
    """
    if override:
        return GateOutcome(status=GateStatus.PROCEED)

    if pull.state == STATE_FAILURE:
        return GateOutcome(
            status=GateStatus.BLOCKED,
            severity=GateSeverity.ERROR,
            reason=(
                "One or more status checks have failed on this pull request!\n"
                "You should fix these before merging."
            ),
            statuses=pull.statuses_in(STATE_FAILURE),
        )

    if pull.state == STATE_SUCCESS or not pull.statuses:
        return GateOutcome(status=GateStatus.PROCEED)

    return GateOutcome(
        status=GateStatus.BLOCKED,
        severity=GateSeverity.WARNING,
        reason=(
            "One or more status checks is in progress on this pull request.\n"
            "You should let them finish."
        ),
        statuses=pull.statuses_in(STATE_PENDING),
    )
