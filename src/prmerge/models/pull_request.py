from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

STATE_SUCCESS = "success"
STATE_FAILURE = "failure"
STATE_PENDING = "pending"

_ICONS = {
    STATE_SUCCESS: "✓",
    STATE_FAILURE: "✗",
    STATE_PENDING: "●",
}


def summary_icon(state: str) -> str:
    return _ICONS.get(state, "?")


class Status(BaseModel):
    model_config = ConfigDict(frozen=True)

    context: str
    state: str
    target_url: str = ""


class RepoRef(BaseModel):
    """One side (head or base) of a pull request."""

    model_config = ConfigDict(frozen=True)

    ref: str
    owner_login: str
    ssh_url: str = ""
    git_url: str = ""

    @property
    def label(self) -> str:
        return f"{self.owner_login}:{self.ref}"


class PullRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    title: str = ""
    head: RepoRef
    base: RepoRef
    state: str = STATE_PENDING
    statuses: list[Status] = Field(default_factory=list)
    body: str = ""

    @property
    def summary(self) -> str:
        return f"PR #{self.number} from {self.head.label}: {self.title}"

    def statuses_in(self, state: str) -> list[Status]:
        return [s for s in self.statuses if s.state == state]
