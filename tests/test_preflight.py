import pytest

from prmerge.engine.preflight import GateSeverity, GateStatus, evaluate
from prmerge.models.pull_request import PullRequest, RepoRef, Status, summary_icon


def _pull(state: str, statuses: list[Status] | None = None) -> PullRequest:
    return PullRequest(
        number=12,
        title="Fix things",
        head=RepoRef(ref="feature/x", owner_login="octo"),
        base=RepoRef(ref="develop", owner_login="octo"),
        state=state,
        statuses=statuses or [],
    )


MIXED = [
    Status(context="ci", state="failure", target_url="https://ci/1"),
    Status(context="lint", state="success"),
    Status(context="deploy", state="pending"),
    Status(context="docs", state="failure"),
]


class TestEvaluate:
    def test_failure_lists_only_failed_statuses(self) -> None:
        outcome = evaluate(_pull("failure", MIXED), override=False)
        assert outcome.status == GateStatus.BLOCKED
        assert outcome.severity == GateSeverity.ERROR
        assert [s.context for s in outcome.statuses] == ["ci", "docs"]

    def test_success_proceeds_despite_failed_entries(self) -> None:
        outcome = evaluate(_pull("success", MIXED), override=False)
        assert outcome.proceed

    def test_pending_lists_only_pending_statuses(self) -> None:
        outcome = evaluate(_pull("pending", MIXED), override=False)
        assert outcome.status == GateStatus.BLOCKED
        assert outcome.severity == GateSeverity.WARNING
        assert [s.context for s in outcome.statuses] == ["deploy"]

    def test_unknown_state_without_statuses_proceeds(self) -> None:
        assert evaluate(_pull("pending"), override=False).proceed
        assert evaluate(_pull("error"), override=False).proceed

    @pytest.mark.parametrize("state", ["failure", "pending", "success", "error"])
    def test_override_always_proceeds(self, state: str) -> None:
        assert evaluate(_pull(state, MIXED), override=True).proceed


class TestPullRequest:
    def test_summary(self) -> None:
        assert _pull("success").summary == "PR #12 from octo:feature/x: Fix things"

    def test_icons(self) -> None:
        assert summary_icon("success") == "✓"
        assert summary_icon("failure") == "✗"
        assert summary_icon("pending") == "●"
        assert summary_icon("error") == "?"
