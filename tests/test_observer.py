import pytest

from prmerge.events.dispatcher import EventDispatcher
from prmerge.events.observer import StdoutObserver, format_status_lines
from prmerge.models.pull_request import Status


def _emit(observer: StdoutObserver, event_type: str, **data: object) -> None:
    dispatcher = EventDispatcher()
    dispatcher.add_observer(observer)
    dispatcher.emit(event_type, **data)


def test_format_status_lines_aligns_contexts() -> None:
    lines = format_status_lines(
        [
            Status(context="ci", state="failure", target_url="https://ci/1"),
            Status(context="coverage", state="pending", target_url="https://cov/1"),
        ]
    )
    assert lines == [
        "✗  ci        https://ci/1",
        "●  coverage  https://cov/1",
    ]


def test_blocked_lists_statuses_and_override_hint(capsys: pytest.CaptureFixture[str]) -> None:
    _emit(
        StdoutObserver(),
        "PreflightBlocked",
        pull_number=12,
        severity="ERROR",
        reason="One or more status checks have failed on this pull request!",
        statuses=[Status(context="ci", state="failure", target_url="https://ci/1")],
    )
    out = capsys.readouterr().out
    assert "ERROR" in out
    assert "ci" in out
    assert "prmerge merge --yolo 12" in out


def test_failure_prints_guidance(capsys: pytest.CaptureFixture[str]) -> None:
    _emit(
        StdoutObserver(),
        "MergeFailed",
        error="Unable to automatically rebase origin/feature/x on top of develop.",
        guidance=["git checkout feature/x", "git push --force-with-lease"],
    )
    out = capsys.readouterr().out
    assert "Unable to automatically rebase" in out
    assert "Run: git checkout feature/x" in out


def test_cleanup_narration_only_when_verbose(capsys: pytest.CaptureFixture[str]) -> None:
    _emit(StdoutObserver(), "CleanupActionRun", description="Removing temporary branch x-rebase")
    assert capsys.readouterr().out == ""
    _emit(StdoutObserver(verbose=True), "CleanupActionRun", description="Removing temporary branch x-rebase")
    assert "Removing temporary branch x-rebase" in capsys.readouterr().out


def test_unknown_event_is_dropped(capsys: pytest.CaptureFixture[str]) -> None:
    _emit(StdoutObserver(verbose=True), "NoSuchEvent", description="x")
    assert capsys.readouterr().out == ""
