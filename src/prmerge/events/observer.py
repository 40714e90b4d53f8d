from __future__ import annotations

from typing import Protocol

import typer

from prmerge.events.types import (
    CleanupActionRun,
    Event,
    LocalMerging,
    MergeCompleted,
    MergeFailed,
    MergeRolledBack,
    MergeStarted,
    PreflightBlocked,
    Rebasing,
    RemoteFetching,
    ReviewStarted,
    SourceBranchDeleted,
    SourcePushing,
    TargetPushing,
    TargetUpdating,
    TempBranchCreating,
)
from prmerge.models.pull_request import Status, summary_icon

_SEVERITY_COLORS = {"ERROR": typer.colors.RED, "WARNING": typer.colors.YELLOW}


def format_status_lines(statuses: list[Status]) -> list[str]:
    """One aligned ``icon  context  url`` line per status."""
    if not statuses:
        return []
    width = max(len(s.context) for s in statuses)
    return [
        f"{summary_icon(s.state)}  {s.context.ljust(width)}  {s.target_url}".rstrip()
        for s in statuses
    ]


class EventObserver(Protocol):
    def on_event(self, event: Event) -> None: ...


class StdoutObserver:
    def __init__(self, *, verbose: bool = False) -> None:
        self._verbose = verbose

    def on_event(self, event: Event) -> None:
        if isinstance(event, PreflightBlocked):
            self._render_blocked(event)
        elif isinstance(event, MergeStarted):
            typer.secho(f"Merging {event.summary}", fg=typer.colors.CYAN)
            typer.secho(
                f"{event.target_url}/{event.target_branch} <= {event.source_url}/{event.source_branch}\n",
                fg=typer.colors.CYAN,
            )
        elif isinstance(event, RemoteFetching):
            typer.echo(f"Fetching latest changes from '{event.remote}'")
        elif isinstance(event, TargetUpdating):
            typer.echo(f"Update branch '{event.branch}' from remote")
        elif isinstance(event, TempBranchCreating):
            typer.echo(f"Create temporary branch '{event.branch}'")
        elif isinstance(event, Rebasing):
            typer.echo(f"Rebasing '{event.branch}' on top of '{event.onto}'")
        elif isinstance(event, SourcePushing):
            typer.echo(f"Pushing changes from '{event.branch}' to '{event.remote}/{event.source_branch}'")
        elif isinstance(event, LocalMerging):
            typer.echo(f"Merging changes from '{event.branch}' to '{event.target_branch}'")
        elif isinstance(event, ReviewStarted):
            typer.secho("\nVerify that the merge looks clean:\n", fg=typer.colors.CYAN)
        elif isinstance(event, TargetPushing):
            typer.echo(f"Pushing changes to '{event.remote}'")
        elif isinstance(event, SourceBranchDeleted):
            restore = typer.style(f"git branch {event.branch} {event.sha}", fg=typer.colors.GREEN)
            typer.echo(f"Feature branch '{event.branch}' deleted. To restore it, run: {restore}")
        elif isinstance(event, MergeCompleted):
            typer.secho("\nMerge complete!", fg=typer.colors.CYAN)
        elif isinstance(event, MergeRolledBack):
            typer.echo(f"\nUndoing local merge, '{event.branch}' reset to '{event.reset_to}'")
        elif isinstance(event, MergeFailed):
            typer.secho(event.error, fg=typer.colors.RED)
            for i, step in enumerate(event.guidance):
                label = "Run: " if i == 0 else "     "
                typer.echo(label + typer.style(step, fg=typer.colors.YELLOW))
        elif isinstance(event, CleanupActionRun):
            if self._verbose:
                typer.echo(event.description)

    def _render_blocked(self, event: PreflightBlocked) -> None:
        label = typer.style(event.severity, fg=_SEVERITY_COLORS.get(event.severity))
        typer.echo(f"{label}: {event.reason}\n")
        for line in format_status_lines(event.statuses):
            typer.echo(line)
        typer.echo(
            f"\nIf you're still sure you want to merge, run 'prmerge merge --yolo {event.pull_number}'"
        )
