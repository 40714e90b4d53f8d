from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from prmerge.cli.pull_source import load_pull_request, load_settings, resolve_repo_slug
from prmerge.events.observer import format_status_lines
from prmerge.models.pull_request import summary_icon


def status(
    number: int = typer.Argument(..., help="Pull request number"),
    repo: Optional[str] = typer.Option(None, "--repo", help="GitHub repository as owner/name"),
) -> None:
    """Show a pull request's status checks."""
    repo_path = Path.cwd()
    config = load_settings(repo_path)
    slug = resolve_repo_slug(repo, config, repo_path)
    pull = load_pull_request(config, slug, number)

    typer.echo(f"{summary_icon(pull.state)}  {pull.summary}")
    typer.echo(f"   {pull.base.ref} <= {pull.head.label}")
    if not pull.statuses:
        typer.echo("\nNo status checks.")
        return
    typer.echo("")
    for line in format_status_lines(pull.statuses):
        typer.echo(line)
