from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from prmerge.cli.pull_source import load_pull_request, load_settings, resolve_repo_slug
from prmerge.config.settings import MergeOptions
from prmerge.engine.errors import MergeError
from prmerge.engine.orchestrator import MergeOrchestrator
from prmerge.events.dispatcher import EventDispatcher
from prmerge.events.observer import StdoutObserver
from prmerge.interviewer.auto_approve import AutoApproveInterviewer
from prmerge.interviewer.base import Interviewer
from prmerge.interviewer.console import ConsoleInterviewer
from prmerge.workspace import git_ops
from prmerge.workspace.remotes import RemoteResolver


def merge(
    number: int = typer.Argument(..., help="Pull request number"),
    repo: Optional[str] = typer.Option(None, "--repo", help="GitHub repository as owner/name"),
    override: bool = typer.Option(
        False, "--yolo", "--override", help="Merge even if status checks failed or are pending"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Narrate cleanup steps"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Push without asking for confirmation"),
) -> None:
    """Rebase a pull request onto its target branch and merge it with a merge commit."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    repo_path = Path.cwd()
    if not git_ops.is_git_repo(repo_path):
        typer.echo(f"Error: not a git repository: {repo_path}")
        raise typer.Exit(code=1)

    config = load_settings(repo_path)
    options = MergeOptions.from_config(config, override=override, verbose=verbose, assume_yes=yes)

    slug = resolve_repo_slug(repo, config, repo_path)
    pull = load_pull_request(config, slug, number)

    dispatcher = EventDispatcher()
    dispatcher.add_observer(StdoutObserver(verbose=options.verbose))

    interviewer: Interviewer
    if options.assume_yes:
        interviewer = AutoApproveInterviewer()
    else:
        interviewer = ConsoleInterviewer()

    orchestrator = MergeOrchestrator(
        pull,
        options,
        resolver=RemoteResolver(repo_path),
        interviewer=interviewer,
        events=dispatcher,
        repo_path=repo_path,
    )
    try:
        orchestrator.run()
    except MergeError as e:
        raise typer.Exit(code=e.exit_code)
    except KeyboardInterrupt:
        typer.echo("\nInterrupted.")
        raise typer.Exit(code=130)
