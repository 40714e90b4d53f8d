from __future__ import annotations

from pathlib import Path

import typer

from prmerge.config.settings import ConfigError, PrmergeConfig, load_config
from prmerge.github.client import GitHubClient, GitHubConnectionError, GitHubError
from prmerge.models.pull_request import PullRequest
from prmerge.workspace import git_ops
from prmerge.workspace.git_ops import GitError
from prmerge.workspace.remotes import repo_slug_from_url


def load_settings(repo_path: Path) -> PrmergeConfig:
    try:
        return load_config(start=repo_path)
    except ConfigError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(code=1)


def resolve_repo_slug(repo: str | None, config: PrmergeConfig, repo_path: Path) -> str:
    """``owner/name`` from ``--repo``, then config, then the ``origin`` remote."""
    if repo:
        return repo
    if config.github.repo:
        return config.github.repo
    try:
        origin = git_ops.remotes(cwd=repo_path).get("origin", "")
    except GitError:
        origin = ""
    slug = repo_slug_from_url(origin)
    if not slug:
        typer.echo("Error: cannot tell which GitHub repository to use. Pass --repo owner/name.")
        raise typer.Exit(code=1)
    return slug


def load_pull_request(config: PrmergeConfig, repo: str, number: int) -> PullRequest:
    client = GitHubClient(config.github.api_url, config.github.token)
    try:
        return client.get_pull_request(repo, number)
    except GitHubConnectionError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(code=1)
    except GitHubError as e:
        typer.echo(f"Error: Failed to load pull request #{number}: {e}")
        raise typer.Exit(code=1)
    finally:
        client.close()
