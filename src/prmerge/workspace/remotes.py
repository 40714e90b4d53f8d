from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from prmerge.workspace import git_ops

logger = logging.getLogger(__name__)

# user@host:path, as used by ssh remotes
_SCP_RE = re.compile(r"^(?:[\w.+-]+@)?([\w.-]+):(?!//)(.+)$")


def normalize_url(url: str) -> str:
    """Reduce a remote URL to ``host/path`` so ssh, git and https forms compare equal."""
    url = url.strip()
    if "://" in url:
        parsed = urlparse(url)
        path = f"{parsed.hostname or ''}{parsed.path}"
    else:
        match = _SCP_RE.match(url)
        path = f"{match.group(1)}/{match.group(2)}" if match else url
    path = path.rstrip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    return path.lower()


def repo_slug_from_url(url: str) -> str:
    """``owner/name`` from a GitHub remote URL, or ``""`` when it isn't one."""
    parts = normalize_url(url).split("/")
    if len(parts) >= 3 and parts[0].endswith("github.com"):
        return f"{parts[-2]}/{parts[-1]}"
    return ""


@dataclass(frozen=True)
class Remote:
    name: str
    url: str
    repo_path: Path

    def fetch(self) -> None:
        git_ops.fetch(self.name, cwd=self.repo_path)

    def __str__(self) -> str:
        return self.name


class RemoteResolver:
    """Finds, or adds, the local remote that points at a given repository."""

    def __init__(self, repo_path: Path) -> None:
        self._repo_path = repo_path

    def ensure_remote(self, owner_login: str, ssh_url: str, git_url: str) -> Remote:
        wanted = {normalize_url(u) for u in (ssh_url, git_url) if u}
        existing = git_ops.remotes(cwd=self._repo_path)

        for name, url in existing.items():
            if normalize_url(url) in wanted:
                return Remote(name=name, url=url, repo_path=self._repo_path)

        name = self._free_name(owner_login, existing)
        url = ssh_url or git_url
        logger.info("Adding remote '%s' for %s", name, url)
        git_ops.remote_add(name, url, cwd=self._repo_path)
        return Remote(name=name, url=url, repo_path=self._repo_path)

    def _free_name(self, owner_login: str, existing: dict[str, str]) -> str:
        base = re.sub(r"[^A-Za-z0-9_.-]", "-", owner_login) or "remote"
        name = base
        counter = 2
        while name in existing:
            name = f"{base}-{counter}"
            counter += 1
        return name
