from __future__ import annotations

from typing import Any

import httpx

from prmerge.github.exceptions import GitHubConnectionError, GitHubError
from prmerge.models.pull_request import STATE_PENDING, PullRequest, RepoRef, Status

__all__ = ["GitHubClient", "GitHubConnectionError", "GitHubError"]


class GitHubClient:
    """Read-only client for the pull request and commit status endpoints."""

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        token: str = "",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        headers = {"Accept": "application/vnd.github+json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=self._base_url,
            headers=headers,
            timeout=10.0,
            transport=transport,
        )

    def get_pull_request(self, repo: str, number: int) -> PullRequest:
        pull = self._get_json(f"/repos/{repo}/pulls/{number}")
        head_sha = pull.get("head", {}).get("sha", "")
        combined = self._get_json(f"/repos/{repo}/commits/{head_sha}/status") if head_sha else {}

        return PullRequest(
            number=pull["number"],
            title=pull.get("title") or "",
            body=pull.get("body") or "",
            head=_repo_ref(pull.get("head"), "head", number),
            base=_repo_ref(pull.get("base"), "base", number),
            state=combined.get("state") or STATE_PENDING,
            statuses=[
                Status(
                    context=s.get("context") or "",
                    state=s.get("state") or "",
                    target_url=s.get("target_url") or "",
                )
                for s in combined.get("statuses", [])
            ],
        )

    def close(self) -> None:
        self._client.close()

    def _get_json(self, path: str) -> dict[str, Any]:
        try:
            response = self._client.get(path)
            response.raise_for_status()
            return response.json()
        except httpx.ConnectError as e:
            raise GitHubConnectionError(
                f"Cannot connect to GitHub at {self._base_url}: {e}"
            ) from e
        except httpx.HTTPStatusError as e:
            raise GitHubError(
                f"GitHub request {path} failed: {e.response.status_code}"
            ) from e


def _repo_ref(side: dict[str, Any] | None, which: str, number: int) -> RepoRef:
    if not side or not side.get("repo"):
        raise GitHubError(f"Pull request #{number} has no {which} repository (was it deleted?)")
    repo = side["repo"]
    owner = (side.get("user") or repo.get("owner") or {}).get("login", "")
    return RepoRef(
        ref=side["ref"],
        owner_login=owner,
        ssh_url=repo.get("ssh_url", ""),
        git_url=repo.get("git_url", ""),
    )
