from __future__ import annotations


class GitHubError(Exception):
    pass


class GitHubConnectionError(GitHubError):
    pass
