import httpx
import pytest

from prmerge.github.client import GitHubClient, GitHubConnectionError, GitHubError

PULL = {
    "number": 42,
    "title": "Add categories",
    "body": "Implements categories.",
    "head": {
        "ref": "feature/categories",
        "sha": "abc123",
        "user": {"login": "floatplane"},
        "repo": {
            "full_name": "floatplane/app",
            "ssh_url": "git@github.com:floatplane/app.git",
            "git_url": "git://github.com/floatplane/app.git",
            "clone_url": "https://github.com/floatplane/app.git",
        },
    },
    "base": {
        "ref": "develop",
        "sha": "def456",
        "user": {"login": "acme"},
        "repo": {
            "full_name": "acme/app",
            "ssh_url": "git@github.com:acme/app.git",
            "git_url": "git://github.com/acme/app.git",
            "clone_url": "https://github.com/acme/app.git",
        },
    },
}

STATUS = {
    "state": "failure",
    "statuses": [
        {"context": "ci", "state": "failure", "target_url": "https://ci/42"},
        {"context": "lint", "state": "success", "target_url": None},
    ],
}


def _client(handler) -> GitHubClient:
    return GitHubClient("https://api.example.test", token="t0ken", transport=httpx.MockTransport(handler))


def test_loads_pull_request_with_statuses() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/repos/acme/app/pulls/42":
            return httpx.Response(200, json=PULL)
        if request.url.path == "/repos/acme/app/commits/abc123/status":
            return httpx.Response(200, json=STATUS)
        return httpx.Response(404)

    pull = _client(handler).get_pull_request("acme/app", 42)

    assert pull.number == 42
    assert pull.head.ref == "feature/categories"
    assert pull.head.owner_login == "floatplane"
    assert pull.base.ssh_url == "git@github.com:acme/app.git"
    assert pull.state == "failure"
    assert [s.context for s in pull.statuses] == ["ci", "lint"]
    assert pull.statuses[1].target_url == ""
    assert pull.summary == "PR #42 from floatplane:feature/categories: Add categories"
    assert seen[0].headers["Authorization"] == "Bearer t0ken"


def test_missing_body_becomes_empty() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/status"):
            return httpx.Response(200, json={"state": "pending", "statuses": []})
        return httpx.Response(200, json={**PULL, "body": None})

    pull = _client(handler).get_pull_request("acme/app", 42)
    assert pull.body == ""
    assert pull.state == "pending"


def test_deleted_head_repo_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/status"):
            return httpx.Response(200, json=STATUS)
        return httpx.Response(200, json={**PULL, "head": {**PULL["head"], "repo": None}})

    with pytest.raises(GitHubError, match="no head repository"):
        _client(handler).get_pull_request("acme/app", 42)


def test_http_error_raises() -> None:
    with pytest.raises(GitHubError, match="404"):
        _client(lambda request: httpx.Response(404)).get_pull_request("acme/app", 1)


def test_connection_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(GitHubConnectionError):
        _client(handler).get_pull_request("acme/app", 1)
