from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class GitError(Exception):
    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"git command failed ({returncode}): {' '.join(command)}\n{stderr}")


def run_git(*args: str, cwd: Path, stream: bool = False) -> str:
    """Run a git subcommand and return its stripped stdout.

    With ``stream=True`` stdout is inherited from the parent process so the
    user sees output (colors included) as it is produced, and ``""`` is
    returned.
    """
    cmd = ["git", *args]
    logger.debug("git %s", " ".join(args))
    result = subprocess.run(
        cmd,
        cwd=cwd,
        stdout=None if stream else subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    if result.returncode != 0:
        # rebase and merge report conflicts on stdout
        message = result.stderr.strip() or (result.stdout or "").strip()
        raise GitError(cmd, result.returncode, message)
    return "" if stream else result.stdout.strip()


def rev_parse_short(ref: str, *, cwd: Path) -> str:
    return run_git("rev-parse", "--short", ref, cwd=cwd)


def current_branch(*, cwd: Path) -> str:
    return run_git("rev-parse", "--abbrev-ref", "HEAD", cwd=cwd)


def is_git_repo(path: Path) -> bool:
    try:
        run_git("rev-parse", "--is-inside-work-tree", cwd=path)
        return True
    except (GitError, FileNotFoundError):
        return False


def is_local_branch(name: str, *, cwd: Path) -> bool:
    try:
        run_git("show-ref", "--verify", "--quiet", f"refs/heads/{name}", cwd=cwd)
        return True
    except GitError:
        return False


def checkout(ref: str, *, cwd: Path) -> None:
    run_git("checkout", "-q", ref, cwd=cwd)


def checkout_new_branch(name: str, start_point: str, *, track: bool = False, cwd: Path) -> None:
    args = ["checkout", "-q", "-b", name]
    if track:
        args.append("--track")
    args.append(start_point)
    run_git(*args, cwd=cwd)


def branch_delete(name: str, *, cwd: Path) -> None:
    run_git("branch", "-D", name, cwd=cwd)


def changed_files(ref_a: str, ref_b: str, *, cwd: Path) -> list[str]:
    """Paths that differ between two refs, from ``git diff --numstat``."""
    output = run_git("diff", "--numstat", ref_a, ref_b, cwd=cwd)
    return [line.split("\t", 2)[-1] for line in output.splitlines() if line]


def fetch(remote: str, *, cwd: Path) -> None:
    run_git("fetch", "-q", remote, cwd=cwd)


def pull_ff_only(remote: str, branch: str, *, cwd: Path) -> None:
    run_git("pull", "-q", "--no-rebase", "--ff-only", remote, branch, cwd=cwd)


def rebase(onto: str, *, cwd: Path) -> None:
    run_git("rebase", onto, cwd=cwd)


def rebase_abort(*, cwd: Path) -> None:
    run_git("rebase", "--abort", cwd=cwd)


def push_force_with_lease(remote: str, refspec: str, *, cwd: Path) -> None:
    run_git("push", "-q", "--force-with-lease", remote, refspec, cwd=cwd)


def push(remote: str, branch: str, *, cwd: Path) -> None:
    run_git("push", "-q", remote, branch, cwd=cwd)


def push_delete(remote: str, branch: str, *, cwd: Path) -> None:
    run_git("push", "-q", remote, f":{branch}", cwd=cwd)


def merge_no_ff(branch: str, message: str, *, cwd: Path) -> None:
    run_git("merge", "-q", "--no-ff", branch, "-m", message, cwd=cwd)


def reset_hard(ref: str, *, cwd: Path) -> None:
    run_git("reset", "-q", "--hard", ref, cwd=cwd)


def rev_list_parents(ref: str, *, cwd: Path) -> list[str]:
    """Abbreviated id of ``ref`` followed by the ids of its parents."""
    return run_git("rev-list", "--abbrev-commit", "--parents", "-n", "1", ref, cwd=cwd).split()


def log_graph(tip: str, revision_range: str, *, cwd: Path, stream: bool = True) -> str:
    return run_git(
        "log",
        "--graph",
        "--decorate",
        "--pretty=oneline",
        "--abbrev-commit",
        "--color",
        tip,
        revision_range,
        cwd=cwd,
        stream=stream,
    )


def remotes(*, cwd: Path) -> dict[str, str]:
    """Map of remote name to fetch URL."""
    output = run_git("remote", "-v", cwd=cwd)
    result: dict[str, str] = {}
    for line in output.splitlines():
        parts = line.split()
        if len(parts) >= 3 and parts[2] == "(fetch)":
            result[parts[0]] = parts[1]
    return result


def remote_add(name: str, url: str, *, cwd: Path) -> None:
    run_git("remote", "add", name, url, cwd=cwd)


def remote_ref(remote: str, branch: str) -> str:
    """Fully qualified remote-tracking ref, immune to same-named local branches."""
    return f"refs/remotes/{remote}/{branch}"


def local_ref(branch: str) -> str:
    return f"refs/heads/{branch}"
