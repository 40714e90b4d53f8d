from __future__ import annotations

from pathlib import Path

from prmerge.workspace import git_ops


def branches_identical(ref_a: str, ref_b: str, *, cwd: Path) -> bool:
    """True when both refs resolve to the same commit and diff to zero files."""
    if git_ops.rev_parse_short(ref_a, cwd=cwd) != git_ops.rev_parse_short(ref_b, cwd=cwd):
        return False
    return not git_ops.changed_files(ref_a, ref_b, cwd=cwd)
