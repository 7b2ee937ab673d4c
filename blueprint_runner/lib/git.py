from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from .command import CmdResult, run_cmd

logger = logging.getLogger(__name__)

_UP_TO_DATE_MARKERS = ("already up to date", "already up-to-date")


class GitError(RuntimeError):
    pass


def _git(argv: list[str], *, cwd: str | None = None) -> CmdResult:
    try:
        # C locale keeps "Already up to date." parseable.
        r = run_cmd(["git", *argv], check=False, cwd=cwd, env={"LC_ALL": "C"})
    except (OSError, ValueError, subprocess.SubprocessError) as e:
        raise GitError(f"git {argv[0]} failed: {e}") from e
    if r.returncode != 0:
        raise GitError(f"git {argv[0]} failed ({r.returncode}): {(r.stderr or r.stdout).strip()}")
    return r


def clone(url: str, dest: str) -> None:
    _git(["clone", url, dest])


def open_repo(path: str) -> Path:
    """Check that path is the top level of a git work tree (parents are not searched)."""

    r = _git(["rev-parse", "--show-toplevel"], cwd=path)
    top = Path(r.stdout.strip()).resolve()
    if top != Path(path).resolve():
        raise GitError(f"{path} is not the root of a git repository (found {top})")
    return top


def pull(path: str) -> bool:
    """Pull the current branch. Returns False when nothing changed."""

    r = _git(["pull"], cwd=path)
    out = r.stdout.lower()
    return not any(m in out for m in _UP_TO_DATE_MARKERS)
