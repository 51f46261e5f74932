"""Git subprocess wrapper — repo root, staged diff, name-status, commit."""

from __future__ import annotations

import os
import subprocess
import tempfile
from pathlib import Path
from typing import Optional


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: list[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip() or result.stdout.strip()
        raise GitError(f"git error: {stderr}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the git repository containing *cwd*."""
    cwd = cwd or Path.cwd()
    try:
        out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    except GitError as exc:
        raise GitError(f"not a git repository (or git error): {exc}") from exc
    return Path(out.strip())


def get_staged_diff(repo_root: Path) -> str:
    """Return the staged diff: zero context, no colour, whitespace changes ignored."""
    return _run_git(
        [
            "-c", "core.quotePath=false",
            "diff", "--staged", "--patch", "--unified=0",
            "--no-color", "--no-ext-diff",
            "--ignore-space-change", "--ignore-all-space", "--ignore-blank-lines",
        ],
        cwd=repo_root,
    )


def get_staged_status(repo_root: Path) -> str:
    """Return ``git diff --staged --name-status`` output (empty when nothing staged)."""
    return _run_git(
        ["-c", "core.quotePath=false", "diff", "--staged", "--name-status", "--no-color"],
        cwd=repo_root,
    )


def commit_with_message(repo_root: Path, message: str) -> str:
    """Commit staged changes with *message*. Returns git's output."""
    fd, tmp_name = tempfile.mkstemp(prefix="diffdigest-", suffix=".txt")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(message)
        return _run_git(["commit", "-F", tmp_name], cwd=repo_root)
    finally:
        os.unlink(tmp_name)
