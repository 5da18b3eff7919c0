"""Staged file and diff retrieval through git."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


class GitError(RuntimeError):
    """Raised when a git query cannot be answered."""


def _run_git(args: Sequence[str], cwd: Optional[Path] = None) -> str:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=True,
        )
    except FileNotFoundError as exc:
        raise GitError("git not found in PATH") from exc
    except subprocess.CalledProcessError as exc:
        raise GitError(f"git {' '.join(args)} failed: {exc.stderr.strip()}") from exc
    return result.stdout


def get_staged_files(cwd: Optional[Path] = None) -> List[str]:
    """Return added, copied and modified staged paths; empty on failure."""

    try:
        output = _run_git(["diff", "--cached", "--name-only", "--diff-filter=ACM"], cwd)
    except GitError as exc:
        logger.warning("Could not list staged files: %s", exc)
        return []
    return [line.strip() for line in output.splitlines() if line.strip()]


def get_staged_diff(cwd: Optional[Path] = None) -> str:
    """Return the staged unified diff; empty on failure."""

    try:
        return _run_git(["diff", "--cached", "--unified=0", "--no-color"], cwd)
    except GitError as exc:
        logger.warning("Could not read staged diff: %s", exc)
        return ""
