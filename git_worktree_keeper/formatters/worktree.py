"""Worktree name, head and path formatting utilities."""

import os
from typing import Optional

from git_worktree_keeper.models.worktree import WorktreeInfo

SHORT_SHA_LENGTH = 7


def format_worktree_name(worktree: WorktreeInfo) -> str:
    """Directory name of the worktree, marked with ``*`` for the main working tree."""
    name = os.path.basename(worktree.path.rstrip(os.sep)) or worktree.path
    return f"* {name}" if worktree.is_main else name


def format_head(worktree: WorktreeInfo) -> str:
    """
    Short commit hash followed by the commit subject when known.

    Args:
        worktree: Worktree to describe

    Returns:
        e.g. ``"a1b2c3d Fix login"``, or ``"-"`` without a commit
    """
    if not worktree.commit_sha:
        return "-"
    short = worktree.commit_sha[:SHORT_SHA_LENGTH]
    if worktree.last_commit and worktree.last_commit.message:
        return f"{short} {worktree.last_commit.message}"
    return short


def shorten_path(path: str, home: Optional[str] = None) -> str:
    """Replace the home directory prefix with ``~``."""
    home = home or os.path.expanduser("~")
    if path == home:
        return "~"
    if path.startswith(home.rstrip(os.sep) + os.sep):
        return "~" + path[len(home.rstrip(os.sep)):]
    return path
