"""Data models for git-worktree-keeper."""

from .pattern import PatternContext
from .repository import PullRequest, Remote, Repository
from .worktree import CommitInfo, WorktreeInfo, WorktreeStats

__all__ = [
    "CommitInfo",
    "PatternContext",
    "PullRequest",
    "Remote",
    "Repository",
    "WorktreeInfo",
    "WorktreeStats",
]
