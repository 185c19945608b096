"""Git-related services for git-worktree-keeper."""

from .command import GitCommand
from .repository import RepositoryService
from .worktrees import WorktreeOptions, WorktreeService

__all__ = [
    "GitCommand",
    "RepositoryService",
    "WorktreeOptions",
    "WorktreeService",
]
