"""Worktree data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class CommitInfo:
    """Metadata of a single commit."""

    hash: str
    author: str
    date: Optional[datetime]
    message: str
    files: List[str] = field(default_factory=list)


@dataclass
class WorktreeInfo:
    """Information about a git worktree."""

    path: str
    branch_name: str
    commit_sha: str
    is_main: bool = False  # Is this the main working tree?
    is_orphaned: bool = False  # Directory missing?
    is_clean: bool = True
    has_uncommitted: bool = False
    status_unknown: bool = False  # git status could not be read

    last_commit: Optional[CommitInfo] = None
    created: Optional[datetime] = None
    last_accessed: Optional[datetime] = None
    session_name: str = ""

    @property
    def is_detached(self) -> bool:
        """True when HEAD is not on a branch."""
        return not self.branch_name

    def __str__(self) -> str:
        """String representation of worktree."""
        if self.is_orphaned:
            status = "orphaned"
        elif self.status_unknown:
            status = "unknown"
        else:
            status = "clean" if self.is_clean else "dirty"
        main_marker = " (main)" if self.is_main else ""
        branch = self.branch_name or "(detached)"
        return f"{branch} @ {self.path}{main_marker} [{status}]"


@dataclass
class WorktreeStats:
    """Counts over a worktree listing."""

    total: int = 0
    clean: int = 0
    dirty: int = 0
    unknown: int = 0
    with_session: int = 0
