"""
git-worktree-keeper - Safe naming, placement and lifecycle management of git worktrees
"""

from .__version__ import __version__
from .core import WorktreeKeeper

__all__ = ["WorktreeKeeper", "__version__"]
