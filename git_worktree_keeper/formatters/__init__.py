"""Formatting utilities for git-worktree-keeper.

Plain string formatters used when displaying worktree listings:
- date: Date and age formatting
- worktree: Names, heads and paths
- status: Status text and row styles
"""

# Date formatters
from .date import format_age, format_date

# Worktree formatters
from .worktree import format_head, format_worktree_name, shorten_path

# Status formatters
from .status import format_stats, format_worktree_status, get_worktree_style_type

__all__ = [
    # Date
    "format_date",
    "format_age",
    # Worktree
    "format_head",
    "format_worktree_name",
    "shorten_path",
    # Status
    "format_stats",
    "format_worktree_status",
    "get_worktree_style_type",
]
