"""Display service for worktree listings"""
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from git_worktree_keeper.constants import WORKTREE_COLORS, WORKTREE_COLUMNS
from git_worktree_keeper.formatters import (
    format_age,
    format_head,
    format_stats,
    format_worktree_name,
    format_worktree_status,
    get_worktree_style_type,
    shorten_path,
)
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import WorktreeInfo, WorktreeStats

logger = get_logger(__name__)


class DisplayService:
    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose

    def build_worktree_table(self, worktrees: List[WorktreeInfo]) -> Table:
        """Build a table with one row per worktree."""
        table = Table()
        for _, label in WORKTREE_COLUMNS:
            table.add_column(label)
        if self.verbose:
            table.add_column("Path")

        for wt in worktrees:
            row_style = WORKTREE_COLORS.get(get_worktree_style_type(wt))
            cells = [
                format_worktree_name(wt),
                wt.branch_name or "(detached)",
                format_head(wt),
                format_worktree_status(wt),
                wt.session_name or "-",
                format_age(wt.last_accessed),
            ]
            if self.verbose:
                cells.append(shorten_path(wt.path))
            table.add_row(*cells, style=row_style)

        return table

    def display_worktree_table(self, worktrees: List[WorktreeInfo], stats: Optional[WorktreeStats] = None) -> None:
        """Print the worktree table and, optionally, a summary line."""
        if not worktrees:
            self.console.print("No worktrees found.")
            return

        self.console.print(self.build_worktree_table(worktrees))

        if stats is not None:
            self.console.print(f"\n{format_stats(stats)}")

    def display_removed(self, paths: List[str]) -> None:
        """Report worktrees removed by a cleanup run."""
        if not paths:
            self.console.print("No worktrees to clean up.")
            return
        self.console.print(f"Removed {len(paths)} worktree(s):")
        for path in paths:
            self.console.print(f"  • {shorten_path(path)}")
        logger.debug(f"Displayed {len(paths)} removed worktrees")
