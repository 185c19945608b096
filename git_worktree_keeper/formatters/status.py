"""Status formatting utilities."""

from git_worktree_keeper.models.worktree import WorktreeInfo, WorktreeStats


def get_worktree_style_type(worktree: WorktreeInfo) -> str:
    """
    Determine the style type for a worktree row.

    Returns:
        One of "orphaned", "unknown", "main", "dirty" or "clean"
    """
    if worktree.is_orphaned:
        return "orphaned"
    if worktree.status_unknown:
        return "unknown"
    if worktree.is_main:
        return "main"
    if not worktree.is_clean:
        return "dirty"
    return "clean"


def format_worktree_status(worktree: WorktreeInfo) -> str:
    """Status text such as ``clean``, ``dirty`` or ``orphaned``, noting detached HEADs."""
    if worktree.is_orphaned:
        return "orphaned"
    if worktree.status_unknown:
        status = "unknown"
    else:
        status = "clean" if worktree.is_clean else "dirty"
    if worktree.is_detached:
        status += " (detached)"
    return status


def format_stats(stats: WorktreeStats) -> str:
    """One-line summary of worktree counts."""
    summary = f"Total: {stats.total}  Clean: {stats.clean}  Dirty: {stats.dirty}"
    if stats.unknown:
        summary += f"  Unknown: {stats.unknown}"
    return f"{summary}  With session: {stats.with_session}"
