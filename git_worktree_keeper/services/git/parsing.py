"""Parsers for plain-text git output.

Every parser skips lines it does not understand instead of failing.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from git_worktree_keeper.models.repository import Remote
from git_worktree_keeper.models.worktree import CommitInfo, WorktreeInfo

# protocol -> matcher for "<protocol> URL" shapes; groups are host, owner, repo
REMOTE_URL_PATTERNS: List[Tuple[str, "re.Pattern[str]"]] = [
    ("ssh", re.compile(r"^[\w.\-]+@([^:/]+):([^/]+)/(.+?)(?:\.git)?$")),
    ("https", re.compile(r"^https://(?:[^@/]+@)?([^/]+)/([^/]+)/(.+?)(?:\.git)?$")),
    ("http", re.compile(r"^http://(?:[^@/]+@)?([^/]+)/([^/]+)/(.+?)(?:\.git)?$")),
]

COMMIT_FORMAT = "--pretty=format:%H%n%an%n%at%n%s"


@dataclass
class StatusSummary:
    """File status flags from ``git status --porcelain``."""

    modified: bool = False
    untracked: bool = False
    staged: bool = False

    @property
    def is_clean(self) -> bool:
        return not (self.modified or self.untracked or self.staged)


def parse_worktree_list(output: str) -> List[WorktreeInfo]:
    """Parse ``git worktree list --porcelain``.

    Format::

        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name
        (blank line between worktrees)

    The first record is the main working tree.
    """
    worktrees: List[WorktreeInfo] = []
    current: Dict[str, str] = {}

    def flush():
        if current.get("path"):
            worktrees.append(
                WorktreeInfo(
                    path=current["path"],
                    branch_name=current.get("branch", ""),
                    commit_sha=current.get("HEAD", ""),
                    is_main=not worktrees,
                )
            )
        current.clear()

    for line in output.split("\n"):
        line = line.strip()
        if not line:
            flush()
            continue

        if line.startswith("worktree "):
            if current.get("path"):
                # Record without a separating blank line
                flush()
            current["path"] = line.split(" ", 1)[1]
        elif line.startswith("HEAD "):
            current["HEAD"] = line.split(" ", 1)[1]
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith("refs/heads/"):
                current["branch"] = branch_ref[len("refs/heads/"):]
            else:
                current["branch"] = ""
        elif line == "detached":
            current["branch"] = ""

    flush()
    return worktrees


def parse_remote_list(output: str) -> List[Tuple[str, str]]:
    """Parse ``git remote -v`` into unique ``(name, url)`` pairs, first URL wins."""
    seen: Dict[str, str] = {}
    for line in output.split("\n"):
        parts = line.split()
        if len(parts) < 2:
            continue
        name, url = parts[0], parts[1]
        if name not in seen:
            seen[name] = url
    return list(seen.items())


def match_remote_url(url: str) -> Optional[Tuple[str, str, str, str]]:
    """Return ``(protocol, host, owner, repo)`` or None for unknown shapes."""
    for protocol, pattern in REMOTE_URL_PATTERNS:
        match = pattern.match(url)
        if match:
            host, owner, repo = match.groups()
            return protocol, host, owner, repo
    return None


def parse_remote(name: str, url: str) -> Remote:
    """Build a Remote, leaving structured fields empty for unknown URL shapes."""
    parsed = match_remote_url(url)
    if parsed is None:
        return Remote(name=name, url=url)
    protocol, host, owner, repo = parsed
    return Remote(name=name, url=url, protocol=protocol, host=host, owner=owner, repo=repo)


def parse_status(output: str) -> StatusSummary:
    """Parse ``git status --porcelain``: ``XY filename`` per line.

    X is the index (staged) state, Y the working tree state.
    """
    summary = StatusSummary()
    for line in output.split("\n"):
        if len(line) < 2:
            continue

        if line.startswith("??"):
            summary.untracked = True
            continue

        index_status, worktree_status = line[0], line[1]
        if index_status not in (" ", "!"):
            summary.staged = True
        if worktree_status not in (" ", "!"):
            summary.modified = True
    return summary


def parse_commit_info(output: str) -> Optional[CommitInfo]:
    """Parse the output of ``git show --no-patch`` with COMMIT_FORMAT."""
    lines = output.split("\n")
    if len(lines) < 4 or not lines[0]:
        return None

    try:
        date = datetime.fromtimestamp(int(lines[2].strip()), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        date = None

    return CommitInfo(hash=lines[0].strip(), author=lines[1].strip(), date=date, message=lines[3].strip())


def parse_file_list(output: str) -> List[str]:
    """Non-empty stripped lines, e.g. from ``git show --name-only``."""
    return [line.strip() for line in output.split("\n") if line.strip()]


def parse_remote_head(output: str, remote: str = "origin") -> str:
    """Extract the branch from ``refs/remotes/<remote>/<branch>``."""
    prefix = f"refs/remotes/{remote}/"
    ref = output.strip()
    if ref.startswith(prefix):
        return ref[len(prefix):]
    return ""
