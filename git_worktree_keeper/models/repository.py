"""Repository and remote models."""

from dataclasses import dataclass, field
from typing import List, Optional

from git_worktree_keeper.constants import DEFAULT_REMOTE
from git_worktree_keeper.models.worktree import WorktreeInfo


@dataclass(frozen=True)
class Remote:
    """A git remote with its URL split into components.

    The structured fields are empty when the URL has an unrecognised shape.
    """

    name: str
    url: str
    protocol: str = ""
    host: str = ""
    owner: str = ""
    repo: str = ""

    @property
    def is_parsed(self) -> bool:
        return bool(self.host and self.owner and self.repo)


@dataclass
class Repository:
    """Snapshot of a git repository produced by introspection."""

    path: str
    root_path: str
    origin: str = ""
    default_branch: str = ""
    current_branch: str = ""
    is_clean: bool = True
    remotes: List[Remote] = field(default_factory=list)
    worktrees: List[WorktreeInfo] = field(default_factory=list)

    def get_remote(self, name: str = DEFAULT_REMOTE) -> Optional[Remote]:
        for remote in self.remotes:
            if remote.name == name:
                return remote
        return None


@dataclass
class PullRequest:
    """A pull request as reported by a hosting service."""

    number: int
    title: str
    head: str
    base: str
    state: str = "open"
    url: str = ""
    merged: bool = False
