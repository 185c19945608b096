"""Session handle naming and the session backend seam."""

import os
import re
from typing import Protocol

from git_worktree_keeper.config import WorktreeConfig
from git_worktree_keeper.models.pattern import PatternContext
from git_worktree_keeper.naming import resolve

SESSION_VARIABLES = {
    "Prefix": "Configured session prefix",
    "Project": "Project name",
    "Worktree": "Worktree directory name",
    "Branch": "Branch name",
}

_SEPARATORS = re.compile(r"[\s/]+")


class SessionBackend(Protocol):
    """Terminal multiplexer or similar that hosts one session per worktree."""

    def create_session(self, name: str, path: str) -> None: ...

    def kill_session(self, name: str) -> None: ...


def session_name_for(config: WorktreeConfig, project: str, worktree_path: str, branch: str = "") -> str:
    """Session handle name for a worktree, or "" when sessions are not configured.

    Raises:
        TemplateError: If ``config.session_naming_pattern`` is invalid
    """
    if not config.session_prefix:
        return ""

    context = PatternContext(
        prefix=config.session_prefix,
        project=project,
        worktree=os.path.basename(worktree_path.rstrip(os.sep)),
        branch=branch,
    )
    name = resolve(config.session_naming_pattern, context, SESSION_VARIABLES)
    name = _SEPARATORS.sub("-", name)
    return name[:config.max_session_name].rstrip("-")
