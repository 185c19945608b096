"""Core functionality for git-worktree-keeper"""

from datetime import timedelta
from typing import List, Optional, Union

from rich.console import Console

from git_worktree_keeper.config import WorktreeConfig
from git_worktree_keeper.constants import DEFAULT_REMOTE
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.repository import Repository
from git_worktree_keeper.models.worktree import WorktreeInfo
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.services.git import GitCommand, RepositoryService, WorktreeOptions, WorktreeService
from git_worktree_keeper.services.hooks import HookManager
from git_worktree_keeper.services.hosting import HostingClient, get_hosting_client
from git_worktree_keeper.services.patterns import PatternManager
from git_worktree_keeper.services.sessions import SessionBackend

logger = get_logger(__name__)


class WorktreeKeeper:
    """Wires the services together for one repository."""

    def __init__(
        self,
        repo_path: str = "",
        config: Union[WorktreeConfig, dict, None] = None,
        hook_manager: Optional[HookManager] = None,
        session_backend: Optional[SessionBackend] = None,
        console: Optional[Console] = None,
    ):
        """Initialize WorktreeKeeper.

        Args:
            repo_path: Any directory inside the repository (default: working directory)
            config: Configuration dict or WorktreeConfig object
            hook_manager: Receives worktree lifecycle notifications
            session_backend: Creates and kills session handles
            console: Rich console used for output

        Raises:
            NotARepositoryError: If ``repo_path`` is not inside a git repository
        """
        if isinstance(config, dict):
            self.config = WorktreeConfig.from_dict(config)
        else:
            self.config = config or WorktreeConfig()

        self.git_cmd = GitCommand(self.config.command_timeout)
        self.repo_service = RepositoryService(self.config, self.git_cmd)
        self.pattern_manager = PatternManager(self.config, self.git_cmd)
        self.repo: Repository = self.repo_service.detect(repo_path)
        self.worktree_service = WorktreeService(
            self.repo,
            config=self.config,
            git_cmd=self.git_cmd,
            repo_service=self.repo_service,
            pattern_manager=self.pattern_manager,
            hook_manager=hook_manager,
            session_backend=session_backend,
        )
        self.display_service = DisplayService(console, verbose=self.config.verbose)

    def create(self, branch: str, options: Optional[WorktreeOptions] = None) -> WorktreeInfo:
        return self.worktree_service.create(branch, options)

    def show(self) -> List[WorktreeInfo]:
        """Print the worktree table with a summary and return the listing."""
        worktrees = self.worktree_service.list()
        self.display_service.display_worktree_table(worktrees, self.worktree_service.stats(worktrees))
        return worktrees

    def cleanup(self, max_age_days: int) -> List[str]:
        """Remove clean worktrees untouched for ``max_age_days`` and report them."""
        removed = self.worktree_service.cleanup_old(timedelta(days=max_age_days))
        self.display_service.display_removed(removed)
        return removed

    def hosting_client(self, remote_name: str = DEFAULT_REMOTE) -> HostingClient:
        """API client for the hosting service behind a remote."""
        remote = self.repo_service.get_remote_info(self.repo, remote_name)
        return get_hosting_client(remote, self.config.github_token)
