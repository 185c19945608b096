"""Repository detection and introspection service."""

import os
from typing import List, Optional

from git_worktree_keeper.config import WorktreeConfig
from git_worktree_keeper.constants import (
    DEFAULT_BRANCH_CANDIDATES,
    DEFAULT_REMOTE,
    FALLBACK_DEFAULT_BRANCH,
)
from git_worktree_keeper.exceptions import (
    BackendFailure,
    NotARepositoryError,
    NotFoundError,
    ValidationFailed,
)
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.repository import Remote, Repository
from git_worktree_keeper.models.worktree import CommitInfo, WorktreeInfo
from git_worktree_keeper.services.git import parsing
from git_worktree_keeper.services.git.command import GitCommand

logger = get_logger(__name__)


def same_path(a: str, b: str) -> bool:
    """Compare two filesystem paths after resolving symlinks."""
    return os.path.realpath(a) == os.path.realpath(b)


class RepositoryService:
    """Builds and refreshes Repository snapshots by querying git.

    Nothing is cached: every call re-reads git state so that concurrent
    external changes are always observed.
    """

    def __init__(self, config: Optional[WorktreeConfig] = None, git_cmd: Optional[GitCommand] = None):
        """Initialize the repository service.

        Args:
            config: Worktree configuration (defaults are used when omitted)
            git_cmd: Command runner, injectable for tests
        """
        self.config = config or WorktreeConfig()
        self.git_cmd = git_cmd or GitCommand(self.config.command_timeout)

    def is_git_repository(self, path: str) -> bool:
        """Check whether ``path`` is inside a git repository."""
        if not path or not os.path.isdir(path):
            return False
        return self.git_cmd.succeeds(path, "rev-parse", "--git-dir")

    def detect(self, path: str = "") -> Repository:
        """Detect the repository containing ``path``.

        Args:
            path: Any directory inside the repository; defaults to the working directory

        Returns:
            Fully populated Repository snapshot

        Raises:
            NotARepositoryError: If ``path`` is not inside a git repository
            BackendFailure: If git fails while populating the snapshot
        """
        if not path:
            path = os.getcwd()
        path = os.path.abspath(path)

        if not self.is_git_repository(path):
            raise NotARepositoryError(path)

        root = self.git_cmd.execute(path, "rev-parse", "--show-toplevel", purpose="resolve repository root")
        repo = Repository(path=path, root_path=os.path.realpath(root))
        self._populate(repo)

        logger.debug(
            f"Detected repository at {repo.root_path} (current={repo.current_branch or 'detached'}, "
            f"default={repo.default_branch}, remotes={len(repo.remotes)}, worktrees={len(repo.worktrees)})"
        )
        return repo

    def validate_state(self, repo: Optional[Repository]) -> None:
        """Check the repository still exists and refresh every field in place.

        Raises:
            ValidationFailed: If ``repo`` is None
            NotFoundError: If the root directory vanished
            NotARepositoryError: If the root is no longer a repository
        """
        if repo is None:
            raise ValidationFailed("Repository is not set")

        if not os.path.exists(repo.root_path):
            raise NotFoundError(f"Repository path does not exist: {repo.root_path}")

        if not self.is_git_repository(repo.root_path):
            raise NotARepositoryError(repo.root_path)

        self._populate(repo)

    def _populate(self, repo: Repository) -> None:
        """Fill in branch, status, remote and worktree information."""
        repo.current_branch = self.get_current_branch(repo.root_path)
        repo.default_branch = self.get_default_branch(repo)

        status = self.git_cmd.execute(repo.root_path, "status", "--porcelain", purpose="read repository status")
        repo.is_clean = status.strip() == ""

        repo.remotes = self.get_remotes(repo)
        origin = repo.get_remote(DEFAULT_REMOTE)
        repo.origin = origin.url if origin else ""

        repo.worktrees = self.list_worktrees(repo)

    def get_current_branch(self, path: str) -> str:
        """Current branch name, or "" when HEAD is detached."""
        try:
            return self.git_cmd.execute(path, "branch", "--show-current", purpose="read current branch")
        except BackendFailure:
            # git < 2.22 has no --show-current
            head = self.git_cmd.execute(path, "rev-parse", "--abbrev-ref", "HEAD", purpose="read current branch")
            return "" if head == "HEAD" else head

    def get_default_branch(self, repo: Repository) -> str:
        """Determine the default branch.

        Tries the remote HEAD, then ``init.defaultBranch``, then the first
        existing branch among the usual candidates, then ``main``.
        """
        try:
            output = self.git_cmd.execute(
                repo.root_path, "symbolic-ref", f"refs/remotes/{DEFAULT_REMOTE}/HEAD"
            )
            branch = parsing.parse_remote_head(output, DEFAULT_REMOTE)
            if branch:
                return branch
        except BackendFailure:
            pass

        try:
            configured = self.git_cmd.execute(repo.root_path, "config", "--get", "init.defaultBranch").strip()
            if configured:
                return configured
        except BackendFailure:
            pass

        for candidate in DEFAULT_BRANCH_CANDIDATES:
            if self.branch_exists(repo, candidate):
                return candidate

        return FALLBACK_DEFAULT_BRANCH

    def branch_exists(self, repo: Repository, branch: str) -> bool:
        """Check whether a local branch exists."""
        if not branch:
            return False
        return self.git_cmd.succeeds(repo.root_path, "rev-parse", "--verify", "--quiet", f"refs/heads/{branch}")

    def get_remotes(self, repo: Repository) -> List[Remote]:
        """All remotes, one entry per name."""
        output = self.git_cmd.execute(repo.root_path, "remote", "-v", purpose="list remotes")
        remotes = []
        for name, url in parsing.parse_remote_list(output):
            remotes.append(self._build_remote(name, url))
        return remotes

    def get_remote_info(self, repo: Repository, name: str = DEFAULT_REMOTE) -> Remote:
        """Look up a single remote by name."""
        name = name or DEFAULT_REMOTE
        url = self.git_cmd.execute(repo.root_path, "remote", "get-url", name, purpose=f"read URL of remote '{name}'")
        return self._build_remote(name, url)

    def _build_remote(self, name: str, url: str) -> Remote:
        remote = parsing.parse_remote(name, url)
        if not remote.is_parsed:
            if self.config.strict_remote_parsing:
                raise ValidationFailed(f"Unsupported remote URL format for '{name}': {url}")
            logger.debug(f"Remote '{name}' has an unrecognised URL shape, keeping raw URL: {url}")
        return remote

    def list_worktrees(self, repo: Repository) -> List[WorktreeInfo]:
        """Registered worktrees as reported by git, flagged when their directory is gone."""
        output = self.git_cmd.execute(repo.root_path, "worktree", "list", "--porcelain", purpose="list worktrees")
        worktrees = parsing.parse_worktree_list(output)
        for wt in worktrees:
            wt.is_orphaned = not os.path.exists(wt.path)
        return worktrees

    def get_commit_info(self, path: str, commit_sha: str) -> CommitInfo:
        """Metadata and changed files of a commit.

        Raises:
            NotFoundError: If ``commit_sha`` is empty or git output is unexpected
            BackendFailure: If git fails
        """
        if not commit_sha:
            raise NotFoundError("Commit hash is empty")

        output = self.git_cmd.execute(
            path, "show", "--no-patch", parsing.COMMIT_FORMAT, commit_sha, purpose="read commit info"
        )
        commit = parsing.parse_commit_info(output)
        if commit is None:
            raise NotFoundError(f"Unexpected commit info for {commit_sha}")

        try:
            files = self.git_cmd.execute(path, "show", "--name-only", "--pretty=format:", commit_sha)
            commit.files = parsing.parse_file_list(files)
        except BackendFailure as e:
            logger.debug(f"Could not list files of {commit_sha}: {e}")

        return commit

    def get_project_name(self, repo: Repository) -> str:
        """Project name: origin's repository name, else the root directory name."""
        origin = repo.get_remote(DEFAULT_REMOTE)
        if origin and origin.repo:
            return origin.repo
        return os.path.basename(repo.root_path.rstrip(os.sep))
