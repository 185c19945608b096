"""Worktree lifecycle service for git-worktree-keeper."""

import os
import shutil
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from git_worktree_keeper.config import WorktreeConfig
from git_worktree_keeper.constants import DEFAULT_BASE_DIRECTORY, DEFAULT_REMOTE
from git_worktree_keeper.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationFailed,
    WorktreeKeeperError,
)
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.repository import Repository
from git_worktree_keeper.models.worktree import WorktreeInfo, WorktreeStats
from git_worktree_keeper.services.git import parsing
from git_worktree_keeper.services.git.command import GitCommand
from git_worktree_keeper.services.git.repository import RepositoryService, same_path
from git_worktree_keeper.services.git.validation import validate_branch_name, validate_worktree_path
from git_worktree_keeper.services.hooks import HookManager
from git_worktree_keeper.services.patterns import PatternManager, is_within
from git_worktree_keeper.services.sessions import SessionBackend, session_name_for

logger = get_logger(__name__)


@dataclass
class WorktreeOptions:
    """Options for creating a worktree."""

    path: str = ""  # Explicit target; generated from the naming pattern when empty
    create_branch: bool = False
    force: bool = False
    checkout: bool = True
    remote: str = DEFAULT_REMOTE
    track_remote: bool = False
    auto_name: bool = True


class WorktreeService:
    """Creates, inspects, moves and removes the worktrees of one repository.

    Every operation refreshes the repository snapshot from git first.
    """

    def __init__(
        self,
        repo: Repository,
        config: Optional[WorktreeConfig] = None,
        git_cmd: Optional[GitCommand] = None,
        repo_service: Optional[RepositoryService] = None,
        pattern_manager: Optional[PatternManager] = None,
        hook_manager: Optional[HookManager] = None,
        session_backend: Optional[SessionBackend] = None,
    ):
        """Initialize the worktree service.

        Args:
            repo: Repository snapshot from RepositoryService.detect
            config: Worktree configuration
            git_cmd: Command runner shared with the other services
            repo_service: Repository introspection service
            pattern_manager: Path generation and validation
            hook_manager: Receives lifecycle notifications (optional)
            session_backend: Creates and kills session handles (optional)
        """
        self.repo = repo
        self.config = config or WorktreeConfig()
        self.git_cmd = git_cmd or GitCommand(self.config.command_timeout)
        self.repo_service = repo_service or RepositoryService(self.config, self.git_cmd)
        self.pattern_manager = pattern_manager or PatternManager(self.config, self.git_cmd)
        self.hook_manager = hook_manager
        self.session_backend = session_backend

    @property
    def project_name(self) -> str:
        return self.repo_service.get_project_name(self.repo)

    def create(self, branch: str, options: Optional[WorktreeOptions] = None) -> WorktreeInfo:
        """Create a worktree for ``branch``.

        Args:
            branch: Branch to check out
            options: Creation options

        Returns:
            Snapshot of the new worktree

        Raises:
            ValidationFailed: For bad input, paths inside the repository or unusable parents
            ConflictError: If the path exists or the branch is checked out elsewhere (without force)
            BackendFailure: If git fails
        """
        if not branch or not branch.strip():
            raise ValidationFailed("branch name is required")
        branch = branch.strip()
        options = options or WorktreeOptions()

        result = validate_branch_name(branch)
        if not result.valid:
            raise ValidationFailed(f"Invalid branch name '{branch}': {'; '.join(result.errors)}")
        for warning in result.warnings:
            logger.debug(f"Branch '{branch}': {warning}")

        self.repo_service.validate_state(self.repo)
        project = self.project_name

        self.pattern_manager.validate_base_directory(
            self.config.base_directory or DEFAULT_BASE_DIRECTORY,
            self.repo.root_path,
            context=self.pattern_manager.build_context(branch, project),
        )

        path = self._target_path(branch, project, options)
        self._validate_target(path)

        if not options.force:
            self.pattern_manager.check_path_available(path)

        existing = self._find_branch_worktree(branch)
        if existing is not None and not options.force:
            raise ConflictError(f"Branch '{branch}' is already checked out in worktree {existing.path}")

        if (options.create_branch or self.config.auto_create_branch) and not self.repo_service.branch_exists(
            self.repo, branch
        ):
            self._create_branch(branch, options)

        args = ["worktree", "add"]
        if options.force:
            args.append("--force")
        if not options.checkout:
            args.append("--no-checkout")
        args.extend([path, branch])
        self.git_cmd.execute(self.repo.root_path, *args, purpose=f"create worktree for '{branch}'")
        logger.info(f"Created worktree at {path} for branch {branch}")

        info = self.get_worktree_info(path)

        if self.hook_manager is not None:
            self.hook_manager.worktree_created(info.path, branch, self.repo.root_path, project)
        self._start_session(info)

        return info

    def _target_path(self, branch: str, project: str, options: WorktreeOptions) -> str:
        if options.path:
            return os.path.abspath(os.path.expanduser(options.path))
        if not options.auto_name:
            raise ValidationFailed("worktree path is required when automatic naming is disabled")
        return self.pattern_manager.generate_worktree_path(branch, project)

    def _validate_target(self, path: str) -> None:
        result = validate_worktree_path(path)
        if not result.valid:
            raise ValidationFailed(f"Invalid worktree path '{path}': {'; '.join(result.errors)}")
        if is_within(path, self.repo.root_path):
            raise ValidationFailed(
                f"Worktree path {path} is inside the repository {self.repo.root_path}"
            )

    def _create_branch(self, branch: str, options: WorktreeOptions) -> None:
        if options.track_remote:
            start_point = f"{options.remote or DEFAULT_REMOTE}/{branch}"
            args = ["branch", "--track", branch, start_point]
        else:
            start_point = self.repo.default_branch
            args = ["branch", branch, start_point]
        self.git_cmd.execute(self.repo.root_path, *args, purpose=f"create branch '{branch}'")
        logger.info(f"Created branch {branch} from {start_point}")

    def _start_session(self, info: WorktreeInfo) -> None:
        if self.session_backend is None or not info.session_name:
            return
        try:
            self.session_backend.create_session(info.session_name, info.path)
        except Exception as e:
            logger.warning(f"Could not create session {info.session_name}: {e}")

    def _kill_session(self, info: WorktreeInfo) -> None:
        if self.session_backend is None:
            return
        try:
            name = info.session_name or session_name_for(
                self.config, self.project_name, info.path, info.branch_name
            )
            if name:
                self.session_backend.kill_session(name)
        except Exception as e:
            logger.warning(f"Could not kill session for {info.path}: {e}")

    def _find_worktree(self, path: str) -> Optional[WorktreeInfo]:
        for wt in self.repo.worktrees:
            if same_path(wt.path, path):
                return wt
        return None

    def _find_branch_worktree(self, branch: str) -> Optional[WorktreeInfo]:
        for wt in self.repo.worktrees:
            if wt.branch_name == branch:
                return wt
        return None

    def _enrich(self, wt: WorktreeInfo, project: str) -> None:
        """Fill in status, commit, timestamps and session name."""
        if not wt.is_main:
            wt.session_name = session_name_for(self.config, project, wt.path, wt.branch_name)

        if wt.is_orphaned:
            return

        wt.is_clean = False
        wt.status_unknown = True
        status = self.git_cmd.execute(wt.path, "status", "--porcelain", purpose="read worktree status")
        summary = parsing.parse_status(status)
        wt.is_clean = summary.is_clean
        wt.has_uncommitted = not summary.is_clean
        wt.status_unknown = False

        mtime = datetime.fromtimestamp(os.stat(wt.path).st_mtime, tz=timezone.utc)
        wt.last_accessed = mtime
        wt.created = mtime

        if wt.commit_sha:
            try:
                wt.last_commit = self.repo_service.get_commit_info(wt.path, wt.commit_sha)
                if wt.last_commit.date is not None:
                    wt.created = wt.last_commit.date
            except WorktreeKeeperError as e:
                logger.warning(f"Could not read last commit of {wt.path}: {e}")

    def list(self) -> List[WorktreeInfo]:
        """All worktrees with status, commit and timestamps filled in.

        Entries that cannot be inspected are returned with what is known.
        """
        self.repo_service.validate_state(self.repo)
        project = self.project_name

        worktrees = []
        for wt in self.repo.worktrees:
            try:
                self._enrich(wt, project)
            except (WorktreeKeeperError, OSError) as e:
                logger.warning(f"Could not inspect worktree {wt.path}: {e}")
            worktrees.append(wt)

        logger.debug(f"Found {len(worktrees)} worktrees")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    def get_worktree_info(self, path: str) -> WorktreeInfo:
        """Snapshot of a single worktree.

        Raises:
            ValidationFailed: If ``path`` is empty
            NotFoundError: If ``path`` does not exist or is not a worktree of this repository
        """
        if not path:
            raise ValidationFailed("worktree path is required")
        path = os.path.abspath(path)
        if not os.path.exists(path):
            raise NotFoundError(f"Worktree path does not exist: {path}")

        self.repo_service.validate_state(self.repo)
        wt = self._find_worktree(path)
        if wt is None:
            raise NotFoundError(f"Not a worktree of {self.repo.root_path}: {path}")

        self._enrich(wt, self.project_name)
        return wt

    def delete(self, path: str, force: bool = False) -> None:
        """Remove a worktree and its directory.

        Args:
            path: Worktree directory
            force: Remove even with uncommitted changes; tolerate unregistered paths

        Raises:
            NotFoundError: If no worktree is registered at ``path`` (without force)
            ValidationFailed: For the main working tree or uncommitted changes (without force)
            BackendFailure: If git fails
        """
        if not path:
            raise ValidationFailed("worktree path is required")
        path = os.path.abspath(path)

        self.repo_service.validate_state(self.repo)
        wt = self._find_worktree(path)
        if wt is None:
            if not force:
                raise NotFoundError(f"Worktree does not exist: {path}")
            logger.info(f"No worktree registered at {path}, nothing to remove")
            return

        if wt.is_main:
            raise ValidationFailed(f"Cannot delete the main working tree: {wt.path}")

        if not force and not wt.is_orphaned:
            status = self.git_cmd.execute(wt.path, "status", "--porcelain", purpose="read worktree status")
            if not parsing.parse_status(status).is_clean:
                raise ValidationFailed(
                    f"Worktree {wt.path} has uncommitted changes; use force to delete it anyway"
                )

        self._kill_session(wt)

        if wt.is_orphaned:
            self.prune()
        else:
            args = ["worktree", "remove"]
            if force:
                args.append("--force")
            args.append(wt.path)
            self.git_cmd.execute(self.repo.root_path, *args, purpose=f"remove worktree {wt.path}")

        if os.path.exists(wt.path):
            shutil.rmtree(wt.path, ignore_errors=True)
            if os.path.exists(wt.path):
                logger.warning(f"Worktree unregistered but directory could not be removed: {wt.path}")
                return
        logger.info(f"Removed worktree at {wt.path}")

    def prune(self) -> None:
        """Prune administrative data of worktrees whose directories are gone."""
        self.git_cmd.execute(self.repo.root_path, "worktree", "prune", purpose="prune worktrees")
        logger.info("Pruned orphaned worktree metadata")

    def move(self, old_path: str, new_path: str) -> None:
        """Move a worktree to a new location.

        Raises:
            ValidationFailed: For missing arguments, the main working tree or unusable targets
            NotFoundError: If ``old_path`` is not a registered worktree
            ConflictError: If ``new_path`` already exists
            BackendFailure: If git fails
        """
        if not old_path or not new_path:
            raise ValidationFailed("both old and new paths are required")
        old_path = os.path.abspath(old_path)
        new_path = os.path.abspath(os.path.expanduser(new_path))

        self.repo_service.validate_state(self.repo)
        wt = self._find_worktree(old_path)
        if wt is None:
            raise NotFoundError(f"Worktree does not exist: {old_path}")
        if wt.is_main:
            raise ValidationFailed(f"Cannot move the main working tree: {wt.path}")

        self._validate_target(new_path)
        self.pattern_manager.check_path_available(new_path)

        self.git_cmd.execute(
            self.repo.root_path, "worktree", "move", wt.path, new_path, purpose=f"move worktree {wt.path}"
        )
        logger.info(f"Moved worktree from {wt.path} to {new_path}")

    def cleanup_old(self, max_age: timedelta) -> List[str]:
        """Delete clean, non-main worktrees not accessed within ``max_age``.

        Returns:
            Paths of the removed worktrees
        """
        cutoff = datetime.now(timezone.utc) - max_age
        removed = []
        for wt in self.list():
            if wt.is_main or wt.is_orphaned or not wt.is_clean or wt.last_accessed is None:
                continue
            if wt.last_accessed >= cutoff:
                continue
            try:
                self.delete(wt.path)
                removed.append(wt.path)
            except WorktreeKeeperError as e:
                logger.warning(f"Could not clean up worktree {wt.path}: {e}")

        if removed:
            logger.info(f"Cleaned up {len(removed)} old worktrees")
        return removed

    def activate(self, path: str, session_id: str = "", session_type: str = "new") -> WorktreeInfo:
        """Announce that a session started working in an existing worktree."""
        info = self.get_worktree_info(path)
        if self.hook_manager is not None:
            self.hook_manager.worktree_activated(
                info.path, info.branch_name, self.project_name, session_id, session_type
            )
        return info

    def stats(self, worktrees: Optional[List[WorktreeInfo]] = None) -> WorktreeStats:
        """Counts over ``worktrees``, or over a fresh listing."""
        if worktrees is None:
            worktrees = self.list()
        stats = WorktreeStats()
        for wt in worktrees:
            stats.total += 1
            if wt.status_unknown:
                stats.unknown += 1
            elif wt.is_clean:
                stats.clean += 1
            else:
                stats.dirty += 1
            if wt.session_name:
                stats.with_session += 1
        return stats
