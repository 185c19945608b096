"""Pytest fixtures for git-worktree-keeper tests"""
import os
import tempfile
from pathlib import Path
from unittest.mock import Mock

import git
import pytest

from git_worktree_keeper.config import WorktreeConfig
from git_worktree_keeper.services.git import GitCommand, RepositoryService, WorktreeService
from git_worktree_keeper.services.hooks import HookManager
from git_worktree_keeper.services.patterns import PatternManager


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing (symlinks resolved)."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(os.path.realpath(tmpdir))


@pytest.fixture
def config():
    """Default worktree configuration."""
    return WorktreeConfig()


@pytest.fixture
def git_repo(temp_dir, monkeypatch):
    """Create a real Git repository for testing and run from its root."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()
    repo.config_writer().set_value("init", "defaultBranch", "main").release()

    # Create initial commit on main branch
    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    repo.git.branch("-M", "main")

    # Add a fake GitHub remote for testing
    repo.create_remote("origin", "git@github.com:test/test-repo.git")

    # Relative base directories resolve against the working directory
    monkeypatch.chdir(repo_path)

    yield repo

    repo.close()


@pytest.fixture
def git_repo_with_branches(git_repo):
    """Repository with a couple of extra local branches."""
    git_repo.git.branch("feature/user-auth")
    git_repo.git.branch("bugfix/memory-leak")
    yield git_repo


@pytest.fixture
def repo_service(config):
    return RepositoryService(config, GitCommand())


@pytest.fixture
def repository(git_repo_with_branches, repo_service):
    """Repository snapshot of the test repository."""
    return repo_service.detect(git_repo_with_branches.working_dir)


@pytest.fixture
def pattern_manager(config):
    return PatternManager(config, GitCommand())


@pytest.fixture
def mock_hook_executor():
    """Hook executor recording calls."""
    executor = Mock()
    executor.on_worktree_created = Mock()
    executor.on_worktree_activated = Mock()
    return executor


@pytest.fixture
def hook_manager(mock_hook_executor):
    return HookManager(mock_hook_executor)


@pytest.fixture
def mock_session_backend():
    backend = Mock()
    backend.create_session = Mock()
    backend.kill_session = Mock()
    return backend


@pytest.fixture
def worktree_service(repository, config, repo_service, pattern_manager, hook_manager):
    """WorktreeService over the test repository with a recording hook manager."""
    return WorktreeService(
        repository,
        config=config,
        git_cmd=repo_service.git_cmd,
        repo_service=repo_service,
        pattern_manager=pattern_manager,
        hook_manager=hook_manager,
    )


@pytest.fixture
def worktrees_dir(temp_dir):
    """Sibling directory where generated worktrees land for the test repository."""
    return temp_dir / "test-repo-worktrees"
