"""Tests for WorktreeKeeper"""
import os
import time
from io import StringIO
from unittest.mock import patch

import pytest
from rich.console import Console

from git_worktree_keeper import WorktreeKeeper
from git_worktree_keeper.exceptions import NotARepositoryError
from git_worktree_keeper.services.hosting import GenericClient, GitHubClient


@pytest.fixture
def console():
    return Console(file=StringIO(), width=200, color_system=None)


class TestWorktreeKeeper:
    """Test the service wiring."""

    def test_init_with_dict_config(self, git_repo_with_branches, console):
        keeper = WorktreeKeeper(git_repo_with_branches.working_dir, {"suffix": "dev", "unknown": 1}, console=console)
        assert keeper.config.suffix == "dev"
        assert keeper.repo.current_branch == "main"

    def test_init_outside_repository(self, temp_dir):
        with pytest.raises(NotARepositoryError):
            WorktreeKeeper(str(temp_dir))

    def test_create_and_show(self, git_repo_with_branches, console):
        keeper = WorktreeKeeper(git_repo_with_branches.working_dir, console=console)
        info = keeper.create("feature/user-auth")

        worktrees = keeper.show()

        assert [wt.path for wt in worktrees][1] == info.path
        output = console.file.getvalue()
        assert "feature/user-auth" in output
        assert "Total: 2" in output

    def test_cleanup(self, git_repo_with_branches, console):
        keeper = WorktreeKeeper(git_repo_with_branches.working_dir, console=console)
        info = keeper.create("feature/user-auth")
        old = time.time() - 30 * 86400
        os.utime(info.path, (old, old))

        assert keeper.cleanup(7) == [info.path]
        assert "Removed 1 worktree(s):" in console.file.getvalue()

    def test_hosting_client_for_github_origin(self, git_repo_with_branches, console):
        keeper = WorktreeKeeper(git_repo_with_branches.working_dir, {"github_token": "t"}, console=console)
        with patch("git_worktree_keeper.services.hosting.Github"):
            assert isinstance(keeper.hosting_client(), GitHubClient)

    def test_hosting_client_for_other_host(self, git_repo_with_branches, console):
        git_repo_with_branches.create_remote("mirror", "https://git.example.com/team/test-repo.git")
        keeper = WorktreeKeeper(git_repo_with_branches.working_dir, console=console)
        assert isinstance(keeper.hosting_client("mirror"), GenericClient)
