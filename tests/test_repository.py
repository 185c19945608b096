"""Tests for RepositoryService"""
import os
import shutil
from unittest.mock import Mock

import pytest

from git_worktree_keeper.config import WorktreeConfig
from git_worktree_keeper.exceptions import BackendFailure, NotARepositoryError, NotFoundError, ValidationFailed
from git_worktree_keeper.services.git import GitCommand, RepositoryService


class TestDetect:
    """Test repository detection."""

    def test_detect(self, git_repo_with_branches, repo_service):
        repo = repo_service.detect(git_repo_with_branches.working_dir)

        assert repo.root_path == os.path.realpath(git_repo_with_branches.working_dir)
        assert repo.current_branch == "main"
        assert repo.default_branch == "main"
        assert repo.is_clean
        assert repo.origin == "git@github.com:test/test-repo.git"
        assert [wt.path for wt in repo.worktrees] == [repo.root_path]
        assert repo.worktrees[0].is_main

    def test_detect_from_subdirectory(self, git_repo, repo_service):
        sub = os.path.join(git_repo.working_dir, "sub")
        os.makedirs(sub)
        repo = repo_service.detect(sub)
        assert repo.path == sub
        assert repo.root_path == os.path.realpath(git_repo.working_dir)

    def test_not_a_repository(self, temp_dir, repo_service):
        plain = temp_dir / "plain"
        plain.mkdir()
        with pytest.raises(NotARepositoryError):
            repo_service.detect(str(plain))

    def test_missing_path(self, temp_dir, repo_service):
        with pytest.raises(NotFoundError):
            repo_service.detect(str(temp_dir / "missing"))

    def test_dirty_repository(self, git_repo, repo_service):
        with open(os.path.join(git_repo.working_dir, "new.txt"), "w") as f:
            f.write("x")
        assert not repo_service.detect(git_repo.working_dir).is_clean

    def test_detached_head(self, git_repo, repo_service):
        git_repo.git.checkout("--detach")
        assert repo_service.detect(git_repo.working_dir).current_branch == ""


class TestValidateState:
    """Test snapshot refresh."""

    def test_refreshes_fields(self, repository, repo_service, git_repo_with_branches):
        git_repo_with_branches.git.checkout("feature/user-auth")
        repo_service.validate_state(repository)
        assert repository.current_branch == "feature/user-auth"

    def test_none(self, repo_service):
        with pytest.raises(ValidationFailed):
            repo_service.validate_state(None)

    def test_vanished_repository(self, repository, repo_service):
        shutil.rmtree(repository.root_path)
        with pytest.raises(NotFoundError):
            repo_service.validate_state(repository)


class TestBranchesAndRemotes:
    """Test branch and remote queries."""

    def test_branch_exists(self, repository, repo_service):
        assert repo_service.branch_exists(repository, "feature/user-auth")
        assert not repo_service.branch_exists(repository, "nope")
        assert not repo_service.branch_exists(repository, "")

    def test_remote_info(self, repository, repo_service):
        remote = repo_service.get_remote_info(repository)
        assert remote.name == "origin"
        assert remote.protocol == "ssh"
        assert remote.host == "github.com"
        assert remote.owner == "test"
        assert remote.repo == "test-repo"

    def test_missing_remote(self, repository, repo_service):
        with pytest.raises(BackendFailure):
            repo_service.get_remote_info(repository, "upstream")

    def test_unparsed_remote_is_kept(self, git_repo, repo_service):
        git_repo.create_remote("local", "/srv/git/repo.git")
        repo = repo_service.detect(git_repo.working_dir)
        local = repo.get_remote("local")
        assert local.url == "/srv/git/repo.git"
        assert not local.is_parsed

    def test_strict_remote_parsing(self, git_repo):
        git_repo.create_remote("local", "/srv/git/repo.git")
        service = RepositoryService(WorktreeConfig(strict_remote_parsing=True))
        with pytest.raises(ValidationFailed):
            service.detect(git_repo.working_dir)

    def test_project_name_from_origin(self, repository, repo_service):
        assert repo_service.get_project_name(repository) == "test-repo"

    def test_project_name_from_directory(self, git_repo, repo_service):
        git_repo.delete_remote("origin")
        repo = repo_service.detect(git_repo.working_dir)
        assert repo_service.get_project_name(repo) == "test_repo"

    def test_default_branch_from_config(self, git_repo, repo_service):
        git_repo.config_writer().set_value("init", "defaultBranch", "trunk").release()
        repo = repo_service.detect(git_repo.working_dir)
        assert repo.default_branch == "trunk"

    def test_default_branch_fallback(self):
        git_cmd = Mock()
        git_cmd.execute.side_effect = BackendFailure("git", "exit 1")
        git_cmd.succeeds.return_value = False
        service = RepositoryService(git_cmd=git_cmd)
        assert service.get_default_branch(Mock(root_path="/repo")) == "main"


class TestCommitInfo:
    """Test commit lookups."""

    def test_commit_info(self, repository, repo_service):
        head = repository.worktrees[0].commit_sha
        commit = repo_service.get_commit_info(repository.root_path, head)
        assert commit.hash == head
        assert commit.author == "Test User"
        assert commit.message == "Initial commit"
        assert commit.date is not None
        assert commit.files == ["README.md"]

    def test_empty_hash(self, repository, repo_service):
        with pytest.raises(NotFoundError):
            repo_service.get_commit_info(repository.root_path, "")

    def test_unknown_hash(self, repository, repo_service):
        with pytest.raises(BackendFailure):
            repo_service.get_commit_info(repository.root_path, "0" * 40)


class TestGitCommand:
    """Test the git command wrapper."""

    def test_execute(self, git_repo):
        assert GitCommand().execute(git_repo.working_dir, "rev-parse", "--abbrev-ref", "HEAD") == "main"

    def test_failure_carries_purpose_and_stderr(self, git_repo):
        with pytest.raises(BackendFailure) as exc_info:
            GitCommand().execute(git_repo.working_dir, "checkout", "nope", purpose="switch branch")
        assert exc_info.value.operation == "switch branch"
        assert "nope" in str(exc_info.value)

    def test_succeeds(self, git_repo):
        assert GitCommand().succeeds(git_repo.working_dir, "status")
        assert not GitCommand().succeeds(git_repo.working_dir, "rev-parse", "--verify", "nope")
