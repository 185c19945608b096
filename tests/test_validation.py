"""Tests for branch name and worktree path validation"""
import pytest

from git_worktree_keeper.services.git.validation import (
    is_reserved_name,
    validate_branch_name,
    validate_worktree_path,
)


class TestValidateBranchName:
    """Test branch name rules."""

    @pytest.mark.parametrize("name", ["feature/login", "bugfix-123", "release/1.2.3", "user/jane/spike"])
    def test_valid(self, name):
        assert validate_branch_name(name).valid

    @pytest.mark.parametrize(
        "name",
        [
            "",
            ".hidden",
            "-flag",
            "trailing.",
            "name.lock",
            "a..b",
            "with space",
            "tab\tname",
            "tilde~1",
            "caret^",
            "colon:name",
            "question?",
            "star*",
            "bracket[",
            "back\\slash",
            "@",
            "at@{brace",
            "refs/heads/x",
            "HEAD",
        ],
    )
    def test_invalid(self, name):
        assert not validate_branch_name(name).valid

    def test_warnings(self):
        result = validate_branch_name("main")
        assert result.valid
        assert result.warnings

        assert validate_branch_name("a//b").warnings
        assert validate_branch_name("x" * 101).warnings


class TestValidateWorktreePath:
    """Test worktree path rules."""

    def test_valid(self):
        assert validate_worktree_path("/home/dev/trees/api-main").valid

    @pytest.mark.parametrize(
        "path",
        ["", "relative/path", "/", "/trees/nul\x00byte", "/trees/CON", "/trees/" + "x" * 260],
    )
    def test_invalid(self, path):
        assert not validate_worktree_path(path).valid


class TestReservedNames:
    """Test device name detection."""

    @pytest.mark.parametrize("name", ["CON", "con", "Aux", "nul.txt", "COM1", "lpt9.log"])
    def test_reserved(self, name):
        assert is_reserved_name(name)

    @pytest.mark.parametrize("name", ["console", "com10", "auxiliary", "my-con"])
    def test_not_reserved(self, name):
        assert not is_reserved_name(name)
