"""Validation of branch names and worktree paths."""

import os
import unicodedata
from dataclasses import dataclass, field
from typing import List

from git_worktree_keeper.constants import RESERVED_NAMES

INVALID_BRANCH_CHARS = "~^:?*[\\"

# Names that work but tend to collide with conventions
CONVENTIONAL_BRANCH_NAMES = {
    "head", "fetch_head", "orig_head", "merge_head",
    "master", "main", "develop", "development",
    "staging", "production", "prod", "test",
}

MAX_WORKTREE_PATH_LENGTH = 260


@dataclass
class ValidationResult:
    """Outcome of a validation: blocking errors and advisory warnings."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def _has_control_chars(value: str) -> bool:
    return any(unicodedata.category(ch) == "Cc" for ch in value)


def is_reserved_name(name: str) -> bool:
    """True for device names such as ``CON`` or ``nul.txt`` (case-insensitive)."""
    upper = name.upper()
    return any(upper == reserved or upper.startswith(reserved + ".") for reserved in RESERVED_NAMES)


def validate_branch_name(name: str) -> ValidationResult:
    """Check a branch name against git's ref naming rules."""
    result = ValidationResult()

    if not name:
        result.errors.append("branch name cannot be empty")
        return result

    checks = [
        (name.startswith("."), "branch name cannot start with a dot"),
        (name.startswith("-"), "branch name cannot start with a hyphen"),
        (name.endswith("."), "branch name cannot end with a dot"),
        (name.endswith(".lock"), "branch name cannot end with .lock"),
        (".." in name, "branch name cannot contain consecutive dots"),
        (" " in name, "branch name cannot contain spaces"),
        (_has_control_chars(name), "branch name cannot contain control characters"),
        (any(ch in INVALID_BRANCH_CHARS for ch in name),
         "branch name cannot contain invalid characters (~, ^, :, ?, *, [, \\)"),
        (name == "@" or "@{" in name, "branch name cannot be '@' or contain '@{'"),
        (name.startswith("refs/"), "branch name cannot start with 'refs/'"),
        (name.upper() == "HEAD", "branch name cannot be 'HEAD'"),
    ]
    result.errors.extend(message for failed, message in checks if failed)

    warnings = [
        (len(name) > 100, "branch name is very long (>100 characters)"),
        ("//" in name, "branch name contains consecutive slashes"),
        (name.lower() in CONVENTIONAL_BRANCH_NAMES, "branch name might conflict with reserved names"),
    ]
    result.warnings.extend(message for flagged, message in warnings if flagged)

    return result


def validate_worktree_path(path: str) -> ValidationResult:
    """Syntactic checks on an absolute worktree path."""
    result = ValidationResult()

    if not path:
        result.errors.append("worktree path cannot be empty")
        return result

    checks = [
        (not os.path.isabs(path), "worktree path must be absolute"),
        ("\x00" in path, "path cannot contain null bytes"),
        (os.path.normpath(path) == os.sep, "cannot create worktree in root directory"),
        (".." in os.path.normpath(path).split(os.sep), "path cannot contain parent directory traversal"),
        (is_reserved_name(os.path.basename(path)), "path uses a reserved device name"),
        (len(path) > MAX_WORKTREE_PATH_LENGTH,
         f"path is too long (>{MAX_WORKTREE_PATH_LENGTH} characters)"),
    ]
    result.errors.extend(message for failed, message in checks if failed)
    return result
