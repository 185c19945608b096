"""Custom exceptions for git-worktree-keeper"""

from typing import Optional


class WorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""
    pass


class ValidationFailed(WorktreeKeeperError):
    """Input, pattern, path or invariant check failed. Safe to retry after correcting input."""
    pass


class PatternError(ValidationFailed):
    """Exception raised for invalid directory naming patterns."""

    def __init__(self, pattern: str, message: str):
        self.pattern = pattern
        self.message = message
        super().__init__(f"Invalid pattern '{pattern}': {message}")


class BaseDirectoryResolutionError(ValidationFailed):
    """Exception raised when the base directory template cannot be resolved."""

    def __init__(self, template: str, message: Optional[str] = None):
        self.template = template
        self.message = message

        error_msg = f"Could not resolve base directory '{template}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class TemplateError(ValidationFailed):
    """Exception raised for errors in template parsing or resolution."""
    pass


class UnknownVariable(TemplateError):
    """Exception raised when a template references a variable outside the whitelist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown template variable: {{{{.{name}}}}}")


class TemplateSyntaxError(TemplateError):
    """Exception raised for unparsable template markup."""

    def __init__(self, template: str, message: str, position: Optional[int] = None):
        self.template = template
        self.message = message
        self.position = position

        error_msg = f"Invalid template syntax in '{template}'"
        if position is not None:
            error_msg += f" at offset {position}"
        error_msg += f": {message}"

        super().__init__(error_msg)


class ConflictError(WorktreeKeeperError):
    """Exception raised when a branch is already checked out or a target path exists."""
    pass


class NotFoundError(WorktreeKeeperError):
    """Exception raised when a path, branch or worktree is absent."""
    pass


class NotARepositoryError(NotFoundError):
    """Exception raised when a path is not inside a git repository."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not a git repository: {path}")


class BackendFailure(WorktreeKeeperError):
    """Exception raised when an underlying git command or filesystem call fails."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class DirectoryCreationError(WorktreeKeeperError):
    """Exception raised when a directory cannot be created."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        self.message = message

        error_msg = f"Could not create directory '{path}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)
