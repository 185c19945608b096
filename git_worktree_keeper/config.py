"""Configuration handling for git-worktree-keeper"""

from dataclasses import dataclass, fields
from typing import Optional

from git_worktree_keeper.constants import (
    DEFAULT_DIRECTORY_PATTERN,
    DEFAULT_MAX_NAME_LENGTH,
    DEFAULT_SESSION_PATTERN,
    MAX_RESULT_LENGTH,
)


@dataclass
class WorktreeConfig:
    """Read-only snapshot of the worktree settings with validation."""

    # Naming
    directory_pattern: str = DEFAULT_DIRECTORY_PATTERN
    base_directory: str = ""  # Empty means a sibling "<project>-worktrees" directory
    default_branch: str = "main"
    auto_directory: bool = True  # Truncate generated names to max_name_length
    max_name_length: int = DEFAULT_MAX_NAME_LENGTH
    prefix: str = ""  # Empty means default_branch
    suffix: str = ""
    create_base_directory: bool = True

    # Lifecycle
    auto_create_branch: bool = False
    command_timeout: Optional[float] = None  # Seconds; None lets git run unbounded

    # Session handles
    session_prefix: str = ""  # Empty disables session handles
    session_naming_pattern: str = DEFAULT_SESSION_PATTERN
    max_session_name: int = 50

    # Remotes
    strict_remote_parsing: bool = False
    github_token: Optional[str] = None

    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_default_branch()
        self._validate_directory_pattern()
        self._validate_max_name_length()
        self._validate_max_session_name()
        self._validate_command_timeout()

    def _validate_default_branch(self):
        """Validate default_branch is not empty."""
        if not self.default_branch or not self.default_branch.strip():
            raise ValueError("default_branch cannot be empty")
        self.default_branch = self.default_branch.strip()

    def _validate_directory_pattern(self):
        """Validate directory_pattern carries template markers."""
        if not self.directory_pattern:
            self.directory_pattern = DEFAULT_DIRECTORY_PATTERN
        if "{{" not in self.directory_pattern or "}}" not in self.directory_pattern:
            raise ValueError(
                f"directory_pattern must contain template variables, got '{self.directory_pattern}'"
            )

    def _validate_max_name_length(self):
        """Validate max_name_length is within filesystem limits."""
        if not 0 < self.max_name_length <= MAX_RESULT_LENGTH:
            raise ValueError(
                f"max_name_length must be between 1 and {MAX_RESULT_LENGTH}, got {self.max_name_length}"
            )

    def _validate_max_session_name(self):
        """Validate max_session_name is positive."""
        if self.max_session_name <= 0:
            raise ValueError(f"max_session_name must be positive, got {self.max_session_name}")

    def _validate_command_timeout(self):
        """Validate command_timeout is positive when set."""
        if self.command_timeout is not None and self.command_timeout <= 0:
            raise ValueError(f"command_timeout must be positive, got {self.command_timeout}")

    @property
    def effective_prefix(self) -> str:
        """Prefix exposed to templates."""
        return self.prefix or self.default_branch

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "WorktreeConfig":
        """Create WorktreeConfig from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
