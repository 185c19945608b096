"""Directory naming patterns and worktree path placement."""

import os
from datetime import datetime
from typing import Dict, List, Optional

from git_worktree_keeper.config import WorktreeConfig
from git_worktree_keeper.constants import (
    DANGEROUS_PATTERN_SEQUENCES,
    DEFAULT_BASE_DIRECTORY,
    FALLBACK_USER,
    MAX_RESULT_LENGTH,
    TIMESTAMP_FORMAT,
    WORKTREE_ID_FORMAT,
    WRITE_TEST_NAME,
)
from git_worktree_keeper.exceptions import (
    BackendFailure,
    BaseDirectoryResolutionError,
    ConflictError,
    DirectoryCreationError,
    PatternError,
    TemplateError,
    ValidationFailed,
)
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.pattern import PatternContext
from git_worktree_keeper.naming import (
    parse_template,
    resolve,
    sanitize_component,
    sanitize_path,
    template_functions,
    template_variables,
    truncate_path,
)
from git_worktree_keeper.naming.template import CLOSE, OPEN
from git_worktree_keeper.services.git.command import GitCommand
from git_worktree_keeper.services.git.validation import is_reserved_name

logger = get_logger(__name__)

EXAMPLE_CONTEXTS: List[PatternContext] = [
    PatternContext(
        project="my-project",
        branch="feature/user-auth",
        worktree="feature-user-auth-0102-143045",
        timestamp="20240102-143045",
        user_name="john-doe",
        prefix="main",
        suffix="dev",
    ),
    PatternContext(
        project="api-server",
        branch="bugfix/memory-leak",
        worktree="bugfix-memory-leak-0103-091530",
        timestamp="20240103-091530",
        user_name="jane-smith",
        prefix="master",
        suffix="fix",
    ),
    PatternContext(
        project="frontend-app",
        branch="main",
        worktree="main-0103-102015",
        timestamp="20240103-102015",
        user_name="dev-user",
        prefix="main",
        suffix="",
    ),
]


def is_within(path: str, root: str) -> bool:
    """True when ``path`` equals ``root`` or lies below it (symlinks resolved)."""
    path = os.path.realpath(path)
    root = os.path.realpath(root)
    try:
        return os.path.commonpath([path, root]) == root
    except ValueError:
        # Different drives on Windows
        return False


class PatternManager:
    """Turns branch and project names into safe worktree locations."""

    def __init__(self, config: Optional[WorktreeConfig] = None, git_cmd: Optional[GitCommand] = None):
        """Initialize the pattern manager.

        Args:
            config: Worktree configuration (defaults are used when omitted)
            git_cmd: Command runner used to look up the git user name
        """
        self.config = config or WorktreeConfig()
        self.git_cmd = git_cmd or GitCommand(self.config.command_timeout)

    def validate_pattern(self, pattern: str) -> None:
        """Validate a directory naming pattern without touching the filesystem.

        Raises:
            PatternError: For empty patterns, missing template markers or dangerous sequences
            UnknownVariable: For variables outside the whitelist
            TemplateSyntaxError: For unparsable markup
        """
        if not pattern:
            raise PatternError(pattern, "pattern cannot be empty")

        for dangerous in DANGEROUS_PATTERN_SEQUENCES:
            if dangerous in pattern:
                raise PatternError(pattern, f"pattern contains dangerous sequence: {dangerous}")
        if pattern.startswith("/"):
            raise PatternError(pattern, "pattern cannot be an absolute path")

        if OPEN not in pattern or CLOSE not in pattern:
            raise PatternError(pattern, "pattern must contain at least one template variable")

        if not parse_template(pattern).has_actions:
            raise PatternError(pattern, "pattern must contain at least one template variable")

    def apply_pattern(self, pattern: str, context: PatternContext) -> str:
        """Resolve a pattern into a sanitized directory name.

        An empty pattern falls back to the configured directory pattern.
        """
        if not pattern:
            pattern = self.config.directory_pattern

        self.validate_pattern(pattern)

        sanitized = sanitize_path(resolve(pattern, context))

        if self.config.auto_directory and len(sanitized) > self.config.max_name_length:
            sanitized = truncate_path(sanitized, self.config.max_name_length)

        return sanitized

    def validate_result(self, result: str) -> None:
        """Validate a resolved directory name.

        Raises:
            ValidationFailed: For empty, absolute, traversing, reserved or overlong names
        """
        if not result:
            raise ValidationFailed("pattern result cannot be empty")

        if os.path.isabs(result):
            raise ValidationFailed(f"pattern result cannot be an absolute path: {result}")

        if ".." in os.path.normpath(result):
            raise ValidationFailed(f"pattern result contains parent directory traversal: {result}")

        if is_reserved_name(result) or any(is_reserved_name(part) for part in result.split("/")):
            raise ValidationFailed(f"pattern result uses reserved name: {result}")

        if len(result) > MAX_RESULT_LENGTH:
            raise ValidationFailed(
                f"pattern result too long ({len(result)} chars, max {MAX_RESULT_LENGTH}): {result}"
            )

    def build_context(self, branch: str, project: str, now: Optional[datetime] = None) -> PatternContext:
        """Build a fresh PatternContext for one path generation."""
        now = now or datetime.now()
        return PatternContext(
            project=sanitize_component(project),
            branch=sanitize_component(branch),
            worktree=self.generate_worktree_id(branch, now),
            timestamp=now.strftime(TIMESTAMP_FORMAT),
            user_name=self.get_user_name(),
            prefix=self.config.effective_prefix,
            suffix=self.config.suffix,
        )

    def generate_worktree_id(self, branch: str, now: Optional[datetime] = None) -> str:
        """Sanitized branch plus a compact timestamp, e.g. ``feature-x-0102-143045``."""
        now = now or datetime.now()
        return f"{sanitize_component(branch)}-{now.strftime(WORKTREE_ID_FORMAT)}"

    def get_user_name(self) -> str:
        """Git user name, else the system user, else ``user``."""
        try:
            name = self.git_cmd.execute("", "config", "--get", "user.name")
            if name.strip():
                return sanitize_component(name)
        except BackendFailure:
            pass

        for var in ("USER", "USERNAME"):
            user = os.environ.get(var)
            if user:
                return sanitize_component(user)

        return FALLBACK_USER

    def resolve_base_directory(
        self, base_dir: str, context: PatternContext, relative_to: Optional[str] = None
    ) -> str:
        """Expand a base directory template into an absolute, normalized path.

        Relative results are anchored at ``relative_to`` (default: the working directory).

        Raises:
            BaseDirectoryResolutionError: For unknown variables or bad markup
        """
        try:
            expanded = resolve(base_dir, context)
        except TemplateError as e:
            raise BaseDirectoryResolutionError(base_dir, str(e)) from e

        expanded = os.path.expanduser(expanded)
        if not os.path.isabs(expanded):
            expanded = os.path.join(relative_to or os.getcwd(), expanded)
        return os.path.normpath(expanded)

    def validate_base_directory(
        self,
        base_dir: str,
        repo_root: str,
        context: Optional[PatternContext] = None,
        relative_to: Optional[str] = None,
    ) -> None:
        """Reject base directories equal to or nested inside the repository root.

        Raises:
            ValidationFailed: If the base directory is empty or inside ``repo_root``
            BaseDirectoryResolutionError: If the template cannot be resolved
        """
        if not base_dir or not base_dir.strip():
            raise ValidationFailed("base directory cannot be empty")

        if context is None:
            context = PatternContext(
                project=sanitize_component(os.path.basename(repo_root.rstrip(os.sep))),
                prefix=self.config.effective_prefix,
                suffix=self.config.suffix,
            )

        resolved = self.resolve_base_directory(base_dir, context, relative_to)
        if is_within(resolved, repo_root):
            raise ValidationFailed(
                f"base directory {resolved} is inside the repository {repo_root}; "
                "use a sibling directory instead"
            )

    def ensure_directory(self, path: str) -> None:
        """Create ``path`` and its parents when absent.

        Raises:
            DirectoryCreationError: If ``path`` exists as a non-directory or cannot be created
        """
        if os.path.exists(path):
            if not os.path.isdir(path):
                raise DirectoryCreationError(path, "path exists and is not a directory")
            return

        if not self.config.create_base_directory:
            raise DirectoryCreationError(path, "directory does not exist and auto-creation is disabled")

        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise DirectoryCreationError(path, str(e)) from e
        logger.info(f"Created base directory {path}")

    def generate_worktree_path(
        self,
        branch: str,
        project: str,
        now: Optional[datetime] = None,
        relative_to: Optional[str] = None,
    ) -> str:
        """Generate the absolute path for a new worktree.

        Args:
            branch: Branch to check out
            project: Project or repository name
            now: Timestamp to use (defaults to now)
            relative_to: Anchor for relative base directories (default: working directory)

        Returns:
            Cleaned absolute path inside the base directory

        Raises:
            BaseDirectoryResolutionError: For bad base directory templates
            DirectoryCreationError: If the base directory cannot be created
            ValidationFailed: If the naming pattern or its result is invalid
        """
        context = self.build_context(branch, project, now)

        base_dir = self.resolve_base_directory(
            self.config.base_directory or DEFAULT_BASE_DIRECTORY, context, relative_to
        )
        self.ensure_directory(base_dir)

        dir_name = self.apply_pattern(self.config.directory_pattern, context)
        self.validate_result(dir_name)

        path = os.path.normpath(os.path.join(base_dir, dir_name))
        logger.debug(f"Generated worktree path {path} for branch {branch}")
        return path

    def check_path_available(self, path: str) -> None:
        """Check that ``path`` can be created right now.

        Raises:
            ValidationFailed: For empty paths or missing, non-directory or read-only parents
            ConflictError: If the path already exists
        """
        if not path:
            raise ValidationFailed("path cannot be empty")

        if os.path.lexists(path):
            raise ConflictError(f"path already exists: {path}")

        parent = os.path.dirname(os.path.abspath(path))
        if not os.path.exists(parent):
            raise ValidationFailed(f"parent directory does not exist: {parent}")
        if not os.path.isdir(parent):
            raise ValidationFailed(f"parent path is not a directory: {parent}")

        test_file = os.path.join(parent, WRITE_TEST_NAME)
        try:
            with open(test_file, "w"):
                pass
            os.remove(test_file)
        except OSError as e:
            raise ValidationFailed(f"parent directory is not writable: {parent} ({e})") from e

    def create_directory(self, path: str) -> None:
        """Create a directory after checking it is available."""
        self.check_path_available(path)
        try:
            os.makedirs(path)
        except OSError as e:
            raise DirectoryCreationError(path, str(e)) from e

    def generate_example_paths(self, pattern: str) -> List[str]:
        """Apply ``pattern`` to a few sample contexts for previews."""
        return [self.apply_pattern(pattern, context) for context in EXAMPLE_CONTEXTS]

    @staticmethod
    def get_pattern_variables() -> Dict[str, str]:
        return template_variables()

    @staticmethod
    def get_pattern_functions() -> Dict[str, str]:
        return template_functions()
