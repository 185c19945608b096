"""Shared constants for git-worktree-keeper."""

from typing import Dict, List, Tuple


# Template variables, keyed by the name used in templates
TEMPLATE_VARIABLES: Dict[str, str] = {
    "Project": "Project/repository name (sanitized)",
    "Branch": "Git branch name (sanitized)",
    "Worktree": "Unique worktree identifier",
    "Timestamp": "Current timestamp (YYYYMMDD-HHMMSS)",
    "UserName": "Git user name or system user (sanitized)",
    "Prefix": "Configured prefix value",
    "Suffix": "Configured suffix value",
}

TEMPLATE_FUNCTIONS: Dict[str, str] = {
    "lower": "Convert to lowercase: {{.Branch | lower}}",
    "upper": "Convert to uppercase: {{.Branch | upper}}",
    "title": "Convert to title case: {{.Branch | title}}",
    "replace": 'Replace text: {{.Branch | replace "/" "-"}}',
    "trim": "Trim whitespace: {{.Branch | trim}}",
    "sanitize": "Sanitize for filesystem: {{.Branch | sanitize}}",
    "truncate": "Truncate to length: {{.Branch | truncate 10}}",
}

DEFAULT_DIRECTORY_PATTERN = "{{.Project}}-{{.Branch}}"
DEFAULT_BASE_DIRECTORY = "../{{.Project}}-worktrees"
DEFAULT_SESSION_PATTERN = "{{.Prefix}}-{{.Project}}-{{.Worktree}}"

# Sequences never allowed in a directory pattern
DANGEROUS_PATTERN_SEQUENCES: List[str] = ["..", "~", "\\"]

# Fallback tokens when sanitization leaves nothing
FALLBACK_COMPONENT = "unnamed"
FALLBACK_PATH = "worktree"
FALLBACK_USER = "user"

ELLIPSIS = "..."

# Filesystem limits
MAX_RESULT_LENGTH = 255
DEFAULT_MAX_NAME_LENGTH = 100

# Device names reserved on Windows, matched exactly or as NAME.ext
RESERVED_NAMES: Tuple[str, ...] = (
    "CON", "PRN", "AUX", "NUL",
    "COM1", "COM2", "COM3", "COM4", "COM5", "COM6", "COM7", "COM8", "COM9",
    "LPT1", "LPT2", "LPT3", "LPT4", "LPT5", "LPT6", "LPT7", "LPT8", "LPT9",
)

# strftime formats
TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"
WORKTREE_ID_FORMAT = "%m%d-%H%M%S"

# Created in the parent directory to check writability
WRITE_TEST_NAME = ".worktree-keeper-write-test"

DEFAULT_BRANCH_CANDIDATES: List[str] = ["main", "master", "develop"]
FALLBACK_DEFAULT_BRANCH = "main"
DEFAULT_REMOTE = "origin"

HOSTING_SERVICES: Dict[str, str] = {
    "github.com": "github",
    "gitlab.com": "gitlab",
    "bitbucket.org": "bitbucket",
}
GENERIC_HOSTING = "generic"


# Column definitions for worktree tables: (key, label)
WORKTREE_COLUMNS: List[Tuple[str, str]] = [
    ("name", "Name"),
    ("branch", "Branch"),
    ("head", "Head"),
    ("status", "Status"),
    ("session", "Session"),
    ("last_access", "Last Access"),
]

# Rich color names per worktree state
WORKTREE_COLORS = {
    "main": "cyan",
    "dirty": "yellow",
    "orphaned": "red",
    "unknown": "magenta",
    "clean": None,
}
