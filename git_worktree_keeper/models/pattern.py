"""Pattern context model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PatternContext:
    """Values available to naming templates. Built fresh per path generation."""

    project: str = ""
    branch: str = ""
    worktree: str = ""
    timestamp: str = ""
    user_name: str = ""
    prefix: str = ""
    suffix: str = ""

    def lookup(self, name: str) -> str:
        """Return the value for a template variable name such as ``UserName``."""
        return {
            "Project": self.project,
            "Branch": self.branch,
            "Worktree": self.worktree,
            "Timestamp": self.timestamp,
            "UserName": self.user_name,
            "Prefix": self.prefix,
            "Suffix": self.suffix,
        }[name]
