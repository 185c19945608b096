"""Thin wrapper running git commands through GitPython."""

from typing import Optional

import git

from git_worktree_keeper.exceptions import BackendFailure
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def describe_git_error(e: git.exc.CommandError) -> str:
    """Turn a GitPython command error into a one-line message.

    GitPython formats stderr as ``"\\n  stderr: '...'"``; only the text git
    printed is kept.
    """
    stderr = (e.stderr if getattr(e, "stderr", None) else "").strip()
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:"):].strip()
    if len(stderr) >= 2 and stderr[0] == stderr[-1] == "'":
        stderr = stderr[1:-1].strip()

    status = e.status if getattr(e, "status", None) is not None else "unknown"
    if stderr:
        return f"exit {status}: {stderr}"
    return f"exit code {status}"


class GitCommand:
    """Runs one git invocation per logical operation.

    Args:
        timeout: Seconds after which the git process is killed (None = no limit)
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def execute(self, working_dir: str, *args: str, purpose: Optional[str] = None) -> str:
        """Run ``git <args>`` in ``working_dir`` and return stdout without trailing whitespace.

        Args:
            working_dir: Directory to run in ("" for the current directory)
            *args: Arguments after ``git``
            purpose: Human description used in the error message

        Raises:
            BackendFailure: When git exits non-zero or cannot be started
        """
        operation = purpose or f"git {' '.join(args[:2])}"
        command = ["git", *args]
        logger.debug(f"Running {' '.join(command)} in {working_dir or '.'}")
        try:
            output = git.Git(working_dir or None).execute(
                command, kill_after_timeout=self.timeout
            )
        except git.exc.CommandError as e:
            raise BackendFailure(operation, describe_git_error(e)) from e
        except OSError as e:
            raise BackendFailure(operation, str(e)) from e

        if not isinstance(output, str):
            output = output.decode("utf-8", errors="replace") if isinstance(output, bytes) else str(output)
        # Leading whitespace is significant in porcelain status lines
        return output.rstrip()

    def succeeds(self, working_dir: str, *args: str) -> bool:
        """True when the command exits zero. Output is discarded."""
        try:
            self.execute(working_dir, *args)
            return True
        except BackendFailure:
            return False
