"""Worktree lifecycle hook notifications."""

import time
from dataclasses import dataclass, field
from threading import Lock
from typing import Callable, Dict, Protocol, Tuple

from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)

EVENT_CREATED = "worktree_created"
EVENT_ACTIVATED = "worktree_activated"


@dataclass
class HookContext:
    """Data handed to hook executors."""

    worktree_path: str
    branch: str = ""
    project_name: str = ""
    session_id: str = ""
    session_type: str = ""  # "new", "continue" or "resume"
    custom_vars: Dict[str, str] = field(default_factory=dict)


class HookExecutor(Protocol):
    """Runs the user's hooks. Implementations may raise; the manager logs."""

    def on_worktree_created(self, context: HookContext) -> None: ...

    def on_worktree_activated(self, context: HookContext) -> None: ...


class HookManager:
    """Dispatches lifecycle events to an executor, fire-and-forget.

    Repeated events for the same path and event kind within
    ``debounce_seconds`` are dropped.
    """

    def __init__(
        self,
        executor: HookExecutor,
        enabled: bool = True,
        debounce_seconds: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.executor = executor
        self.enabled = enabled
        self.debounce_seconds = debounce_seconds
        self._clock = clock
        self._last_fired: Dict[Tuple[str, str], float] = {}
        self._lock = Lock()

    def worktree_created(self, worktree_path: str, branch: str, parent_path: str, project_name: str) -> None:
        """Notify that a worktree was created."""
        context = HookContext(
            worktree_path=worktree_path,
            branch=branch,
            project_name=project_name,
            session_type="new",
            custom_vars={
                "WORKTREE_PARENT_PATH": parent_path,
                "WORKTREE_TYPE": "new",
            },
        )
        self._fire(EVENT_CREATED, context, self.executor.on_worktree_created)

    def worktree_activated(
        self,
        worktree_path: str,
        branch: str,
        project_name: str,
        session_id: str = "",
        session_type: str = "new",
    ) -> None:
        """Notify that a session started working in a worktree."""
        context = HookContext(
            worktree_path=worktree_path,
            branch=branch,
            project_name=project_name,
            session_id=session_id,
            session_type=session_type or "new",
        )
        self._fire(EVENT_ACTIVATED, context, self.executor.on_worktree_activated)

    def _should_fire(self, event: str, path: str) -> bool:
        if self.debounce_seconds <= 0:
            return True
        key = (event, path)
        now = self._clock()
        with self._lock:
            last = self._last_fired.get(key)
            if last is not None and now - last < self.debounce_seconds:
                return False
            self._last_fired[key] = now
        return True

    def _fire(self, event: str, context: HookContext, handler: Callable[[HookContext], None]) -> None:
        if not self.enabled:
            return
        if not self._should_fire(event, context.worktree_path):
            logger.debug(f"Debounced {event} for {context.worktree_path}")
            return

        try:
            handler(context)
            logger.debug(f"Fired {event} for {context.worktree_path}")
        except Exception as e:
            logger.warning(f"{event} hook failed for {context.worktree_path}: {e}")

