"""Helpers turning free-form strings into filesystem-safe names."""

import re

from git_worktree_keeper.constants import ELLIPSIS, FALLBACK_COMPONENT, FALLBACK_PATH

_SEPARATORS = re.compile(r"[/\\\s_]")
_UNSAFE = re.compile(r"[^a-z0-9.\-]")
_REPEATED_HYPHENS = re.compile(r"-{2,}")


def _sanitize(raw: str, fallback: str) -> str:
    cleaned = (raw or "").lower()
    cleaned = _SEPARATORS.sub("-", cleaned)
    cleaned = _UNSAFE.sub("", cleaned)
    cleaned = _REPEATED_HYPHENS.sub("-", cleaned)
    cleaned = cleaned.strip("-")
    return cleaned or fallback


def sanitize_component(raw: str) -> str:
    """
    Sanitize a single name component such as a branch or project name.

    Lower-cases, maps separators, whitespace and underscores to hyphens,
    drops anything outside ``[a-z0-9-.]`` and collapses hyphen runs.

    Example:
        >>> sanitize_component("feature/user-auth")
        'feature-user-auth'
    """
    return _sanitize(raw, FALLBACK_COMPONENT)


def sanitize_path(raw: str) -> str:
    """Sanitize a whole resolved directory name. Falls back to ``worktree``."""
    return _sanitize(raw, FALLBACK_PATH)


def truncate_path(path: str, max_length: int) -> str:
    """
    Shorten a name to at most ``max_length`` characters.

    Prefers cutting at the last hyphen that fits; otherwise hard-cuts and
    marks the cut with an ellipsis when there is room for one.
    """
    if len(path) <= max_length:
        return path
    if max_length <= 0:
        return ""

    cut = path.rfind("-", 0, max_length + 1)
    if cut > 0:
        head = path[:cut].rstrip("-")
        if head:
            return head

    if max_length > len(ELLIPSIS):
        return path[:max_length - len(ELLIPSIS)] + ELLIPSIS
    return path[:max_length]


def truncate_string(value: str, length: int) -> str:
    """Hard-cut ``value`` to ``length`` characters (template ``truncate`` function)."""
    if len(value) <= length:
        return value
    if length <= len(ELLIPSIS):
        return value[:max(length, 0)]
    return value[:length - len(ELLIPSIS)] + ELLIPSIS
