"""Sanitizing and templating helpers for worktree names."""

from .sanitize import sanitize_component, sanitize_path, truncate_path, truncate_string
from .template import Template, parse_template, resolve, template_functions, template_variables

__all__ = [
    "Template",
    "parse_template",
    "resolve",
    "sanitize_component",
    "sanitize_path",
    "template_functions",
    "template_variables",
    "truncate_path",
    "truncate_string",
]
