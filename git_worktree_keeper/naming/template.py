"""Small template language for worktree naming patterns.

Templates are literal text with actions in double braces::

    {{.Project}}-{{.Branch | replace "/" "-" | truncate 20}}

An action names one variable from a fixed whitelist and may pipe it through
text functions. The piped value is always the function's input; any further
arguments are quoted strings or integers written after the function name.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from git_worktree_keeper.constants import TEMPLATE_FUNCTIONS, TEMPLATE_VARIABLES
from git_worktree_keeper.exceptions import TemplateSyntaxError, UnknownVariable
from git_worktree_keeper.models.pattern import PatternContext
from git_worktree_keeper.naming.sanitize import sanitize_path, truncate_string

OPEN = "{{"
CLOSE = "}}"

_TOKEN = re.compile(
    r"""\s*(?:
        (?P<pipe>\|)
      | (?P<field>\.[A-Za-z_][A-Za-z0-9_]*)
      | (?P<string>"(?:[^"\\]|\\.)*")
      | (?P<number>-?\d+)
      | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    )""",
    re.VERBOSE,
)
_ESCAPE = re.compile(r"\\(.)")
_WORD_START = re.compile(r"(?<![A-Za-z0-9_])([a-z])")

Argument = Union[str, int]


def _title(value: str) -> str:
    return _WORD_START.sub(lambda m: m.group(1).upper(), value)


def _replace(value: str, old: str, new: str) -> str:
    return value.replace(old, new)


# name -> (implementation, argument types)
_FUNCTIONS: Dict[str, Tuple[Callable[..., str], Tuple[type, ...]]] = {
    "lower": (str.lower, ()),
    "upper": (str.upper, ()),
    "title": (_title, ()),
    "replace": (_replace, (str, str)),
    "trim": (str.strip, ()),
    "sanitize": (sanitize_path, ()),
    "truncate": (truncate_string, (int,)),
}


@dataclass(frozen=True)
class _Call:
    name: str
    args: Tuple[Argument, ...]


@dataclass(frozen=True)
class _Action:
    variable: str
    pipeline: Tuple[_Call, ...]


Node = Union[str, _Action]


class Template:
    """A parsed template."""

    def __init__(self, source: str, nodes: List[Node]):
        self.source = source
        self.nodes = nodes

    @property
    def variables(self) -> List[str]:
        """Variable names referenced by the template, in order of appearance."""
        return [node.variable for node in self.nodes if isinstance(node, _Action)]

    @property
    def has_actions(self) -> bool:
        return any(isinstance(node, _Action) for node in self.nodes)

    def render(self, context: Union[PatternContext, Mapping[str, str]]) -> str:
        out = []
        for node in self.nodes:
            if isinstance(node, str):
                out.append(node)
                continue
            value = _lookup(context, node.variable)
            for call in node.pipeline:
                func, _ = _FUNCTIONS[call.name]
                value = func(value, *call.args)
            out.append(value)
        return "".join(out)


def _lookup(context: Union[PatternContext, Mapping[str, str]], name: str) -> str:
    if isinstance(context, PatternContext):
        return context.lookup(name)
    if name not in context:
        raise UnknownVariable(name)
    return str(context[name])


def _tokenize(source: str, body: str, offset: int) -> List[Tuple[str, str]]:
    tokens = []
    pos = 0
    while pos < len(body):
        if not body[pos:].strip():
            break
        match = _TOKEN.match(body, pos)
        if not match:
            raise TemplateSyntaxError(
                source, f"unexpected character {body[pos:].lstrip()[0]!r}", offset + pos
            )
        kind = match.lastgroup
        tokens.append((kind, match.group(kind)))
        pos = match.end()
    return tokens


def _parse_call(source: str, segment: List[Tuple[str, str]], offset: int) -> _Call:
    if not segment:
        raise TemplateSyntaxError(source, "empty pipeline stage", offset)
    kind, name = segment[0]
    if kind != "ident":
        raise TemplateSyntaxError(source, f"expected a function name, got {name!r}", offset)
    if name not in _FUNCTIONS:
        raise TemplateSyntaxError(source, f"unknown function {name!r}", offset)

    _, arg_types = _FUNCTIONS[name]
    raw_args = segment[1:]
    if len(raw_args) != len(arg_types):
        raise TemplateSyntaxError(
            source,
            f"function {name!r} takes {len(arg_types)} argument(s), got {len(raw_args)}",
            offset,
        )

    args: List[Argument] = []
    for (arg_kind, text), expected in zip(raw_args, arg_types):
        if expected is int and arg_kind == "number":
            args.append(int(text))
        elif expected is str and arg_kind == "string":
            args.append(_ESCAPE.sub(r"\1", text[1:-1]))
        else:
            raise TemplateSyntaxError(
                source, f"function {name!r} expects {expected.__name__} argument, got {text!r}", offset
            )
    return _Call(name, tuple(args))


def _parse_action(
    source: str, body: str, offset: int, allowed: Mapping[str, str]
) -> _Action:
    tokens = _tokenize(source, body, offset)
    if not tokens:
        raise TemplateSyntaxError(source, "empty action", offset)

    segments: List[List[Tuple[str, str]]] = [[]]
    for token in tokens:
        if token[0] == "pipe":
            segments.append([])
        else:
            segments[-1].append(token)

    head = segments[0]
    if len(head) != 1 or head[0][0] != "field":
        raise TemplateSyntaxError(source, "action must start with a variable such as .Branch", offset)

    variable = head[0][1][1:]
    if variable not in allowed:
        raise UnknownVariable(variable)

    pipeline = tuple(_parse_call(source, segment, offset) for segment in segments[1:])
    return _Action(variable, pipeline)


def parse_template(source: str, allowed: Optional[Mapping[str, str]] = None) -> Template:
    """
    Parse template text.

    Args:
        source: Template text
        allowed: Whitelisted variable names (defaults to the naming variables)

    Returns:
        Parsed Template

    Raises:
        TemplateSyntaxError: For unparsable markup
        UnknownVariable: For variables outside the whitelist
    """
    if allowed is None:
        allowed = TEMPLATE_VARIABLES

    nodes: List[Node] = []
    pos = 0
    while pos < len(source):
        start = source.find(OPEN, pos)
        literal = source[pos:] if start == -1 else source[pos:start]
        stray = literal.find(CLOSE)
        if stray != -1:
            raise TemplateSyntaxError(source, "unexpected '}}'", pos + stray)
        if literal:
            nodes.append(literal)
        if start == -1:
            break

        end = source.find(CLOSE, start + len(OPEN))
        if end == -1:
            raise TemplateSyntaxError(source, "unclosed action", start)
        body = source[start + len(OPEN):end]
        if OPEN in body:
            raise TemplateSyntaxError(source, "nested '{{'", start)
        nodes.append(_parse_action(source, body, start + len(OPEN), allowed))
        pos = end + len(CLOSE)

    return Template(source, nodes)


def resolve(
    template: str,
    context: Union[PatternContext, Mapping[str, str]],
    allowed: Optional[Mapping[str, str]] = None,
) -> str:
    """Parse ``template`` and render it against ``context``."""
    return parse_template(template, allowed).render(context)


def template_variables() -> Dict[str, str]:
    """Available template variables with descriptions."""
    return {f"{{{{.{name}}}}}": description for name, description in TEMPLATE_VARIABLES.items()}


def template_functions() -> Dict[str, str]:
    """Available template functions with usage examples."""
    return dict(TEMPLATE_FUNCTIONS)
