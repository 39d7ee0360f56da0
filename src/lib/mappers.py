"""
Scoped directive mappers

A mapper chain is a persistent linked stack of rewrite scopes. Each node is
immutable and may be shared by several contexts; pushing a scope creates a
new node pointing at the old one, popping a scope just moves a context's
pointer to the parent node.

Applying a chain walks it innermost first. Every mapper receives the
directive produced by the previous (more inner) mapper and its own depth,
0 being the innermost scope.

Built-in mappers:
    ignore_warnings   WARNING -> NOOP
    ignore_text       TEXT -> NOOP
    lines_only        everything except CLOSE, EMPTY, TEXT -> NOOP
    ThenMapper        conditional block after `watch ... then`
    ElseMapper        conditional block after `watch ... else`

Example:
    >>> chain = MapperNode.scope_push(None, ignore_text)
    >>> chain_apply(chain, Directive.text_make("hidden")).kind
    <DirectiveKind.NOOP: 'noop'>
"""

from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence, Tuple

from ..models.directives import NOOP, Directive, DirectiveKind


Mapper = Callable[[Directive, int], Directive]


@dataclass(frozen=True)
class MapperNode:
    """
    One scope of a mapper chain

    Attributes:
        mapper: Rewrite function (directive, depth) -> directive
        parent: Next outer scope, None for the outermost
        automatic: Whether the scope is closed by an automatic END_MAP
    """
    mapper: Mapper
    parent: Optional["MapperNode"] = None
    automatic: bool = False

    @staticmethod
    def scope_push(chain: Optional["MapperNode"], mapper: Mapper, automatic: bool = False) -> "MapperNode":
        """Return a new chain with `mapper` as its innermost scope"""
        return MapperNode(mapper=mapper, parent=chain, automatic=automatic)

    def __iter__(self) -> Iterator["MapperNode"]:
        node: Optional[MapperNode] = self
        while node is not None:
            yield node
            node = node.parent

    @property
    def name(self) -> str:
        return getattr(self.mapper, 'name', getattr(self.mapper, '__name__', type(self.mapper).__name__))

    def names_list(self) -> Tuple[str, ...]:
        """Scope names, innermost first"""
        return tuple(node.name for node in self)


def chain_apply(chain: Optional[MapperNode], directive: Directive) -> Directive:
    """
    Rewrite a directive through every scope of a chain

    Args:
        chain: Innermost scope, or None for no scopes
        directive: Directive as read from the source

    Returns:
        The directive after the outermost scope has seen it
    """
    if chain is None:
        return directive
    for depth, node in enumerate(chain):
        directive = node.mapper(directive, depth)
    return directive


def structural_is(directive: Directive, depth: int) -> bool:
    """
    Directives a suppressing scope must still let through

    CLOSE always passes so a file end can pop its context; END_MAP passes only
    at depth 0 so the block's own `end` can close it.
    """
    if directive.kind is DirectiveKind.CLOSE:
        return True
    return directive.kind is DirectiveKind.END_MAP and depth == 0


def ignore_warnings(directive: Directive, depth: int) -> Directive:
    return NOOP if directive.kind is DirectiveKind.WARNING else directive


def ignore_text(directive: Directive, depth: int) -> Directive:
    return NOOP if directive.kind is DirectiveKind.TEXT else directive


def lines_only(directive: Directive, depth: int) -> Directive:
    """Keep only literal content; used for `lines` includes"""
    if directive.kind in (DirectiveKind.CLOSE, DirectiveKind.EMPTY, DirectiveKind.TEXT):
        return directive
    return NOOP


class ThenMapper:
    """
    Scope installed by `then`

    With no buffered warnings the block runs normally. With warnings every
    directive is suppressed except structural ones. An `else` reaching this
    scope as the innermost one closes it and re-arms the watch with the
    same warnings, so the following `else` installs an ElseMapper.
    """

    name = 'then'

    def __init__(self, warnings: Sequence[str]) -> None:
        self.warnings: Tuple[str, ...] = tuple(warnings)

    def __call__(self, directive: Directive, depth: int) -> Directive:
        if directive.kind is DirectiveKind.ELSE and depth == 0:
            return Directive.multiple_make([
                Directive.endMap_make(automatic=False),
                Directive.of(DirectiveKind.WATCH),
                *(Directive.warning_make(warning) for warning in self.warnings),
                Directive.of(DirectiveKind.ELSE),
            ])

        if not self.warnings or structural_is(directive, depth):
            return directive
        return NOOP

    def __repr__(self) -> str:
        return f"ThenMapper(warnings={list(self.warnings)})"


class ElseMapper:
    """
    Scope installed by `else`

    With no buffered warnings the block is suppressed except structural
    directives. With warnings the block runs, and `display-warnings` expands
    into one WARNING per buffered warning.
    """

    name = 'else'

    def __init__(self, warnings: Sequence[str]) -> None:
        self.warnings: Tuple[str, ...] = tuple(warnings)

    def __call__(self, directive: Directive, depth: int) -> Directive:
        if not self.warnings:
            return directive if structural_is(directive, depth) else NOOP

        if directive.kind is DirectiveKind.DISPLAY_WARNINGS:
            return Directive.multiple_make([Directive.warning_make(w) for w in self.warnings])
        return directive

    def __repr__(self) -> str:
        return f"ElseMapper(warnings={list(self.warnings)})"
