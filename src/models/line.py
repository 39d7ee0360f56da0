"""
Line and command template models

Type-safe structures for the output of a document build: the selectable
lines, and the command template each of them may carry.
"""

from enum import Enum
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class CommandTemplate:
    """
    Prefix/suffix argument template

    A template is an immutable value. Appending produces a new template, so a
    Line holding a template keeps it exactly as it was when the line was
    emitted. The shared, mutable side lives in lib.command.CommandCell.

    Attributes:
        prefix: Arguments placed before the line text
        suffix: Arguments placed after the line text

    Example:
        >>> CommandTemplate().prefix_append("echo").suffix_append("--flag")
        CommandTemplate(prefix=('echo',), suffix=('--flag',))
    """
    prefix: Tuple[str, ...] = field(default=())
    suffix: Tuple[str, ...] = field(default=())

    def prefix_append(self, arg: str) -> "CommandTemplate":
        return CommandTemplate(prefix=self.prefix + (arg,), suffix=self.suffix)

    def suffix_append(self, arg: str) -> "CommandTemplate":
        return CommandTemplate(prefix=self.prefix, suffix=self.suffix + (arg,))

    def is_empty(self) -> bool:
        """A template is empty iff nothing was ever appended to it"""
        return not self.prefix and not self.suffix

    def args_build(self, text: str) -> List[str]:
        """Full argument list for a line: prefix, then the text, then suffix"""
        return [*self.prefix, text, *self.suffix]


EMPTY_TEMPLATE = CommandTemplate()


class LineKind(Enum):
    NORMAL = "normal"
    TITLE = "title"
    WARNING = "warning"


@dataclass(frozen=True)
class ResolvedCommand:
    """
    A command ready to be handed to an executor

    Attributes:
        args: Program followed by its arguments
        line_number: Position of the selected line in its source file
        source: File the selected line came from
    """
    args: Tuple[str, ...]
    line_number: int
    source: Path

    @property
    def program(self) -> str:
        return self.args[0]


@dataclass(frozen=True)
class Line:
    """
    One emitted line of a document

    Lines are built only by the interpreter and never change afterwards.

    Attributes:
        text: Display text
        source: Canonical path of the file the line came from
        position: 1-based line number inside `source`
        kind: Normal, Title (subtitle heading) or Warning
        command: Command template as of the moment the line was emitted
    """
    text: str
    source: Path
    position: int
    kind: LineKind = LineKind.NORMAL
    command: CommandTemplate = EMPTY_TEMPLATE

    @property
    def has_command(self) -> bool:
        return not self.command.is_empty()

    @property
    def is_title(self) -> bool:
        return self.kind is LineKind.TITLE

    @property
    def is_warning(self) -> bool:
        return self.kind is LineKind.WARNING

    def command_resolve(self) -> Optional[ResolvedCommand]:
        """
        Resolve this line's command

        Returns:
            ResolvedCommand built from prefix + [text] + suffix, or None when
            the line carries no command template.
        """
        if not self.has_command:
            return None
        return ResolvedCommand(
            args=tuple(self.command.args_build(self.text)),
            line_number=self.position,
            source=self.source,
        )
