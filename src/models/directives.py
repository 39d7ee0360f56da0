"""
Directive data model

A Directive is the meaning of one parsed document line. The set of kinds is
closed; the interpreter dispatches on `Directive.kind`, and the scopes of a
mapper chain rewrite one Directive into another.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Sequence, Set, Tuple


class DirectiveKind(Enum):
    """
    Kinds of directives produced by the parser

    Kinds that carry text keep it in `Directive.text`; `IMPORT` carries an
    ImportSpec, `END_MAP` a flag and `MULTIPLE` a tuple of directives.
    """
    NOOP = "noop"
    EMPTY = "empty"
    CLOSE = "close"                        # end of the current file
    CLEAN = "clean"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    TITLE = "title"
    SUBTITLE = "subtitle"
    WARNING = "warning"
    COMMENT = "comment"
    TEXT = "text"
    IMPORT = "import"
    END_MAP = "end-map"
    IGNORE_WARNINGS = "ignore-warnings"
    IGNORE_TEXT = "ignore-text"
    WATCH = "watch"
    THEN = "then"
    ELSE = "else"
    DISPLAY_WARNINGS = "display-warnings"
    MULTIPLE = "multiple"
    DEBUG = "debug"


class ImportKind(Enum):
    """
    The three ways a document pulls in another file

    IMPORT: fresh context, deduplicated across the whole run
    SOURCE: inherits command template and root-ness, deduplicated per lineage
    LINES:  inherits command template, only literal lines survive, no dedup
    """
    IMPORT = "import"
    SOURCE = "source"
    LINES = "lines"


@dataclass(frozen=True)
class ImportSpec:
    """
    Target of an import/source/lines directive

    Attributes:
        file: Path exactly as written in the document (before expansion)
        kind: Which inclusion mechanism to use
    """
    file: str
    kind: ImportKind


@dataclass(frozen=True)
class Directive:
    """
    One parsed line

    Attributes:
        kind: Directive kind
        text: Payload for PREFIX, SUFFIX, TITLE, SUBTITLE, WARNING, COMMENT, TEXT
        spec: Import target for IMPORT
        automatic: For END_MAP, whether it closes an automatic scope
        directives: For MULTIPLE, the directives to replay in order

    Example:
        >>> Directive.text_make("hello").kind
        <DirectiveKind.TEXT: 'text'>
    """
    kind: DirectiveKind
    text: str = ""
    spec: Optional[ImportSpec] = None
    automatic: bool = False
    directives: Tuple["Directive", ...] = field(default=())

    @classmethod
    def of(cls, kind: DirectiveKind) -> "Directive":
        """Build a payload-less directive"""
        return cls(kind=kind)

    @classmethod
    def text_make(cls, text: str) -> "Directive":
        return cls(kind=DirectiveKind.TEXT, text=text)

    @classmethod
    def warning_make(cls, text: str) -> "Directive":
        return cls(kind=DirectiveKind.WARNING, text=text)

    @classmethod
    def import_make(cls, file: str, kind: ImportKind) -> "Directive":
        return cls(kind=DirectiveKind.IMPORT, spec=ImportSpec(file=file, kind=kind))

    @classmethod
    def endMap_make(cls, automatic: bool = False) -> "Directive":
        return cls(kind=DirectiveKind.END_MAP, automatic=automatic)

    @classmethod
    def multiple_make(cls, directives: Sequence["Directive"]) -> "Directive":
        return cls(kind=DirectiveKind.MULTIPLE, directives=tuple(directives))


NOOP = Directive.of(DirectiveKind.NOOP)
CLOSE = Directive.of(DirectiveKind.CLOSE)


# Keywords that must be followed by a payload
PAYLOAD_DIRECTIVES: Set[str] = {
    'pre',
    'suf',
    'title',
    'subtitle',
    'import',
    'source',
    'lines',
    'warning',
    'text',
}


def payload_requires(keyword: str) -> bool:
    """Check if a directive keyword requires an argument"""
    return keyword in PAYLOAD_DIRECTIVES
