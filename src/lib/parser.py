"""
Parser for the line-oriented menu document format

Turns raw text lines into Directives.

Line grammar, checked in this order:
1. Blank (after trimming)        -> EMPTY
2. `#-keyword [payload]`         -> directive command
3. `##...`                       -> TEXT with one leading '#' removed
4. `#...`                        -> COMMENT (dropped, still counts as a line)
5. anything else                 -> TEXT

A directive never fails to parse: unknown keywords and missing arguments
become WARNING directives so the document keeps rendering.

Example:
    >>> parser = Parser()
    >>> parser.line_parse("#-pre echo").text
    'echo'
    >>> parser.line_parse("## not a comment").text
    '# not a comment'
"""

from collections import deque
from typing import Deque, Dict, Iterable, Optional, TextIO, Tuple

from ..models.directives import (
    CLOSE,
    Directive,
    DirectiveKind,
    ImportKind,
    payload_requires,
)


# Keywords that map 1:1 onto a payload-less directive
SIMPLE_DIRECTIVES: Dict[str, DirectiveKind] = {
    'clean': DirectiveKind.CLEAN,
    'empty': DirectiveKind.EMPTY,
    'close': DirectiveKind.CLOSE,
    'ignore-warnings': DirectiveKind.IGNORE_WARNINGS,
    'ignore-text': DirectiveKind.IGNORE_TEXT,
    'watch': DirectiveKind.WATCH,
    'then': DirectiveKind.THEN,
    'else': DirectiveKind.ELSE,
    'display-warnings': DirectiveKind.DISPLAY_WARNINGS,
    'debug': DirectiveKind.DEBUG,
}

# Keywords whose payload becomes Directive.text
TEXT_DIRECTIVES: Dict[str, DirectiveKind] = {
    'pre': DirectiveKind.PREFIX,
    'suf': DirectiveKind.SUFFIX,
    'title': DirectiveKind.TITLE,
    'subtitle': DirectiveKind.SUBTITLE,
    'warning': DirectiveKind.WARNING,
    'text': DirectiveKind.TEXT,
}

IMPORT_DIRECTIVES: Dict[str, ImportKind] = {
    'import': ImportKind.IMPORT,
    'source': ImportKind.SOURCE,
    'lines': ImportKind.LINES,
}


class Parser:
    """
    Parser for single document lines

    Stateless apart from the configured markers; one instance can be shared
    by every reader of a run.
    """

    def __init__(self, directive_marker: Optional[str] = None, comment_marker: Optional[str] = None):
        """
        Initialize parser with the document markers

        Args:
            directive_marker: Prefix of directive lines (default from settings)
            comment_marker: Prefix of comment lines (default from settings)
        """
        from ..config import appsettings

        self.directive_marker = directive_marker or appsettings.directive_marker
        self.comment_marker = comment_marker or appsettings.comment_marker

    def line_parse(self, line: str) -> Directive:
        """
        Parse one line of a document

        Args:
            line: Raw line, with or without its trailing newline

        Returns:
            Exactly one Directive
        """
        line = line.rstrip()

        if not line.strip():
            return Directive.of(DirectiveKind.EMPTY)

        if line.startswith(self.directive_marker):
            return self.command_parse(line[len(self.directive_marker):].strip())

        if line.startswith(self.comment_marker * 2):
            return Directive.text_make(line[len(self.comment_marker):])

        if line.startswith(self.comment_marker):
            return Directive(kind=DirectiveKind.COMMENT, text=line[len(self.comment_marker):].strip())

        return Directive.text_make(line)

    def command_parse(self, command: str) -> Directive:
        """
        Parse the part of a directive line after the marker

        Splits into a keyword and an optional payload. The payload is trimmed
        and a single pair of surrounding double quotes is stripped verbatim.

        Args:
            command: Text after `#-`, already trimmed

        Returns:
            The matching Directive, or a WARNING describing the problem

        Example:
            >>> Parser().command_parse('title "My Menu"').text
            'My Menu'
            >>> Parser().command_parse('frobnicate').text
            'frobnicate is not a directive'
        """
        if not command:
            return Directive.warning_make(f'could not parse directive "{command}"')

        parts = command.split(None, 1)
        keyword = parts[0]
        payload = self.payload_extract(parts[1] if len(parts) > 1 else "")

        if keyword in SIMPLE_DIRECTIVES:
            return Directive.of(SIMPLE_DIRECTIVES[keyword])

        if keyword == 'end':
            return Directive.endMap_make(automatic=False)

        if keyword == 'comment':
            return Directive(kind=DirectiveKind.COMMENT, text=payload or "")

        if payload_requires(keyword) and payload is None:
            return Directive.warning_make(f"directive {keyword} requires an argument")

        if keyword in TEXT_DIRECTIVES:
            return Directive(kind=TEXT_DIRECTIVES[keyword], text=payload or "")

        if keyword in IMPORT_DIRECTIVES:
            return Directive.import_make(payload or "", IMPORT_DIRECTIVES[keyword])

        return Directive.warning_make(f"{keyword} is not a directive")

    @staticmethod
    def payload_extract(rest: str) -> Optional[str]:
        """
        Trim a payload and strip one pair of enclosing double quotes

        Returns:
            None when there is no payload at all
        """
        payload = rest.strip()
        if not payload:
            return None
        if len(payload) >= 2 and payload.startswith('"') and payload.endswith('"'):
            return payload[1:-1]
        return payload


class DirectiveReader:
    """
    Stream of (position, Directive) pairs read from one open file

    Positions are 1-based line numbers. Once the file is exhausted every read
    returns CLOSE. Directives handed to `pushback()` are returned before any
    further file input, in the order given, tagged with the position of the
    line that produced them.
    """

    def __init__(self, stream: TextIO, parser: Optional[Parser] = None):
        self.stream = stream
        self.parser = parser or Parser()
        self.position = 0
        self.pending: Deque[Tuple[int, Directive]] = deque()
        self.exhausted = False

    def directive_read(self) -> Tuple[int, Directive]:
        """
        Read the next directive

        Returns:
            (position, directive); pushed back directives come first

        Raises:
            OSError: If the underlying stream fails
        """
        if self.pending:
            return self.pending.popleft()

        if self.exhausted:
            return self.position, CLOSE

        line = self.stream.readline()
        if not line:
            self.exhausted = True
            return self.position, CLOSE

        self.position += 1
        return self.position, self.parser.line_parse(line)

    def pushback(self, position: int, directives: Iterable[Directive]) -> None:
        """Queue directives to be read again before new input, keeping their order"""
        self.pending.extendleft(reversed([(position, d) for d in directives]))

    def close(self) -> None:
        self.stream.close()
