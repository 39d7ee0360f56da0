"""
Interpreter for menu documents

Builds a LineView from a root document by driving an explicit stack of
SourceContexts. Each step reads one directive from the top context, rewrites
it through that context's mapper chain, and dispatches on its kind:

    - shared state changes (title, command cell, watch buffer, scopes)
    - line emission (text, empty, subtitle, warning)
    - stack changes (push an include, pop on CLOSE)
    - replay (MULTIPLE and failed includes are pushed back onto the reader)

Only a failure to open or read the root document aborts a run. Every other
problem ends up as a warning line in the output and the run continues.

Example:
    >>> view = LineView.read(Path("menu.txt"))
    >>> view.title
    'My Menu'
    >>> [line.text for line in view]
    ['first entry', 'second entry']
"""

from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple, Union

from ..models.directives import Directive, DirectiveKind
from ..models.line import CommandTemplate, EMPTY_TEMPLATE, Line, LineKind
from .command import CommandCell
from .log import LOG
from .mappers import ElseMapper, ThenMapper, chain_apply, ignore_text, ignore_warnings
from .parser import Parser
from .source import FileProvider, ImportFailure, SourceContext, import_resolve


class LineView:
    """
    Result of interpreting a document

    Attributes:
        root: Canonical path of the root document
        title: Document title (root path when no title directive was seen)
        lines: Emitted lines in document order
        sources: Every file opened during the build, in first-touch order
    """

    def __init__(
        self,
        root: Path,
        title: str,
        lines: Tuple[Line, ...],
        sources: Tuple[Path, ...],
        provider: Optional[FileProvider] = None,
    ) -> None:
        self.root = root
        self.title = title
        self.lines = lines
        self.sources = sources
        self.provider = provider

    @classmethod
    def read(cls, path: Union[str, Path], provider: Optional[FileProvider] = None) -> "LineView":
        """
        Interpret a document

        Args:
            path: Root document
            provider: File-open collaborator (local files by default)

        Raises:
            OSError: If the root document cannot be opened or read
        """
        return Interpreter(provider=provider).document_read(Path(path))

    def reload(self) -> "LineView":
        """
        Rebuild from the root path

        The current content is replaced only once the new build succeeded.

        Raises:
            OSError: If the root document cannot be opened or read
        """
        fresh = Interpreter(provider=self.provider).document_read(self.root)
        self.root, self.title, self.lines, self.sources = fresh.root, fresh.title, fresh.lines, fresh.sources
        return self

    def all_sources(self) -> Tuple[Path, ...]:
        """Files to watch for changes"""
        return self.sources

    def get(self, index: int) -> Optional[Line]:
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return None

    def __getitem__(self, index: int) -> Line:
        return self.lines[index]

    def __iter__(self) -> Iterator[Line]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __repr__(self) -> str:
        return f"LineView(root={self.root}, title={self.title!r}, lines={len(self.lines)})"


class Interpreter:
    """
    Source-stack interpreter

    One instance performs one build at a time; `document_read()` resets all
    per-run state before starting.
    """

    def __init__(self, provider: Optional[FileProvider] = None, parser: Optional[Parser] = None) -> None:
        """
        Initialize interpreter

        Args:
            provider: File-open collaborator
            parser: Line parser shared by every reader of the run

        Attributes:
            stack: Open contexts, innermost file last
            imported: Run-wide dedup set of `import` targets
            visited: Every opened path (dict used as an ordered set)
            lines: Lines emitted so far
            title: Document title, None until a root-level `title`
            handlers: Dispatch table from directive kind to handler
        """
        self.provider = provider or FileProvider()
        self.parser = parser or Parser()
        self.stack: List[SourceContext] = []
        self.imported: Set[Path] = set()
        self.visited: Dict[Path, None] = {}
        self.lines: List[Line] = []
        self.title: Optional[str] = None

        self.handlers: Dict[DirectiveKind, Callable[[SourceContext, int, Directive], None]] = {
            DirectiveKind.NOOP: self.nothing_handle,
            DirectiveKind.COMMENT: self.nothing_handle,
            DirectiveKind.EMPTY: self.empty_handle,
            DirectiveKind.CLOSE: self.close_handle,
            DirectiveKind.CLEAN: self.clean_handle,
            DirectiveKind.PREFIX: self.prefix_handle,
            DirectiveKind.SUFFIX: self.suffix_handle,
            DirectiveKind.TITLE: self.title_handle,
            DirectiveKind.SUBTITLE: self.subtitle_handle,
            DirectiveKind.WARNING: self.warning_handle,
            DirectiveKind.TEXT: self.text_handle,
            DirectiveKind.IMPORT: self.import_handle,
            DirectiveKind.END_MAP: self.endMap_handle,
            DirectiveKind.IGNORE_WARNINGS: self.ignoreWarnings_handle,
            DirectiveKind.IGNORE_TEXT: self.ignoreText_handle,
            DirectiveKind.WATCH: self.watch_handle,
            DirectiveKind.THEN: self.then_handle,
            DirectiveKind.ELSE: self.else_handle,
            DirectiveKind.DISPLAY_WARNINGS: self.displayWarnings_handle,
            DirectiveKind.MULTIPLE: self.multiple_handle,
            DirectiveKind.DEBUG: self.debug_handle,
        }

    def document_read(self, path: Path) -> LineView:
        """
        Interpret a root document to completion

        Args:
            path: Root document path (made canonical here)

        Returns:
            The finished LineView

        Raises:
            OSError: If the root document cannot be opened or read
        """
        self.stack, self.imported, self.visited, self.lines, self.title = [], set(), {}, [], None

        root = SourceContext.root_open(path, self.provider, self.parser)
        LOG(f"Reading {root.path}", level=2)
        self.imported.add(root.path)
        self.visited[root.path] = None
        self.stack.append(root)

        try:
            while self.stack:
                self.step()
        finally:
            for context in self.stack:
                context.close()
            self.stack = []

        LOG(f"Built {len(self.lines)} lines from {len(self.visited)} files", level=2)
        return LineView(
            root=root.path,
            title=self.title if self.title is not None else str(root.path),
            lines=tuple(self.lines),
            sources=tuple(self.visited),
            provider=self.provider,
        )

    def step(self) -> None:
        """Read, rewrite and dispatch one directive of the top context"""
        context = self.stack[-1]
        try:
            position, directive = context.reader.directive_read()
        except OSError as exc:
            if len(self.stack) == 1:
                raise
            self.warning_emit(context, context.reader.position, f"could not read {context.path}, {exc}")
            self.context_pop()
            return

        directive = chain_apply(context.chain, directive)
        self.handlers[directive.kind](context, position, directive)

    # ------------------------------------------------------------------ #
    # emission

    def line_emit(
        self,
        context: SourceContext,
        position: int,
        text: str,
        kind: LineKind = LineKind.NORMAL,
        command: CommandTemplate = EMPTY_TEMPLATE,
    ) -> None:
        self.lines.append(Line(text=text, source=context.path, position=position, kind=kind, command=command))

    def warning_emit(self, context: SourceContext, position: int, text: str) -> None:
        """Emit a warning line directly, bypassing mappers and the watch buffer"""
        LOG(f"{context.path}:{position}: {text}", level=2)
        self.line_emit(context, position, text, LineKind.WARNING)

    # ------------------------------------------------------------------ #
    # stack

    def context_push(self, context: SourceContext) -> None:
        self.visited.setdefault(context.path, None)
        self.stack.append(context)
        LOG(f"push {context.path} (depth {len(self.stack)})", level=3)

    def context_pop(self) -> None:
        """Close the top context, flushing a watch that was never resolved"""
        context = self.stack.pop()
        buffered = context.watch.sleep()
        if buffered is not None:
            position = context.reader.position
            self.warning_emit(context, position, "watch was not closed by then or else before end of file")
            for warning in buffered:
                self.line_emit(context, position, warning, LineKind.WARNING)
        context.close()
        LOG(f"pop {context.path} (depth {len(self.stack)})", level=3)

    # ------------------------------------------------------------------ #
    # handlers

    def nothing_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        pass

    def empty_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        self.line_emit(context, position, "")

    def close_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        self.context_pop()

    def clean_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        context.command = CommandCell()

    def prefix_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        context.command.prefix_append(directive.text)

    def suffix_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        context.command.suffix_append(directive.text)

    def title_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        if context.is_root:
            self.title = directive.text
        else:
            LOG(f"{context.path}:{position}: title ignored outside the root lineage", level=3)

    def subtitle_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        self.line_emit(context, position, directive.text, LineKind.TITLE)

    def warning_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        if context.watch.is_watching:
            context.watch.warning_buffer(directive.text)
            return
        self.warning_emit(context, position, directive.text)

    def text_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        self.line_emit(context, position, directive.text, command=context.command.snapshot())

    def import_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        spec = directive.spec
        try:
            child = import_resolve(spec, context, self.imported, self.provider, self.parser)
        except ImportFailure as exc:
            LOG(f"{context.path}:{position}: {exc}", level=2)
            warning = Directive.warning_make(f"could not {spec.kind.value} {spec.file}: {exc}")
            context.reader.pushback(position, [warning])
            return

        if child is not None:
            self.context_push(child)

    def endMap_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        chain = context.chain
        if chain is None:
            self.warning_emit(context, position, "end: there is no open block to close")
            return
        if chain.automatic != directive.automatic:
            expected = "automatic" if chain.automatic else "manual"
            self.warning_emit(
                context, position, f"end: innermost block '{chain.name}' is {expected} and was not closed"
            )
            return
        context.chain = chain.parent

    def ignoreWarnings_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        context.scope_push(ignore_warnings)

    def ignoreText_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        context.scope_push(ignore_text)

    def watch_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        if not context.watch.watch():
            self.warning_emit(context, position, "watch: already watching for warnings")

    def then_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        buffered = context.watch.sleep()
        if buffered is None:
            self.warning_emit(context, position, "then: no watch to resolve")
            return
        context.scope_push(ThenMapper(buffered))

    def else_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        buffered = context.watch.sleep()
        if buffered is None:
            self.warning_emit(context, position, "else: no watch to resolve")
            return
        context.scope_push(ElseMapper(buffered))

    def displayWarnings_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        self.warning_emit(context, position, "display-warnings: not inside an else block with warnings")

    def multiple_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        context.reader.pushback(position, directive.directives)

    def debug_handle(self, context: SourceContext, position: int, directive: Directive) -> None:
        LOG(f"debug @ {position} (depth {len(self.stack)}): {context.describe()}", level=1)
