"""
Source contexts and include resolution

A SourceContext is one open file being interpreted, together with the state
that is local to it: its command cell, its mapper chain, its watch state and
the `sourced` set of its lineage.

Three directives open a new context on top of the current one:

    import   fresh command cell, fresh lineage, never root; every target is
             opened at most once per run (the run-wide `imported` set)
    source   shares the parent's command cell, lineage and root-ness; a
             target is opened at most once per lineage
    lines    shares the parent's command cell, starts a fresh lineage and
             installs the automatic `lines_only` scope; no dedup at all, so
             a `lines` cycle never terminates

Resolution never aborts a run: problems raise ImportFailure, which the
interpreter turns into a warning.
"""

from enum import Enum
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional, Set, TextIO

from ..models.directives import ImportKind, ImportSpec
from .command import CommandCell
from .log import LOG
from .mappers import MapperNode, lines_only
from .parser import DirectiveReader, Parser


HOME_PREFIX = "~/"


class ImportFailure(Exception):
    """An include target could not be resolved or opened"""


class FileProvider:
    """
    Opens canonical document paths for reading

    Subclass and override `provide()` to read documents from somewhere other
    than the local file system.
    """

    def provide(self, path: Path) -> TextIO:
        from ..config import appsettings

        return path.open("r", encoding=appsettings.encoding, errors="replace")


class WatchState(Enum):
    SLEEPING = "sleeping"
    WATCHING = "watching"


class WarningWatch:
    """
    Warning buffer for watch/then/else

    Sleeping --watch()--> Watching{buffered} --sleep()--> Sleeping

    While watching, warnings are collected instead of displayed. `sleep()`
    hands the collected warnings back so they can be given to a then/else
    scope.
    """

    def __init__(self) -> None:
        self.state = WatchState.SLEEPING
        self.buffered: List[str] = []

    @property
    def is_watching(self) -> bool:
        return self.state is WatchState.WATCHING

    def watch(self) -> bool:
        """Start collecting; returns False if already watching"""
        if self.is_watching:
            return False
        self.state = WatchState.WATCHING
        self.buffered = []
        return True

    def warning_buffer(self, text: str) -> None:
        self.buffered.append(text)

    def sleep(self) -> Optional[List[str]]:
        """Stop collecting; returns the buffered warnings, None if not watching"""
        if not self.is_watching:
            return None
        buffered = self.buffered
        self.state = WatchState.SLEEPING
        self.buffered = []
        return buffered

    def __repr__(self) -> str:
        if self.is_watching:
            return f"Watching(buffered={self.buffered})"
        return "Sleeping"


@dataclass
class SourceContext:
    """
    One open input file and its interpretation state

    Attributes:
        reader: Directive stream of the file
        path: Canonical path of the file
        is_root: Whether `title` directives here set the document title
        command: Command cell, possibly shared with other contexts
        sourced: Paths already sourced in this lineage, shared by the lineage
        chain: Innermost mapper scope, None when no scope is active
        watch: Warning watch state of this file
    """
    reader: DirectiveReader
    path: Path
    is_root: bool = False
    command: CommandCell = field(default_factory=CommandCell)
    sourced: Set[Path] = field(default_factory=set)
    chain: Optional[MapperNode] = None
    watch: WarningWatch = field(default_factory=WarningWatch)

    @property
    def directory(self) -> Path:
        return self.path.parent

    @classmethod
    def root_open(cls, path: Path, provider: FileProvider, parser: Parser) -> "SourceContext":
        """
        Open the root document

        Raises:
            OSError: If the root cannot be canonicalized or opened
        """
        try:
            path = Path(path).resolve(strict=True)
        except RuntimeError as exc:
            raise OSError(f"could not canonicalize path, {path}, {exc}") from exc
        context = cls(
            reader=DirectiveReader(provider.provide(path), parser),
            path=path,
            is_root=True,
        )
        context.sourced.add(path)
        return context

    def scope_push(self, mapper, automatic: bool = False) -> None:
        self.chain = MapperNode.scope_push(self.chain, mapper, automatic)

    def close(self) -> None:
        self.reader.close()

    def describe(self) -> str:
        """One-line summary used by the `debug` directive"""
        return (
            f"{self.path} root={self.is_root} position={self.reader.position} "
            f"command={self.command!r} watch={self.watch!r} "
            f"scopes={list(self.chain.names_list()) if self.chain else []}"
        )


def path_expand(text: str) -> Path:
    """
    Expand a leading `~/` to the user's home directory

    `~/~/x` escapes the expansion and yields the relative path `~/x`.

    Raises:
        ImportFailure: If the home directory cannot be determined
    """
    if not text.startswith(HOME_PREFIX):
        return Path(text)

    rest = text[len(HOME_PREFIX):]
    if rest.startswith(HOME_PREFIX):
        return Path(rest)

    try:
        return Path.home() / rest
    except RuntimeError as exc:
        raise ImportFailure("could not find user home") from exc


def path_canonicalize(text: str, directory: Path) -> Path:
    """
    Resolve an include target relative to the including file's directory

    Raises:
        ImportFailure: With a message quoting the offending path
    """
    target = path_expand(text)
    try:
        return (directory / target).resolve(strict=True)
    except FileNotFoundError as exc:
        raise ImportFailure(f"could not find {target}") from exc
    except (OSError, RuntimeError) as exc:
        raise ImportFailure(f"could not canonicalize path, {target}, {exc}") from exc


def import_resolve(
    spec: ImportSpec,
    parent: SourceContext,
    imported: Set[Path],
    provider: FileProvider,
    parser: Parser,
) -> Optional[SourceContext]:
    """
    Resolve an import/source/lines directive against its parent context

    Args:
        spec: Target and kind from the directive
        parent: Context containing the directive
        imported: Run-wide set of imported paths
        provider: Opens the resolved file
        parser: Parser given to the new reader

    Returns:
        The new context to push, or None when the target was already
        imported/sourced (a silent no-op)

    Raises:
        ImportFailure: If the target cannot be found or opened
    """
    path = path_canonicalize(spec.file, parent.directory)

    if spec.kind is ImportKind.IMPORT and path in imported:
        LOG(f"skip import {path}: already imported", level=3)
        return None
    if spec.kind is ImportKind.SOURCE and path in parent.sourced:
        LOG(f"skip source {path}: already sourced in this lineage", level=3)
        return None

    try:
        reader = DirectiveReader(provider.provide(path), parser)
    except OSError as exc:
        raise ImportFailure(f"could not open {path}, {exc}") from exc

    if spec.kind is ImportKind.IMPORT:
        imported.add(path)
        return SourceContext(reader=reader, path=path, sourced={path})

    if spec.kind is ImportKind.SOURCE:
        parent.sourced.add(path)
        return SourceContext(
            reader=reader,
            path=path,
            is_root=parent.is_root,
            command=parent.command,
            sourced=parent.sourced,
        )

    context = SourceContext(reader=reader, path=path, command=parent.command)
    context.scope_push(lines_only, automatic=True)
    return context
