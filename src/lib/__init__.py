"""
lineview - Menu document interpreter

Turns line-oriented menu documents into selectable lines carrying commands.
"""

__version__ = "1.0.0"

from .parser import Parser, DirectiveReader
from .interpreter import Interpreter, LineView
from .command import CommandCell, CommandExecutor
from .watcher import SourceWatcher
from .render import view_render
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "DirectiveReader",
    "Interpreter",
    "LineView",
    "CommandCell",
    "CommandExecutor",
    "SourceWatcher",
    "view_render",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
