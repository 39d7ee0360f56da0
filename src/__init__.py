"""
lineview - Menu document interpreter

Renders plain-text menu documents, composed from several files through
import/source/lines directives, into lines that can each run a command.
"""

__version__ = "1.0.0"

from .lib import Parser, Interpreter, LineView, CommandExecutor, LOG, state_connectToLogger

__all__ = ["Parser", "Interpreter", "LineView", "CommandExecutor", "LOG", "state_connectToLogger", "__version__"]
