"""
Centralized logging using Loguru with context-aware verbosity.

The interpreter and the CLI stages call LOG() without passing state around;
the verbosity comes from whichever ProgramState was last connected in the
current context. When no state is connected (plain library use, tests),
LOG() stays silent.

Usage:
    from lineview.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)

    LOG("Reading menu.txt", level=1)
    LOG("push import a.txt (depth 2)", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

# Configure loguru with lineview-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <22}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Args:
        state: Object with a `verbosity` attribute (normally ProgramState)
    """
    _program_state.set(state)


def verbosity_get() -> int:
    """Verbosity of the connected state, 0 when nothing is connected"""
    state = _program_state.get()
    return getattr(state, 'verbosity', 0) if state else 0


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Verbosity levels:
        1 = Normal output (default)
        2 = Verbose (-v)
        3 = Interpreter trace (-vv or higher)
    """
    if verbosity_get() >= level:
        logger.opt(depth=1).debug(message, **kwargs)
