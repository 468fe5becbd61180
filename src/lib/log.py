"""
Centralized logging using Loguru with context-aware verbosity.

The formatter core never takes a logger argument; instead LOG() looks up
the verbosity of whatever ProgramState (or other object with a
``verbosity`` attribute) has been connected to the current context.
Library callers that connect nothing get no output at all, so diagnostic
messages can never leak into, or alter, formatting results.

Usage:
    from tweeformat.lib.log import LOG, state_connectToLogger

    # At start of a pipeline stage:
    state_connectToLogger(state)

    # Anywhere in that context:
    LOG("Formatted 12 documents", level=1)
    LOG("Loaded 3 mid-block macros from twee-config", level=2)
    LOG("Passage body at line 40 is not valid JSON", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable holding whatever carries the active verbosity
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <22}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Make ``state.verbosity`` govern LOG() calls in the current context.

    Args:
        state: ProgramState (or any object with a verbosity attribute);
               None disconnects and silences LOG()
    """
    _program_state.set(state)


def verbosity_current() -> int:
    """
    Verbosity of the connected state, 0 when nothing is connected.
    """
    state = _program_state.get()
    return getattr(state, 'verbosity', 0) if state is not None else 0


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Levels 1 and 2 are emitted as INFO, level 3 as DEBUG.
    """
    if verbosity_current() < level:
        return

    if level >= 3:
        logger.opt(depth=1).debug(message, **kwargs)
    else:
        logger.opt(depth=1).info(message, **kwargs)
