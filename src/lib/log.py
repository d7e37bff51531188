"""
Loguru logging gated by the verbosity of the engine that is resolving.

An Inliner connects itself with state_connectToLogger() when a resolve()
starts. The connection lives in a context variable, so every sub-resolution
task spawned from that call sees the same engine and logs (or stays quiet)
at that engine's verbosity, even when several engines run side by side.

Levels:
    1  resolution of each target
    2  reads, binary leaves, shortcut declarations
    3  cache hits, transforms applied, parser trace
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

_verbosity_source: ContextVar[Optional[Any]] = ContextVar('inliner_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<magenta>inliner</magenta> │ "
    "<cyan>{function}:{line}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Make `state.verbosity` the gate for LOG() calls in the current context.
    """
    _verbosity_source.set(state)


def verbosity_get() -> int:
    state = _verbosity_source.get()
    if state is None:
        return 0
    return getattr(state, 'verbosity', 0)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Emit `message` at DEBUG if the connected verbosity is at least `level`.

    Extra keyword arguments are handed to loguru for formatting.
    """
    if verbosity_get() >= level:
        logger.opt(depth=1).debug(message, **kwargs)
