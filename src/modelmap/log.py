"""
Topic-scoped logging.

Every message belongs to a *topic* (``compile``, ``execute``, ``results``
or one added with :func:`register_topic`) and is sent to the standard
library logger ``modelmap.<topic>``.  Independently of the configured
handlers, messages can be echoed to stdout for interactive debugging::

    with debug_logging("debug", {"compile"}):
        await save(instance)

The echo defaults come from :func:`~modelmap.config.get_settings`.
Logging is a side channel: nothing here can change an operation's result.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

from .config import get_settings

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_log = logging.getLogger(__name__)

_LEVELS: dict[str, int] = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "disabled": logging.CRITICAL + 10,
}

_all_topics: set[str] = {"compile", "execute", "results"}

# ``None`` means "fall back to settings".
_debug_level: ContextVar[str | None] = ContextVar("modelmap_debug_level", default=None)
_debug_topics: ContextVar[frozenset[str] | None] = ContextVar(
    "modelmap_debug_topics", default=None
)


def register_topic(topic: str) -> None:
    """Add a topic that log calls may use."""
    _all_topics.add(topic)


def all_topics() -> frozenset[str]:
    return frozenset(_all_topics)


def _level_number(level: str) -> int:
    try:
        return _LEVELS[level.lower()]
    except KeyError:
        raise ValueError(f"Unknown log level: {level!r}") from None


@contextlib.contextmanager
def debug_logging(
    level: str = "debug", topics: Iterable[str] | None = None
) -> Iterator[None]:
    """Echo messages at *level* or above (for *topics*, default all) to stdout."""
    _level_number(level)
    level_token = _debug_level.set(level.lower())
    topics_token = _debug_topics.set(frozenset(topics) if topics is not None else None)
    try:
        yield
    finally:
        _debug_topics.reset(topics_token)
        _debug_level.reset(level_token)


def _echo_level() -> int | None:
    level = _debug_level.get() or get_settings().debug_level
    if level is None:
        return None
    return _LEVELS[level]


def _echo_topics() -> frozenset[str] | None:
    if _debug_level.get() is not None:
        return _debug_topics.get()
    return get_settings().topics()


def enable_echo(level: int, topic: str) -> bool:
    """Whether a message at *level* on *topic* is echoed to stdout."""
    threshold = _echo_level()
    if threshold is None or level < threshold:
        return False
    topics = _echo_topics()
    return topics is None or topic in topics


def _echo(level: int, topic: str, message: str, args: tuple[Any, ...]) -> None:
    try:
        text = message % args if args else message
        sys.stdout.write(f"[{logging.getLevelName(level)} {topic}] {text}\n")
    except Exception:  # noqa: BLE001
        _log.debug("Failed to echo log message %r", message, exc_info=True)


def log(
    level: int,
    topic: str,
    message: str,
    *args: Any,
    exc_info: BaseException | None = None,
) -> None:
    if topic not in _all_topics:
        raise ValueError(
            f"Unknown log topic {topic!r}; known topics: {', '.join(sorted(_all_topics))}"
        )
    if enable_echo(level, topic):
        _echo(level, topic, message, args)
    logger = logging.getLogger(f"modelmap.{topic}")
    if logger.isEnabledFor(level):
        logger.log(level, message, *args, exc_info=exc_info)


def errorf(topic: str, message: str, *args: Any, exc_info: BaseException | None = None) -> None:
    """Only things that are actually serious errors should be logged at this level."""
    log(logging.ERROR, topic, message, *args, exc_info=exc_info)


def warnf(topic: str, message: str, *args: Any, exc_info: BaseException | None = None) -> None:
    """Bad things that can be worked around."""
    log(logging.WARNING, topic, message, *args, exc_info=exc_info)


def infof(topic: str, message: str, *args: Any, exc_info: BaseException | None = None) -> None:
    log(logging.INFO, topic, message, *args, exc_info=exc_info)


def debugf(topic: str, message: str, *args: Any, exc_info: BaseException | None = None) -> None:
    """Most messages belong here."""
    log(logging.DEBUG, topic, message, *args, exc_info=exc_info)


def tracef(topic: str, message: str, *args: Any, exc_info: BaseException | None = None) -> None:
    """Once-per-row messages."""
    log(TRACE, topic, message, *args, exc_info=exc_info)


__all__ = [
    "TRACE",
    "all_topics",
    "debug_logging",
    "debugf",
    "enable_echo",
    "errorf",
    "infof",
    "log",
    "register_topic",
    "tracef",
    "warnf",
]
