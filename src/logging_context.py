"""Conversation ID logging context for tracing turns across modules.

The dialogue engine sets the chat user's identifier at the start of every
turn. The root handler installed by ``load_config`` carries a
``ConversationIdFilter``, so every record it emits, from the engine, the
session store, the backend client or a library, is stamped with that id
and rendered by ``LOG_FORMAT``.

Usage:
    from src.logging_context import get_conversation_logger, set_conversation_id

    set_conversation_id("59160012345")
    logger = get_conversation_logger(__name__)
    logger.info("Processing turn")  # record.conversation_id == "59160012345"
"""

import logging
from contextvars import ContextVar
from typing import IO, Optional

LOG_FORMAT = "%(asctime)s [%(name)s] [%(conversation_id)s] %(levelname)s: %(message)s"

_conversation_id: ContextVar[str] = ContextVar("conversation_id", default="-")


def set_conversation_id(conversation_id: str) -> None:
    """Set the conversation ID for the current async context."""
    _conversation_id.set(conversation_id)


def get_conversation_id() -> str:
    """Retrieve the current conversation ID."""
    return _conversation_id.get()


class ConversationIdFilter(logging.Filter):
    """Injects conversation_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.conversation_id = _conversation_id.get()  # type: ignore[attr-defined]
        return True


def conversation_log_handler(stream: Optional[IO[str]] = None) -> logging.Handler:
    """Stream handler whose records always carry ``conversation_id``.

    The filter sits on the handler rather than on a logger, so records
    propagated from any logger can be formatted with ``LOG_FORMAT``.
    """
    handler = logging.StreamHandler(stream)
    handler.addFilter(ConversationIdFilter())
    return handler


def get_conversation_logger(name: str) -> logging.Logger:
    """Return a logger with the ConversationIdFilter attached.

    Records from this logger carry ``conversation_id`` even when they reach
    handlers other than the one from ``conversation_log_handler``.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, ConversationIdFilter) for f in logger.filters):
        logger.addFilter(ConversationIdFilter())
    return logger
