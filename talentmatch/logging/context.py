"""Context propagation for structured logging.

Fields pushed here (run_id, viewer_id, counterparty_id, ...) are injected into
every log record emitted inside the scope by ``ContextualFilter``. The context
lives in a ``ContextVar``, so each thread or task sees its own fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional


LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return the current logging context.

    Returns:
        Copy of the current context fields; changing it has no effect
    """
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Merge new fields into the logging context.

    A field that is already set is overridden until the returned token is
    popped.

    Args:
        **kwargs: Key-value pairs to add to the logging context

    Returns:
        Token to hand back to pop_log_context()

    Example:
        >>> token = push_log_context(run_id="abc123", viewer_id="employer-1")
        >>> pop_log_context(token)
    """
    current = LogContextVar.get()
    return LogContextVar.set({**current, **kwargs})


def pop_log_context(token: Token) -> None:
    """Restore the logging context captured by ``token``.

    Args:
        token: Token returned from push_log_context()
    """
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Clear all logging context fields (mainly for tests)."""
    LogContextVar.set({})


class log_context:
    """Context manager for scoped logging context.

    Pushes the fields on entry and restores the previous context on exit,
    including when the block raises.

    Example:
        >>> with log_context(run_id="abc123", viewer_id="seeker-7"):
        ...     logger.info("Ranking counterparties")
    """

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
