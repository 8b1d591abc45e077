"""Context propagation for structured logging.

Contextual metadata (fingerprint, analysis_id, ...) pushed here is injected
into every log record emitted within the scope. Context lives in a
ContextVar, so it is isolated per thread and per task; work handed to a
thread pool must be wrapped with ``run_in_current_context`` to keep it.
"""

import contextvars
from contextvars import ContextVar, Token
from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")

# Context variable to store logging context across call chains
LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Get a copy of the current logging context."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Push new context fields onto the logging context stack.

    This merges new fields with existing context. Use pop_log_context()
    to restore the previous state.

    Args:
        **kwargs: Key-value pairs to add to the logging context

    Returns:
        Token that can be used to restore previous context state

    Example:
        >>> token = push_log_context(fingerprint="abc123")
        >>> # ... all logs now include fingerprint ...
        >>> pop_log_context(token)
    """
    current = LogContextVar.get()
    return LogContextVar.set({**current, **kwargs})


def pop_log_context(token: Token) -> None:
    """Restore the logging context to a previous state.

    Args:
        token: Token returned from push_log_context()
    """
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Clear all logging context fields.

    This is primarily useful for testing.
    """
    LogContextVar.set({})


def run_in_current_context(fn: Callable[..., T]) -> Callable[..., T]:
    """Bind ``fn`` to a snapshot of the caller's context.

    Thread pool workers do not inherit context variables from the submitting
    thread; the returned callable runs ``fn`` inside a copy of the context
    that was active when this function was called.

    Example:
        >>> with log_context(fingerprint="abc123"):
        ...     future = pool.submit(run_in_current_context(analyzer.analyze), posting)
    """
    ctx = contextvars.copy_context()

    def runner(*args, **kwargs) -> T:
        return ctx.run(fn, *args, **kwargs)

    return runner


class log_context:
    """Context manager for scoped logging context.

    Automatically pushes context on entry and pops on exit, even if
    an exception occurs.

    Example:
        >>> with log_context(fingerprint="abc123", analysis_id="f00d"):
        ...     logger.info("Analyzing posting")  # includes both fields
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
        return False  # Don't suppress exceptions
