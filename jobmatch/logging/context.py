"""Context propagation for structured logging.

Fields pushed here (run_id, source, batch, ...) are merged into every log
record emitted inside the scope. Context lives in a ContextVar, so worker
threads only see it when the callable they run was bound with
``bind_log_context``.
"""

import contextvars
from contextvars import ContextVar, Token
from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the current logging context."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Merge fields into the logging context.

    Returns:
        Token to hand to pop_log_context() to restore the previous state
    """
    current = LogContextVar.get()
    return LogContextVar.set({**current, **kwargs})


def pop_log_context(token: Token) -> None:
    """Restore the logging context captured by push_log_context()."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Clear all logging context fields. Mostly useful in tests."""
    LogContextVar.set({})


def bind_log_context(func: Callable[..., T]) -> Callable[..., T]:
    """Bind a callable to a snapshot of the caller's context.

    Executor threads start with an empty context; submitting the bound
    callable instead keeps run_id and friends on records logged by workers.

    Example:
        >>> pool.submit(bind_log_context(adapter.fetch_outcome), "python", "", False)
    """
    snapshot = contextvars.copy_context()

    def runner(*args, **kwargs) -> T:
        return snapshot.run(func, *args, **kwargs)

    return runner


class log_context:
    """Context manager for scoped logging context.

    Example:
        >>> with log_context(run_id="abc123", source="jsearch"):
        ...     logger.info("Fetching")  # includes run_id and source
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
