"""
Correlation context for credential operations.

A correlation ID ties together the log lines and errors produced by one
logical request (resolve, promote, re-resolve), including work done on the
resolver's worker threads.
"""

import uuid
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, Optional

from ..exceptions import clear_correlation_id, get_correlation_id, set_correlation_id


@contextmanager
def correlation_context(correlation_id: Optional[str] = None) -> Generator[str, None, None]:
    """
    Set a correlation ID for the duration of the context and restore the previous one afterward.

    Args:
        correlation_id: ID to use; a new UUID is generated when omitted

    Yields:
        The correlation ID in effect
    """
    previous = get_correlation_id()
    effective = correlation_id or previous or str(uuid.uuid4())
    set_correlation_id(effective)
    try:
        yield effective
    finally:
        if previous:
            set_correlation_id(previous)
        else:
            clear_correlation_id()


def propagate_correlation(func: Callable) -> Callable:
    """
    Bind the caller's correlation ID to a callable that will run on another thread.
    """
    correlation_id = get_correlation_id()

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not correlation_id:
            return func(*args, **kwargs)
        with correlation_context(correlation_id):
            return func(*args, **kwargs)

    return wrapper
