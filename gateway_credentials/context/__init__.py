"""Context management for correlation IDs and store error translation."""

from .correlation_context import correlation_context, propagate_correlation
from .service_decorators import handle_store_errors

__all__ = [
    "correlation_context",
    "handle_store_errors",
    "propagate_correlation",
]
