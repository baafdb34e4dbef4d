"""
Decorators translating storage-layer failures into the package's error taxonomy.
"""

from functools import wraps
from typing import Any, Callable, Optional, TypeVar, cast

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError

from ..exceptions import BaseError, ConflictError, StoreUnavailableError

F = TypeVar("F", bound=Callable[..., Any])


def handle_store_errors(operation_name: Optional[str] = None):
    """
    Decorator for credential store methods.

    - IntegrityError and payload validation failures become ConflictError
    - connection, timeout and other driver failures become StoreUnavailableError
    - errors already in the package hierarchy pass through untouched

    Nothing is retried here; retry policy belongs to the caller.

    Usage:
        @handle_store_errors("list_scoped_by_provider")
        def list_scoped_by_provider(self, provider):
            ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            op_name = operation_name or func.__name__
            try:
                return func(self, *args, **kwargs)
            except BaseError:
                raise
            except PydanticValidationError as e:
                raise ConflictError(
                    f"Credential record rejected in {op_name}: {e.error_count()} validation error(s)",
                    cause=e,
                    operation=op_name,
                    errors=[error["msg"] for error in e.errors()],
                ) from e
            except IntegrityError as e:
                raise ConflictError(
                    f"Constraint violation in {op_name}",
                    cause=e,
                    operation=op_name,
                ) from e
            except (DBAPIError, SQLAlchemyError) as e:
                raise StoreUnavailableError(
                    f"Credential store unavailable in {op_name}",
                    cause=e,
                    operation=op_name,
                    error_type=type(e).__name__,
                ) from e

        return cast(F, wrapper)

    return decorator
