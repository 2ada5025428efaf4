"""
Centralized error handling for document store operations.

Provides the decorator that gives every handler operation the same
logging and exception-wrapping behaviour.
"""

import inspect
from functools import wraps
from typing import Any, Awaitable, Callable, Type, TypeVar

from .errors import DocumentStoreError
from .logger import StoreLogger, get_logger

# Type variable for generic return types
T = TypeVar("T")


def store_operation(
    error_cls: Type[DocumentStoreError],
    message: str,
    log_success: bool = True,
):
    """
    Decorator for async store operations with consistent error handling.

    Provides:
    - DEBUG logging on success (if log_success=True)
    - ERROR logging on failure, with the operation name, through the
      instance's StoreLogger so lines carry the [db:..] [collection] prefix
    - Wrapping of any foreign exception into error_cls
    - Pass-through of DocumentStoreError (no double wrapping)
    - ValueError before any I/O if a collection_name argument is empty

    Args:
        error_cls: DocumentStoreError subclass to raise on failure
        message: Message template, formatted with the call's bound
                 arguments (e.g. {collection_name}, {path}) plus {error}
        log_success: If True, logs successful completion at DEBUG level

    Usage:
        @store_operation(QueryError, "Error finding documents in {collection_name}: {error}")
        async def find_all(self, collection_name: str):
            ...
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        signature = inspect.signature(func)
        operation = func.__name__

        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            context = dict(bound.arguments)
            if "collection_name" in context:
                _require_collection_name(context["collection_name"])
            logger = _operation_logger(func, context)
            try:
                result = await func(*args, **kwargs)
            except DocumentStoreError:
                raise
            except Exception as e:
                logger.error(f"[{operation}] ✗ Failed: {e}")
                raise error_cls(
                    _format_message(message, context, e),
                    operation=operation,
                    collection=context.get("collection_name"),
                    path=context.get("path"),
                    cause=e,
                ) from e
            if log_success:
                logger.debug(f"[{operation}] ✓ Completed successfully")
            return result

        return wrapper

    return decorator


def _operation_logger(func: Callable, context: dict) -> StoreLogger:
    """Use the bound instance's StoreLogger (tagged with the collection) if it has one."""
    instance_logger = getattr(context.get("self"), "logger", None)
    if not isinstance(instance_logger, StoreLogger):
        return get_logger(func.__module__)
    collection_name = context.get("collection_name")
    if collection_name:
        return instance_logger.for_collection(collection_name)
    return instance_logger


def _require_collection_name(collection_name: Any) -> None:
    if not isinstance(collection_name, str) or not collection_name:
        raise ValueError("collection_name must be a non-empty string")


def _format_message(template: str, context: dict, error: BaseException) -> str:
    """Render an error message template, tolerating missing keys."""
    values: dict = {key: value for key, value in context.items() if key != "self"}
    values["error"] = error
    try:
        return template.format(**values)
    except (KeyError, IndexError):
        return f"{template}: {error}"
