"""
Logging context management for authguard.

Holds correlation fields (use case, user id, event id) that are merged
into every log record emitted inside the context.

Design:
- Storage is a ContextVar, so each asyncio task and each thread sees its
  own fields
- Context manager interface for automatic cleanup
- Automatic merging of context into log extra fields

Example:
    >>> with logging_context(use_case="update_password", user_id="u-1"):
    ...     logger.info("Password update started")  # includes both fields
"""

from contextlib import contextmanager
from contextvars import ContextVar
from copy import deepcopy
from typing import Any, Dict


_context: ContextVar[Dict[str, Any]] = ContextVar("authguard_log_context")


class LogContext:
    """
    Task-local storage for logging context.

    Every mutation replaces the stored dict instead of changing it in
    place, so a task that copied the context at creation time never sees
    fields set later by its parent.

    Example:
        >>> LogContext.set("use_case", "enable_biometric")
        >>> LogContext.get_context()
        {'use_case': 'enable_biometric'}
    """

    @classmethod
    def get_context(cls) -> Dict[str, Any]:
        """
        Get the current logging context.

        Returns:
            Copy of the context fields
        """
        return deepcopy(_context.get({}))

    @classmethod
    def set(cls, key: str, value: Any) -> None:
        """
        Set a single context field.

        Args:
            key: Context field name
            value: Context field value
        """
        cls.update({key: value})

    @classmethod
    def update(cls, fields: Dict[str, Any]) -> None:
        """
        Update multiple context fields at once.

        Args:
            fields: Dictionary of fields to add/update in context
        """
        _context.set({**_context.get({}), **fields})

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """
        Get a specific context field.

        Args:
            key: Context field name
            default: Default value if field not found

        Returns:
            Field value or default
        """
        return _context.get({}).get(key, default)

    @classmethod
    def clear(cls) -> None:
        """Clear all context fields."""
        _context.set({})

    @classmethod
    def remove(cls, *keys: str) -> None:
        """
        Remove specific context fields.

        Args:
            *keys: Field names to remove
        """
        current = _context.get({})
        _context.set({k: v for k, v in current.items() if k not in keys})


@contextmanager
def logging_context(**fields):
    """
    Context manager for automatic logging context management.

    Sets fields on entry and restores the previous context on exit, even
    when an exception escapes.

    Args:
        **fields: Context fields to set (e.g., use_case="update_password")

    Nested contexts:
        >>> with logging_context(use_case="outer"):
        ...     with logging_context(event_id="evt-1"):
        ...         pass  # both fields present
        ...     # only use_case remains
    """
    token = _context.set({**_context.get({}), **fields})
    try:
        yield
    finally:
        _context.reset(token)
