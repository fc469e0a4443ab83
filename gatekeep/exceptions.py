"""
Custom exceptions for Gatekeep.

This module defines the exception hierarchy raised while resolving and
invoking policies. The two failure kinds produced by authorization itself
are NotDefinedError (no policy or scope could be located) and
NotAuthorizedError (the policy answered "no"). Both are meant to be caught
at a caller-level boundary such as a request handler.
"""

from __future__ import annotations

from typing import Any


def _describe(value: Any) -> str:
    """Short, safe description of a record for error messages."""
    try:
        return repr(value)
    except Exception:
        return f"<{type(value).__name__} instance>"


def _record_label(record: Any) -> str:
    if isinstance(record, (list, tuple)) and record:
        record = record[-1]
    if isinstance(record, type):
        return record.__name__
    if record is None or isinstance(record, str):
        return str(record)
    return type(record).__name__


class GatekeepError(Exception):
    """
    Base exception for all Gatekeep errors.

    Attributes:
        message: Human-readable error description.
        details: Additional context about the error.

    Example:
        >>> try:
        ...     resolver.authorize(user, post, "update?")
        ... except GatekeepError as e:
        ...     logger.error(f"Gatekeep error: {e}")
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class NotDefinedError(GatekeepError):
    """
    Raised when no policy or scope class can be resolved for a record.

    Only the strict lookups raise this; the lenient ones return None.

    Attributes:
        record: The subject the lookup was made for.
        policy_name: The class name that was attempted (None when no name
            could be derived at all).

    Example:
        >>> raise NotDefinedError(record=post, policy_name="PostPolicy")
    """

    def __init__(self, record: Any, policy_name: str | None = None) -> None:
        self.record = record
        self.policy_name = policy_name

        if policy_name:
            message = f"unable to find policy `{policy_name}` for `{_describe(record)}`"
        else:
            message = f"unable to find policy of `{_describe(record)}`"

        details = {
            "record": _describe(record),
            "policy_name": policy_name,
        }
        super().__init__(message, details)


class NotAuthorizedError(GatekeepError):
    """
    Raised when a policy predicate returns a falsy answer.

    Attributes:
        query: The predicate name that was asked (e.g. "show?").
        record: The subject that was being authorized.
        policy: The policy instance that answered.

    Example:
        >>> raise NotAuthorizedError(query="update?", record=post, policy=policy)
    """

    def __init__(
        self,
        query: str,
        record: Any,
        policy: Any = None,
        message: str | None = None,
    ) -> None:
        self.query = query
        self.record = record
        self.policy = policy

        if message is None:
            message = f"not allowed to {query} this {_record_label(record)}"

        details = {
            "query": query,
            "record": _describe(record),
            "policy": type(policy).__name__ if policy is not None else None,
        }
        super().__init__(message, details)


class UndefinedQueryError(GatekeepError):
    """
    Raised when a policy does not answer the requested predicate.

    A missing predicate is a programming error, not a denial, so it is
    never reported as NotAuthorizedError.

    Attributes:
        query: The predicate name that was asked.
        policy: The policy instance that lacks it.
        candidates: Attribute names that were tried.
    """

    def __init__(
        self,
        query: str,
        policy: Any,
        candidates: list[str] | None = None,
    ) -> None:
        self.query = query
        self.policy = policy
        self.candidates = candidates or []

        message = f"predicate `{query}` not found on `{type(policy).__name__}`"
        if self.candidates:
            message += f" (tried: {', '.join(self.candidates)})"

        details = {
            "query": query,
            "policy": type(policy).__name__,
            "candidates": self.candidates,
        }
        super().__init__(message, details)


class ConfigurationError(GatekeepError):
    """
    Raised when resolver configuration is invalid.

    Attributes:
        config_key: The configuration key that has an issue.
        expected: What was expected for this configuration.
        received: What was actually provided.

    Example:
        >>> raise ConfigurationError(
        ...     config_key="separator",
        ...     expected="a non-empty string",
        ...     received=""
        ... )
    """

    def __init__(
        self,
        config_key: str,
        expected: str | None = None,
        received: Any = None,
    ) -> None:
        self.config_key = config_key
        self.expected = expected
        self.received = received

        message = f"Configuration error for '{config_key}'"
        if expected:
            message += f": expected {expected}"
        if received is not None:
            message += f", got {received!r}"

        details = {
            "config_key": config_key,
            "expected": expected,
            "received": str(received) if received is not None else None,
        }
        super().__init__(message, details)
