"""
Custom exceptions for dependency evaluation.

This module defines exceptions that represent the failure modes of the
dependency gate. A dependency that is not satisfied is never an exception:
it is a ``DependResult.FAILED`` verdict. Exceptions are reserved for a
declaration that cannot be evaluated at all, or for collaborators (history
store, interval resolver) that cannot answer.

Exception Hierarchy:
    DepflowError (base)
        ├── BusinessError (user/expected errors, no stack trace)
        │   ├── ValidationError (input validation failures)
        │   └── ConfigurationError (config/environment issues)
        │       └── DeclarationError (malformed dependency declaration)
        └── SystemError (unexpected errors, with stack trace)
            └── CollaboratorUnavailableError (resolver/store did not answer)
                └── StorageError (database/storage failures)

Usage Guidelines:
    - Raise BusinessError subclasses for expected failures (bad declaration, bad config)
    - Use structured error format: what/why/how_to_fix/context
    - Callers of DependentExecute.poll decide whether to retry on
      CollaboratorUnavailableError; the engine never retries on its own

Structured Error Format:
    All error classes support optional structured information:
    - what: What went wrong (brief description)
    - why: Why it happened (root cause)
    - how_to_fix: How to resolve it (actionable steps)
    - context: Additional context (dict with relevant details)
"""

from contextlib import contextmanager
from typing import Any, Iterator


class DepflowError(RuntimeError):
    """
    Base exception for all depflow-specific errors.

    Supports structured error information:
    - what: What went wrong
    - why: Why it happened
    - how_to_fix: How to resolve it
    - context: Additional context dict
    """

    def __init__(
        self,
        message: str,
        *,
        what: str | None = None,
        why: str | None = None,
        how_to_fix: str | None = None,
        context: dict | None = None,
    ):
        """
        Initialize error with optional structured information.

        Args:
            message: Error message (used if structured info not provided)
            what: Brief description of what went wrong
            why: Root cause explanation
            how_to_fix: Actionable resolution steps
            context: Additional context dictionary
        """
        self.what = what
        self.why = why
        self.how_to_fix = how_to_fix
        self.context = context or {}

        if what:
            formatted_msg = f"❌ {what}"
            if why:
                formatted_msg += f"\n\n💡 Reason: {why}"
            if how_to_fix:
                formatted_msg += f"\n\n✅ Solution: {how_to_fix}"
            if context:
                context_str = "\n".join(f"  - {k}: {v}" for k, v in context.items())
                formatted_msg += f"\n\n📝 Context:\n{context_str}"
            super().__init__(formatted_msg)
        else:
            super().__init__(message)


class BusinessError(DepflowError):
    """
    Base exception for expected/user-facing failures.

    These errors represent expected failure modes that don't require
    stack traces for debugging, so they are logged without exc_info.
    """

    pass


class ValidationError(BusinessError):
    """
    Validation-specific business error.

    Use this for input validation failures such as an unparseable
    evaluation time or a malformed JSON document.
    """

    pass


class ConfigurationError(BusinessError):
    """
    Configuration-specific business error.

    Use this for missing configuration, invalid settings,
    or environment setup issues.
    """

    pass


class DeclarationError(ConfigurationError):
    """
    A dependency declaration that can never be evaluated.

    Raised before any polling begins: empty item list, duplicate item keys,
    unknown relation, or a date expression the interval resolver does not
    understand.

    Example:
        >>> raise DeclarationError(
        >>>     "Unsupported date expression",
        >>>     what="Dependency item has an unsupported date expression",
        >>>     why="'last5Days' is not known to the interval resolver",
        >>>     how_to_fix="Use one of: today, last1Days, last3Days, ...",
        >>>     context={"key": item.key, "date_value": item.date_value},
        >>> )
    """

    pass


class SystemError(DepflowError):
    """
    Base exception for unexpected system-level errors.

    These are logged with full stack traces since they represent
    unexpected failures that need investigation.
    """

    pass


class CollaboratorUnavailableError(SystemError):
    """
    A collaborator of the dependency engine failed to answer.

    Raised out of DependentExecute.poll when the interval resolver or the
    history store fails. It is not a FAILED verdict:
    an unreachable store says nothing about whether the upstream work ran.
    """

    pass


class StorageError(CollaboratorUnavailableError):
    """
    Database or storage operation error.

    Raised by the SQLAlchemy history store when a query fails or returns
    a row that cannot be converted into an execution record.
    """

    pass


@contextmanager
def collaborator_errors(collaborator: str, **context: Any) -> Iterator[None]:
    """
    Re-raise foreign exceptions from a collaborator call as CollaboratorUnavailableError.

    depflow errors pass through untouched so that a StorageError raised by the
    store keeps its type.

    Example:
        >>> with collaborator_errors("history store", definition_id=7):
        >>>     record = store.find_running_execution(7, interval)
    """
    try:
        yield
    except DepflowError:
        raise
    except Exception as exc:
        raise CollaboratorUnavailableError(
            f"{collaborator} failed: {exc}",
            what=f"The {collaborator} did not answer",
            why=f"{type(exc).__name__}: {exc}",
            how_to_fix="Check the collaborator's availability and poll again",
            context=context,
        ) from exc
