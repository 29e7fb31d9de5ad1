"""
Domain exceptions - Closed error taxonomy for all workflows.

Every failure a service can surface carries an ErrorKind, and every
ErrorKind carries the HTTP status the API layer responds with. Callers
match on ``exc.kind`` instead of inspecting exception classes.
"""

import functools
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import ParamSpec, TypeVar

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


class ErrorKind(Enum):
    """Failure kinds with their HTTP status codes."""

    BAD_REQUEST = ("bad_request", 400)
    UNAUTHORIZED = ("unauthorized", 401)
    NOT_FOUND = ("not_found", 404)
    CONFLICT = ("conflict", 409)
    INVALID_CODE = ("invalid_code", 409)
    DEPENDENCY_FAILURE = ("dependency_failure", 500)
    UNEXPECTED = ("unexpected", 500)

    def __init__(self, label: str, status_code: int) -> None:
        self.label = label
        self.status_code = status_code


class ServiceError(Exception):
    """Base class for domain errors surfaced to callers."""

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequest(ServiceError):
    """Input is missing or malformed."""

    kind = ErrorKind.BAD_REQUEST


class Unauthorized(ServiceError):
    """Secret does not match the stored hash."""

    kind = ErrorKind.UNAUTHORIZED


class NotFound(ServiceError):
    """Record is missing, expired, or not in a state the operation accepts."""

    kind = ErrorKind.NOT_FOUND


class Conflict(ServiceError):
    """Record already exists or the target is unavailable."""

    kind = ErrorKind.CONFLICT


class InvalidCode(ServiceError):
    """One-time code mismatch."""

    kind = ErrorKind.INVALID_CODE


class DependencyFailure(ServiceError):
    """A collaborator (e.g. the notification gateway) failed."""

    kind = ErrorKind.DEPENDENCY_FAILURE


class Unexpected(ServiceError):
    """Unknown fault, wrapped so internals do not leak."""

    kind = ErrorKind.UNEXPECTED


class DuplicateHandle(Exception):
    """Raised by account stores when the handle is already taken."""


def service_boundary(
    message: str,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Wrap an async service method so only ServiceError escapes it.

    Known errors propagate unchanged; anything else is logged with its
    traceback and re-raised as Unexpected(message).

    Args:
        message: Generic, user-safe message for wrapped faults
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except ServiceError:
                raise
            except Exception as e:
                logger.exception("Unexpected failure in %s", func.__qualname__)
                raise Unexpected(message) from e

        return wrapper

    return decorator
