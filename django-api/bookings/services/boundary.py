"""Service boundary: turns raised errors into structured results."""

import functools
import logging
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from django.db import DatabaseError

from bookings.domain.errors import DomainError, InvalidIdError, StorageFailureError
from bookings.domain.results import Result

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def as_result(func: Callable[P, T]) -> Callable[P, Result[T]]:
    """Run a service operation and return its outcome as a Result.

    Domain errors come back as failed results. Storage errors are logged and
    reported as StorageFailure; any transaction opened inside the operation
    has already been rolled back when they reach this point.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T]:
        try:
            return Result.success(func(*args, **kwargs))
        except DomainError as exc:
            logger.info("%s refused: %s", func.__qualname__, exc)
            return Result.failure(exc)
        except DatabaseError:
            logger.exception("%s failed in storage", func.__qualname__)
            return Result.failure(StorageFailureError())

    return wrapper


def parse_id(id_type: type[T], raw: object, kind: str) -> T:
    """Parse an identifier value object, raising InvalidIdError on bad input."""
    try:
        return id_type.parse(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidIdError(kind) from exc
