"""Shared helpers for the storage layer."""

from __future__ import annotations

import functools
import logging
from typing import Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from flightlog.errors import DataUnavailable

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


def unavailable_on_db_error(source: str) -> Callable[[F], F]:
    """Re-raise database failures from the wrapped call as DataUnavailable.

    Lookup errors (KeyError) and validation errors (ValueError) pass through.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except SQLAlchemyError as exc:
                logger.warning(
                    "%s failed reading %s", func.__name__, source, exc_info=True
                )
                raise DataUnavailable(source, reason=type(exc).__name__) from exc

        return wrapper  # type: ignore[return-value]

    return decorator
