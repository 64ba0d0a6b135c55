"""
StrToFile Backend — Tagged Operation Results
==============================================

What:  A success-or-error wrapper for callers that prefer explicit error
       propagation over try/except around the archive services.
How:   `capture(func, *args, **kwargs)` runs an operation and returns a
       Result. StrToFileErrors are stored as-is; any other exception is
       wrapped in an InternalError so a Result only ever holds one of the
       three documented error kinds.

Usage:
    result = capture(parse_many, uploads)
    if result.ok:
        records = result.value
    elif result.error_code == "format_error":
        ...
    records = result.unwrap()   # re-raises the stored error
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from strtofile.exceptions import InternalError, StrToFileError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value (`error is None`) or a StrToFileError."""

    value: Optional[T] = None
    error: Optional[StrToFileError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_code(self) -> Optional[str]:
        """One of validation_error, format_error, internal_error; None on success."""
        return self.error.error_code if self.error is not None else None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: StrToFileError) -> "Result[T]":
        return cls(error=error)


def capture(func: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T]:
    """Run `func` and return its outcome as a Result instead of raising."""
    try:
        return Result.success(func(*args, **kwargs))
    except StrToFileError as e:
        return Result.failure(e)
    except Exception as e:
        logger.error("Unexpected error in %s: %s", getattr(func, "__name__", func), str(e), exc_info=True)
        wrapped = InternalError(context={"error": str(e), "type": type(e).__name__})
        wrapped.__cause__ = e
        return Result.failure(wrapped)
