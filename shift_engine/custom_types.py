"""
Shared Type Definitions

Result types used by every engine operation. Expected failures (validation,
missing records, backend rejections) travel inside ``Failure`` so callers
branch on the error type instead of catching exceptions.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T = TypeVar("T")
K = TypeVar("K")


class Result(Generic[T, K], ABC):
    """
    Result type for handling success/failure cases with type safety.

    Examples:
        >>> result: Result[Shift, DomainError] = Success(shift)
        >>> if isinstance(result, Success):
        ...     print(f"Shift: {result.value.id}")
        >>> elif isinstance(result, Failure):
        ...     print(f"Error: {result.error.message}")
    """

    @abstractmethod
    def is_success(self) -> bool:
        """Check if result represents success."""
        pass

    @abstractmethod
    def is_failure(self) -> bool:
        """Check if result represents failure."""
        pass


class Success(Result[T, K]):
    """Success result containing a value."""

    def __init__(self, value: T) -> None:
        self.value = value

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Success({self.value!r})"


class Failure(Result[T, K]):
    """Failure result containing an error."""

    def __init__(self, error: K) -> None:
        self.error = error

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Failure({self.error!r})"


__all__ = [
    "Result",
    "Success",
    "Failure",
    "T",
    "K",
]
