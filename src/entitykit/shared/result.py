"""Operation result type for cache and storage operations.

Internal operations report their outcome through OperationResult instead
of raising, so a failure travels back to the facade boundary where it is
logged once and can be inspected by callers and tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from entitykit.shared.errors import EntityKitError

T = TypeVar("T")


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of an internal operation.

    Three shapes are possible:
    - hit: ``value`` is set, ``error`` is None
    - miss: both are None
    - failure: ``error`` is set; the operation degraded to a miss/no-op

    Attributes:
        value: Produced value, None on a miss or failure
        error: Described failure, None when the operation completed
    """

    value: T | None = None
    error: EntityKitError | None = None

    @property
    def ok(self) -> bool:
        """True when the operation completed without a failure."""
        return self.error is None

    @property
    def hit(self) -> bool:
        """True when the operation produced a value."""
        return self.value is not None

    @classmethod
    def success(cls, value: T | None = None) -> OperationResult[T]:
        """Build a completed result (a hit when value is not None)."""
        return cls(value=value)

    @classmethod
    def miss(cls) -> OperationResult[T]:
        """Build an empty result."""
        return cls()

    @classmethod
    def failure(cls, error: EntityKitError) -> OperationResult[T]:
        """Build a failed result carrying the described error."""
        return cls(error=error)
