"""
Compute Metering

Every transaction runs against a fixed compute-unit limit. Running out
aborts the whole transaction like any other failure.
"""

from __future__ import annotations

from core.schemas.errors import ComputeBudgetExceededException


class ComputeMeter:
    """Tracks compute units consumed against a limit."""

    def __init__(self, limit: int) -> None:
        if limit < 0:
            raise ValueError(f"Compute limit must be non-negative, got {limit}")
        self.limit = limit
        self.consumed = 0

    @property
    def remaining(self) -> int:
        return self.limit - self.consumed

    def consume(self, units: int) -> None:
        """
        Charge ``units``.

        Raises:
            ComputeBudgetExceededException: If the charge crosses the limit.
                The meter is left exhausted.
        """
        if units < 0:
            raise ValueError(f"Cannot consume negative units: {units}")
        if units > self.remaining:
            exc = ComputeBudgetExceededException(
                limit=self.limit, requested=units, consumed=self.consumed
            )
            self.consumed = self.limit
            raise exc
        self.consumed += units

    def __repr__(self) -> str:
        return f"ComputeMeter(consumed={self.consumed}, limit={self.limit})"


__all__ = ["ComputeMeter"]
