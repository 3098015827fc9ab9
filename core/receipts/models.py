"""
Receipt Models

Schemas for recording transaction executions. A receipt is the only thing a
caller learns about a transaction: whether it committed, which error aborted
it, how much compute it used and what the programs logged.

Key Design Principles:
1. A failed receipt never describes partial effects; the host rolled them back
2. Timing is non-committed metadata and excluded from the receipt id
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.schemas.errors import VaultError, VaultException


class ReceiptTiming(BaseModel):
    """
    Timing information for a receipt.

    This is NON-COMMITTED metadata.
    """

    model_config = ConfigDict(extra="forbid")

    started_at: Optional[datetime] = Field(
        default=None,
        description="When execution started",
    )
    ended_at: Optional[datetime] = Field(
        default=None,
        description="When execution completed",
    )
    duration_ms: Optional[float] = Field(
        default=None,
        description="Duration in milliseconds",
    )


class ExecutionReceipt(BaseModel):
    """
    Outcome of one atomically executed transaction.
    """

    model_config = ConfigDict(extra="forbid")

    receipt_id: str = Field(
        ...,
        description="Deterministic identifier derived from the transaction",
    )
    ok: bool = Field(
        default=False,
        description="Whether every instruction succeeded and state was committed",
    )
    instruction_count: int = Field(
        default=0,
        ge=0,
        description="Number of instructions in the transaction",
    )
    failed_instruction: Optional[int] = Field(
        default=None,
        description="Index of the instruction that aborted the transaction",
    )
    error: Optional[VaultError] = Field(
        default=None,
        description="Structured error if the transaction failed",
    )
    compute_unit_limit: int = Field(
        default=0,
        ge=0,
        description="Compute units provisioned for the transaction",
    )
    compute_units_consumed: int = Field(
        default=0,
        ge=0,
        description="Compute units consumed before success or abort",
    )
    logs: list[str] = Field(
        default_factory=list,
        description="Program log lines in execution order",
    )
    timing: ReceiptTiming = Field(
        default_factory=ReceiptTiming,
        description="Timing metadata (non-committed)",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional metadata",
    )

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error else None

    def raise_for_error(self) -> None:
        """Raise the recorded error as an exception if the transaction failed."""
        if self.error is not None:
            raise self.error.to_exception()

    def pretty_logs(self) -> str:
        return "\n".join(self.logs)


def receipt_from_exception(receipt: ExecutionReceipt, exc: VaultException) -> ExecutionReceipt:
    """Attach an exception to a receipt as its structured error."""
    receipt.ok = False
    receipt.error = exc.to_error_model()
    return receipt


__all__ = [
    "ReceiptTiming",
    "ExecutionReceipt",
    "receipt_from_exception",
]
