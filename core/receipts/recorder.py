"""
Receipt Recorder

Provides a unified interface for recording transaction executions.
Used by the ledger to produce one receipt per submitted transaction.
"""

from __future__ import annotations

import hashlib
import logging
from collections import deque
from datetime import datetime, timezone
from typing import Any, Optional

from core.schemas.errors import VaultException

from .models import ExecutionReceipt, ReceiptTiming, receipt_from_exception


logger = logging.getLogger(__name__)


# Receipts kept for get_receipts(); older ones are dropped first
DEFAULT_MAX_RECEIPTS = 1024


def generate_receipt_id(request_data: dict[str, Any]) -> str:
    """
    Generate a deterministic receipt ID from transaction data.

    Format: rc_tx_{hash_prefix}
    """
    stable_str = f"tx|{sorted(request_data.items())}"
    hash_hex = hashlib.sha256(stable_str.encode()).hexdigest()[:12]
    return f"rc_tx_{hash_hex}"


class ReceiptRecorder:
    """
    Records receipts for transaction executions.

    Usage:
        recorder = ReceiptRecorder()

        receipt = recorder.start(request={...}, instruction_count=2, compute_unit_limit=200_000)
        recorder.log(receipt, "Program ... invoke [1]")

        # ... execute ...

        recorder.complete(receipt, compute_units_consumed=1234)
        # or
        recorder.fail(receipt, exc, compute_units_consumed=1234, failed_instruction=1)

    Only the latest ``max_receipts`` finished receipts are retained; call
    clear() to drop them early.
    """

    def __init__(self, max_receipts: int = DEFAULT_MAX_RECEIPTS) -> None:
        if max_receipts < 1:
            raise ValueError(f"max_receipts must be positive, got {max_receipts}")
        self._receipts: deque[ExecutionReceipt] = deque(maxlen=max_receipts)

    def start(
        self,
        *,
        request: dict[str, Any],
        instruction_count: int,
        compute_unit_limit: int,
    ) -> ExecutionReceipt:
        """Start recording a transaction."""
        return ExecutionReceipt(
            receipt_id=generate_receipt_id(request),
            instruction_count=instruction_count,
            compute_unit_limit=compute_unit_limit,
            timing=ReceiptTiming(started_at=datetime.now(timezone.utc)),
        )

    def log(self, receipt: ExecutionReceipt, line: str) -> None:
        receipt.logs.append(line)
        logger.debug(line)

    def _finish(self, receipt: ExecutionReceipt, compute_units_consumed: int) -> None:
        receipt.compute_units_consumed = compute_units_consumed
        ended = datetime.now(timezone.utc)
        receipt.timing.ended_at = ended
        if receipt.timing.started_at is not None:
            delta = ended - receipt.timing.started_at
            receipt.timing.duration_ms = delta.total_seconds() * 1000
        self._receipts.append(receipt)

    def complete(self, receipt: ExecutionReceipt, *, compute_units_consumed: int) -> ExecutionReceipt:
        """Mark a transaction as committed."""
        receipt.ok = True
        self._finish(receipt, compute_units_consumed)
        return receipt

    def fail(
        self,
        receipt: ExecutionReceipt,
        exc: VaultException,
        *,
        compute_units_consumed: int,
        failed_instruction: Optional[int] = None,
    ) -> ExecutionReceipt:
        """Mark a transaction as rolled back with the given error."""
        receipt_from_exception(receipt, exc)
        receipt.failed_instruction = failed_instruction
        self._finish(receipt, compute_units_consumed)
        logger.info(
            "Transaction %s failed: %s (%s)", receipt.receipt_id, exc.code, exc.message
        )
        return receipt

    def get_receipts(self) -> list[ExecutionReceipt]:
        return list(self._receipts)

    def clear(self) -> None:
        self._receipts.clear()


__all__ = [
    "DEFAULT_MAX_RECEIPTS",
    "generate_receipt_id",
    "ReceiptRecorder",
]
