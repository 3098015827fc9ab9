"""
Execution receipts: outcome, compute usage and logs of each transaction.
"""

from .models import ExecutionReceipt, ReceiptTiming, receipt_from_exception
from .recorder import DEFAULT_MAX_RECEIPTS, ReceiptRecorder, generate_receipt_id

__all__ = [
    "DEFAULT_MAX_RECEIPTS",
    "ExecutionReceipt",
    "ReceiptTiming",
    "receipt_from_exception",
    "ReceiptRecorder",
    "generate_receipt_id",
]
