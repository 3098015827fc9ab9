"""
Vault Program

A value-holding account that can only be unlocked by a one-time hash-chain
signature matching the commitment it was opened with.

Instructions:
- Open:  establish a vault at derive([commitment], bump)
- Split: pay an amount to one recipient, the rest to another, destroy the vault
- Close: pay everything to one recipient, destroy the vault

Usage:
    from ledger import Ledger
    from vault_program import PROGRAM_ID, process_instruction

    ledger = Ledger()
    ledger.add_program(PROGRAM_ID, process_instruction)
"""
from core.config.runtime import DEFAULT_PROGRAM_ID

from .auth import charge_verification, require_vault, verify_vault_authority
from .client import (
    close_vault_instruction,
    estimate_verification_units,
    find_vault_address,
    open_vault_instruction,
    split_vault_instruction,
)
from .messages import (
    CLOSE_MESSAGE_LENGTH,
    SPLIT_MESSAGE_LENGTH,
    close_message,
    split_message,
)
from .processor import HANDLERS, process_instruction


PROGRAM_ID: bytes = DEFAULT_PROGRAM_ID


__all__ = [
    "PROGRAM_ID",
    "process_instruction",
    "HANDLERS",
    # Messages
    "SPLIT_MESSAGE_LENGTH",
    "CLOSE_MESSAGE_LENGTH",
    "split_message",
    "close_message",
    # Authorization
    "require_vault",
    "charge_verification",
    "verify_vault_authority",
    # Client
    "find_vault_address",
    "open_vault_instruction",
    "split_vault_instruction",
    "close_vault_instruction",
    "estimate_verification_units",
]
