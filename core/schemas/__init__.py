"""
Module 01 - Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import error types,
instruction payloads and persisted vault state.
"""

# Error models and exceptions
from .errors import (
    AccountAlreadyInUseException,
    AccountNotFoundException,
    AccountViolationException,
    ComputeBudgetExceededException,
    ErrorCategory,
    ErrorCodes,
    IdentityMismatchException,
    InsufficientFundsException,
    InvalidSeedsException,
    MalformedInputException,
    MissingSignatureException,
    NotEnoughAccountKeysException,
    VaultError,
    VaultException,
)

# Instruction payloads
from .instructions import (
    AMOUNT_LENGTH,
    BUMP_LENGTH,
    U64_MAX,
    CloseVaultData,
    OpenVaultData,
    SplitVaultData,
    VaultInstruction,
)

# Persisted state
from .vault import VaultState


__all__ = [
    # Errors
    "ErrorCodes",
    "ErrorCategory",
    "VaultError",
    "VaultException",
    "MalformedInputException",
    "NotEnoughAccountKeysException",
    "MissingSignatureException",
    "IdentityMismatchException",
    "InsufficientFundsException",
    "ComputeBudgetExceededException",
    "AccountNotFoundException",
    "AccountAlreadyInUseException",
    "InvalidSeedsException",
    "AccountViolationException",
    # Instructions
    "AMOUNT_LENGTH",
    "BUMP_LENGTH",
    "U64_MAX",
    "VaultInstruction",
    "OpenVaultData",
    "SplitVaultData",
    "CloseVaultData",
    # State
    "VaultState",
]
