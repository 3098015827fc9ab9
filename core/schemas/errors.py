"""
Module 01 - Schemas
File: errors.py

Purpose: Standard error taxonomy for the vault program and its host.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Every error is terminal for the transaction that raised it: the host
rolls back all effects and nothing is retried.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across program and host."""

    # Malformed input
    INVALID_INSTRUCTION_DATA = "INVALID_INSTRUCTION_DATA"
    NOT_ENOUGH_ACCOUNT_KEYS = "NOT_ENOUGH_ACCOUNT_KEYS"
    MISSING_REQUIRED_SIGNATURE = "MISSING_REQUIRED_SIGNATURE"

    # Identity (wrong signature and wrong vault are reported identically)
    IDENTITY_MISMATCH = "IDENTITY_MISMATCH"

    # Funds
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"

    # Resource exhaustion
    COMPUTE_BUDGET_EXCEEDED = "COMPUTE_BUDGET_EXCEEDED"

    # Account lifecycle & host rules
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    ACCOUNT_ALREADY_IN_USE = "ACCOUNT_ALREADY_IN_USE"
    INVALID_SEEDS = "INVALID_SEEDS"
    EXTERNAL_ACCOUNT_LAMPORT_SPEND = "EXTERNAL_ACCOUNT_LAMPORT_SPEND"
    EXTERNAL_ACCOUNT_DATA_MODIFIED = "EXTERNAL_ACCOUNT_DATA_MODIFIED"
    READONLY_ACCOUNT_MODIFIED = "READONLY_ACCOUNT_MODIFIED"
    UNBALANCED_INSTRUCTION = "UNBALANCED_INSTRUCTION"
    INCORRECT_PROGRAM_ID = "INCORRECT_PROGRAM_ID"


ErrorCategory = Literal[
    "malformed_input",
    "identity_mismatch",
    "insufficient_funds",
    "resource_exhaustion",
    "account",
]


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class VaultError(BaseModel):
    """
    Structured error carried by execution receipts.

    Callers see only the code and message; no partial state accompanies it.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.IDENTITY_MISMATCH],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    category: ErrorCategory = Field(
        default="account",
        description="Taxonomy bucket of the failure",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "VaultException":
        """Convert this error model to a raised exception."""
        return VaultException(
            code=self.code,
            message=self.message,
            category=self.category,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class VaultException(Exception):
    """
    Base exception for all vault program and host errors.

    This exception carries structured error information and can be
    converted to/from VaultError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "VAULT_ERROR",
        category: ErrorCategory = "account",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.category = category
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> VaultError:
        """Convert this exception to a VaultError model."""
        return VaultError(
            code=self.code,
            message=self.message,
            category=self.category,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class MalformedInputException(VaultException):
    """Exception raised for wrong-length or undecodable instruction input."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCodes.INVALID_INSTRUCTION_DATA,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            category="malformed_input",
            details=details,
        )


class NotEnoughAccountKeysException(MalformedInputException):
    """Exception raised when an instruction names fewer accounts than required."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            message=f"Expected at least {expected} accounts, got {actual}",
            code=ErrorCodes.NOT_ENOUGH_ACCOUNT_KEYS,
            details={"expected": expected, "actual": actual},
        )


class MissingSignatureException(MalformedInputException):
    """Exception raised when a required signer did not sign."""

    def __init__(self, address: str) -> None:
        super().__init__(
            message=f"Account {address} must sign this instruction",
            code=ErrorCodes.MISSING_REQUIRED_SIGNATURE,
            details={"address": address},
        )


class IdentityMismatchException(VaultException):
    """
    Exception raised when a derived address differs from the target account.

    The message is intentionally the same whether the signature was bad or
    the vault was wrong.
    """

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message="Derived address does not match the vault account",
            code=ErrorCodes.IDENTITY_MISMATCH,
            category="identity_mismatch",
            details=details,
        )


class InsufficientFundsException(VaultException):
    """Exception raised when a transfer exceeds the available balance."""

    def __init__(self, requested: int, available: int) -> None:
        super().__init__(
            message=f"Requested {requested} lamports but only {available} available",
            code=ErrorCodes.INSUFFICIENT_FUNDS,
            category="insufficient_funds",
            details={"requested": requested, "available": available},
        )


class ComputeBudgetExceededException(VaultException):
    """Exception raised when an instruction runs out of compute units."""

    def __init__(self, limit: int, requested: int, consumed: int) -> None:
        super().__init__(
            message=(
                f"Compute budget exceeded: {consumed} consumed, "
                f"{requested} requested, limit {limit}"
            ),
            code=ErrorCodes.COMPUTE_BUDGET_EXCEEDED,
            category="resource_exhaustion",
            details={"limit": limit, "requested": requested, "consumed": consumed},
        )


class AccountNotFoundException(VaultException):
    """Exception raised when an instruction references a missing account."""

    def __init__(self, address: str) -> None:
        super().__init__(
            message=f"Account {address} does not exist",
            code=ErrorCodes.ACCOUNT_NOT_FOUND,
            details={"address": address},
        )


class AccountAlreadyInUseException(VaultException):
    """Exception raised when creating an account at an occupied address."""

    def __init__(self, address: str) -> None:
        super().__init__(
            message=f"Account {address} already in use",
            code=ErrorCodes.ACCOUNT_ALREADY_IN_USE,
            details={"address": address},
        )


class InvalidSeedsException(VaultException):
    """Exception raised when seeds cannot produce an off-curve address."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_SEEDS,
            details=details,
        )


class AccountViolationException(VaultException):
    """Exception raised when a program breaks a host account rule."""

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=code,
            details=details,
        )
