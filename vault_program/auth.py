"""
Vault Authorization

Shared check behind Split and Close:

1. The vault must be a live account of this program
2. Charge the full verification cost up front
3. Recover the one-time public key from the signature over the message
4. Merklize it into a commitment
5. Re-derive the vault address from (commitment, bump) and compare

A bad signature and a wrong vault both end in the same
IdentityMismatchException, so a caller cannot learn which half failed.
"""

from __future__ import annotations

import logging

from core.crypto.hashing import HASH_LENGTH, to_hex
from core.merkle import count_parent_hashes
from core.schemas.errors import (
    AccountNotFoundException,
    IdentityMismatchException,
    InvalidSeedsException,
)
from core.winternitz import SCALAR_COUNT, WinternitzSignature, message_digits, recovery_steps
from ledger.accounts import AccountInfo
from ledger.context import InvokeContext


logger = logging.getLogger(__name__)


def require_vault(ctx: InvokeContext, vault: AccountInfo) -> None:
    """
    Reject anything that is not a live vault before doing any cryptography.

    A consumed vault no longer exists, which is what makes every key single-use.
    """
    if not vault.exists or not vault.is_owned_by(ctx.program_id) or vault.lamports == 0:
        raise AccountNotFoundException(to_hex(vault.key))


def charge_verification(ctx: InvokeContext, message: bytes) -> int:
    """
    Meter the hashing a verification of ``message`` performs.

    Returns:
        Chain steps the recovery will walk
    """
    steps = recovery_steps(message_digits(message))
    ctx.consume_sha256(len(message))
    ctx.consume_sha256(HASH_LENGTH, steps)
    ctx.consume_sha256(2 * HASH_LENGTH, count_parent_hashes(SCALAR_COUNT))
    return steps


def verify_vault_authority(
    ctx: InvokeContext,
    vault: AccountInfo,
    signature: bytes,
    bump: int,
    message: bytes,
) -> bytes:
    """
    Prove the signer holds the one-time key ``vault`` was opened with.

    Args:
        ctx: Host context of the executing instruction
        vault: The vault account named by the instruction
        signature: 896-byte one-time signature over ``message``
        bump: Bump the vault address was derived with
        message: Message assembled from the instruction's fields

    Returns:
        The recovered commitment

    Raises:
        AccountNotFoundException: The vault does not exist (or was consumed)
        ComputeBudgetExceededException: Not enough compute left to verify
        IdentityMismatchException: The derived address is not the vault
    """
    require_vault(ctx, vault)
    charge_verification(ctx, message)

    recovery = WinternitzSignature.from_bytes(signature).recover(message)
    commitment = recovery.pubkey.merklize()

    try:
        derived = ctx.derive_address([commitment], bump)
    except InvalidSeedsException:
        raise IdentityMismatchException(details={"vault": to_hex(vault.key)}) from None

    if derived != vault.key:
        raise IdentityMismatchException(details={"vault": to_hex(vault.key)})

    logger.debug(
        "Authorized vault %s after %d chain steps", to_hex(vault.key), recovery.chain_steps
    )
    return commitment


__all__ = [
    "require_vault",
    "charge_verification",
    "verify_vault_authority",
]
