"""
Client-Side Instruction Builders

Helpers for wallets and tooling that assemble vault instructions and price
their verification.

Usage:
    key = WinternitzPrivkey.generate()
    vault, bump = find_vault_address(key.commitment())

    open_ix = open_vault_instruction(payer, key.commitment(), bump)

    signature = key.sign(split_message(amount, alice, bob))
    split_ix = split_vault_instruction(vault, signature, bump, amount, alice, bob)
"""

from __future__ import annotations

from typing import Optional, Union

from core.config.runtime import DEFAULT_PROGRAM_ID, RuntimeConfig, get_default_config
from core.crypto.hashing import HASH_LENGTH
from core.merkle import count_parent_hashes
from core.schemas.instructions import (
    CloseVaultData,
    OpenVaultData,
    SplitVaultData,
    VaultInstruction,
)
from core.winternitz import SCALAR_COUNT, WinternitzSignature, estimate_recovery_steps
from ledger.accounts import SYSTEM_PROGRAM_ID, AccountMeta, Instruction
from ledger.pda import create_program_address, find_program_address


SignatureLike = Union[bytes, WinternitzSignature]


def _signature_bytes(signature: SignatureLike) -> bytes:
    if isinstance(signature, WinternitzSignature):
        return signature.to_bytes()
    return bytes(signature)


def find_vault_address(
    commitment: bytes,
    program_id: bytes = DEFAULT_PROGRAM_ID,
) -> tuple[bytes, int]:
    """Canonical vault address and bump for ``commitment``."""
    return find_program_address([commitment], program_id)


def open_vault_instruction(
    payer: bytes,
    commitment: bytes,
    bump: Optional[int] = None,
    program_id: bytes = DEFAULT_PROGRAM_ID,
) -> Instruction:
    """
    Build an Open instruction.

    If ``bump`` is omitted the canonical bump is searched for.
    """
    if bump is None:
        vault, bump = find_vault_address(commitment, program_id)
    else:
        vault = create_program_address([commitment], bump, program_id)
    data = OpenVaultData(commitment=commitment, bump=bump)
    return Instruction(
        program_id=program_id,
        accounts=(
            AccountMeta.writable(payer, is_signer=True),
            AccountMeta.writable(vault),
            AccountMeta.readonly(SYSTEM_PROGRAM_ID),
        ),
        data=bytes([VaultInstruction.OPEN]) + data.to_bytes(),
    )


def split_vault_instruction(
    vault: bytes,
    signature: SignatureLike,
    bump: int,
    amount: int,
    split_recipient: bytes,
    refund_recipient: bytes,
    program_id: bytes = DEFAULT_PROGRAM_ID,
) -> Instruction:
    data = SplitVaultData(signature=_signature_bytes(signature), bump=bump, amount=amount)
    return Instruction(
        program_id=program_id,
        accounts=(
            AccountMeta.writable(vault),
            AccountMeta.writable(split_recipient),
            AccountMeta.writable(refund_recipient),
        ),
        data=bytes([VaultInstruction.SPLIT]) + data.to_bytes(),
    )


def close_vault_instruction(
    vault: bytes,
    signature: SignatureLike,
    bump: int,
    refund_recipient: bytes,
    program_id: bytes = DEFAULT_PROGRAM_ID,
) -> Instruction:
    data = CloseVaultData(signature=_signature_bytes(signature), bump=bump)
    return Instruction(
        program_id=program_id,
        accounts=(
            AccountMeta.writable(vault),
            AccountMeta.writable(refund_recipient),
        ),
        data=bytes([VaultInstruction.CLOSE]) + data.to_bytes(),
    )


def estimate_verification_units(
    message: bytes,
    config: Optional[RuntimeConfig] = None,
) -> int:
    """
    Compute units the program spends verifying a signature over ``message``.

    Covers the message digest, the chain walks, merklization and the address
    derivation. Add the instruction's invoke and transfer costs on top when
    provisioning a transaction.
    """
    compute = (config or get_default_config()).compute
    return (
        compute.sha256_cost(len(message))
        + compute.sha256_cost(HASH_LENGTH, estimate_recovery_steps(message))
        + compute.sha256_cost(2 * HASH_LENGTH, count_parent_hashes(SCALAR_COUNT))
        + compute.derive_address_cost
    )


__all__ = [
    "find_vault_address",
    "open_vault_instruction",
    "split_vault_instruction",
    "close_vault_instruction",
    "estimate_verification_units",
]
