"""
Split: Active -> Closed.

Accounts (exactly): [vault (writable), split recipient (writable), refund recipient (writable)]

Pays ``amount`` to the split recipient, everything else to the refund
recipient, and destroys the vault in the same step.
"""

from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import to_hex
from core.schemas.errors import (
    InsufficientFundsException,
    MalformedInputException,
    NotEnoughAccountKeysException,
)
from core.schemas.instructions import SplitVaultData
from ledger.accounts import AccountInfo
from ledger.context import InvokeContext
from vault_program.auth import verify_vault_authority
from vault_program.messages import split_message


def process_split(
    program_id: bytes,
    accounts: Sequence[AccountInfo],
    payload: bytes,
    ctx: InvokeContext,
) -> None:
    data = SplitVaultData.from_bytes(payload)
    if len(accounts) != 3:
        raise NotEnoughAccountKeysException(expected=3, actual=len(accounts))
    vault, split_recipient, refund_recipient = accounts[0], accounts[1], accounts[2]

    if vault.key in (split_recipient.key, refund_recipient.key):
        raise MalformedInputException("A vault cannot pay itself")

    message = split_message(data.amount, split_recipient.key, refund_recipient.key)
    verify_vault_authority(ctx, vault, data.signature, data.bump, message)

    balance = vault.lamports
    if data.amount > balance:
        raise InsufficientFundsException(requested=data.amount, available=balance)

    ctx.transfer(vault, split_recipient, data.amount)
    refunded = ctx.close_account(vault, refund_recipient)
    ctx.log(
        f"Split vault {to_hex(vault.key)}: {data.amount} to split, {refunded} to refund"
    )
