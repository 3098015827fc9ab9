"""
Close: Active -> Closed.

Accounts (exactly): [vault (writable), refund recipient (writable)]
"""

from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import to_hex
from core.schemas.errors import MalformedInputException, NotEnoughAccountKeysException
from core.schemas.instructions import CloseVaultData
from ledger.accounts import AccountInfo
from ledger.context import InvokeContext
from vault_program.auth import verify_vault_authority
from vault_program.messages import close_message


def process_close(
    program_id: bytes,
    accounts: Sequence[AccountInfo],
    payload: bytes,
    ctx: InvokeContext,
) -> None:
    data = CloseVaultData.from_bytes(payload)
    if len(accounts) != 2:
        raise NotEnoughAccountKeysException(expected=2, actual=len(accounts))
    vault, refund_recipient = accounts[0], accounts[1]

    if vault.key == refund_recipient.key:
        raise MalformedInputException("A vault cannot pay itself")

    message = close_message(refund_recipient.key)
    verify_vault_authority(ctx, vault, data.signature, data.bump, message)

    refunded = ctx.close_account(vault, refund_recipient)
    ctx.log(f"Closed vault {to_hex(vault.key)}: {refunded} to refund")
