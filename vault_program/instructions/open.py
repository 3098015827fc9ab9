"""
Open: Uninitialized -> Active.

Accounts: [payer (signer, writable), vault (writable), system program (optional)]

No signature is checked. The creator only establishes identity; a wrong
commitment yields a vault nobody can ever unlock.
"""

from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import to_hex
from core.schemas.errors import (
    AccountAlreadyInUseException,
    IdentityMismatchException,
    MissingSignatureException,
    NotEnoughAccountKeysException,
)
from core.schemas.instructions import OpenVaultData
from core.schemas.vault import VaultState
from ledger.accounts import AccountInfo
from ledger.context import InvokeContext


def process_open(
    program_id: bytes,
    accounts: Sequence[AccountInfo],
    payload: bytes,
    ctx: InvokeContext,
) -> None:
    data = OpenVaultData.from_bytes(payload)
    if len(accounts) < 2:
        raise NotEnoughAccountKeysException(expected=2, actual=len(accounts))
    payer, vault = accounts[0], accounts[1]

    if not payer.is_signer:
        raise MissingSignatureException(to_hex(payer.key))

    derived = ctx.derive_address([data.commitment], data.bump)
    if derived != vault.key:
        raise IdentityMismatchException(details={"vault": to_hex(vault.key)})
    if vault.exists:
        raise AccountAlreadyInUseException(to_hex(vault.key))

    state = VaultState(commitment=data.commitment, bump=data.bump)
    ctx.create_account(
        payer,
        vault,
        lamports=ctx.minimum_balance(VaultState.SIZE),
        space=VaultState.SIZE,
        owner=program_id,
        signer_seeds=([data.commitment], data.bump),
    )
    vault.data = state.to_bytes()
    ctx.log(f"Opened vault {to_hex(vault.key)}")
