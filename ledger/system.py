"""
System Program

Built-in program owning every plain account. Supports the two instructions
clients need to get value into a vault:

    CreateAccount: u32 LE 0 | lamports u64 LE | space u64 LE | owner (32)
    Transfer:      u32 LE 2 | lamports u64 LE
"""

from __future__ import annotations

import struct
from typing import Sequence

from core.schemas.errors import MalformedInputException, NotEnoughAccountKeysException
from ledger.accounts import SYSTEM_PROGRAM_ID, AccountInfo, AccountMeta, Instruction
from ledger.context import InvokeContext


CREATE_ACCOUNT: int = 0
TRANSFER: int = 2


def create_account_instruction(
    payer: bytes,
    new_account: bytes,
    lamports: int,
    space: int,
    owner: bytes,
) -> Instruction:
    return Instruction(
        program_id=SYSTEM_PROGRAM_ID,
        accounts=(
            AccountMeta.writable(payer, is_signer=True),
            AccountMeta.writable(new_account, is_signer=True),
        ),
        data=struct.pack("<IQQ", CREATE_ACCOUNT, lamports, space) + owner,
    )


def transfer_instruction(source: bytes, destination: bytes, lamports: int) -> Instruction:
    return Instruction(
        program_id=SYSTEM_PROGRAM_ID,
        accounts=(
            AccountMeta.writable(source, is_signer=True),
            AccountMeta.writable(destination),
        ),
        data=struct.pack("<IQ", TRANSFER, lamports),
    )


def process_system_instruction(
    program_id: bytes,
    accounts: Sequence[AccountInfo],
    data: bytes,
    ctx: InvokeContext,
) -> None:
    if len(data) < 4:
        raise MalformedInputException("System instruction missing discriminator")
    (kind,) = struct.unpack_from("<I", data)

    if kind == CREATE_ACCOUNT:
        if len(data) != 4 + 8 + 8 + 32:
            raise MalformedInputException("Malformed CreateAccount instruction")
        if len(accounts) < 2:
            raise NotEnoughAccountKeysException(expected=2, actual=len(accounts))
        lamports, space = struct.unpack_from("<QQ", data, 4)
        owner = bytes(data[20:52])
        ctx.create_account(
            accounts[0], accounts[1], lamports=lamports, space=space, owner=owner
        )
        return

    if kind == TRANSFER:
        if len(data) != 4 + 8:
            raise MalformedInputException("Malformed Transfer instruction")
        if len(accounts) < 2:
            raise NotEnoughAccountKeysException(expected=2, actual=len(accounts))
        (lamports,) = struct.unpack_from("<Q", data, 4)
        ctx.transfer(accounts[0], accounts[1], lamports)
        return

    raise MalformedInputException(f"Unsupported system instruction {kind}")


__all__ = [
    "CREATE_ACCOUNT",
    "TRANSFER",
    "create_account_instruction",
    "transfer_instruction",
    "process_system_instruction",
]
