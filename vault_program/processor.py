"""
Vault Instruction Processor

Entrypoint the ledger calls for every instruction addressed to the vault
program. Dispatches on the first data byte.
"""

from __future__ import annotations

from typing import Callable, Sequence

from core.schemas.errors import MalformedInputException
from core.schemas.instructions import VaultInstruction
from ledger.accounts import AccountInfo
from ledger.context import InvokeContext
from vault_program.instructions import process_close, process_open, process_split


Handler = Callable[[bytes, Sequence[AccountInfo], bytes, InvokeContext], None]

HANDLERS: dict[VaultInstruction, Handler] = {
    VaultInstruction.OPEN: process_open,
    VaultInstruction.SPLIT: process_split,
    VaultInstruction.CLOSE: process_close,
}


def process_instruction(
    program_id: bytes,
    accounts: Sequence[AccountInfo],
    data: bytes,
    ctx: InvokeContext,
) -> None:
    """
    Route an instruction to its handler.

    Raises:
        MalformedInputException: Empty data or unknown discriminator
        VaultException: Whatever the handler raises; the host rolls back
    """
    if not data:
        raise MalformedInputException("Instruction data is empty")
    try:
        kind = VaultInstruction(data[0])
    except ValueError:
        raise MalformedInputException(
            f"Unknown instruction discriminator {data[0]}",
            details={"discriminator": data[0]},
        ) from None

    ctx.log(f"Instruction: {kind.name.title()}")
    HANDLERS[kind](program_id, accounts, bytes(data[1:]), ctx)


__all__ = [
    "HANDLERS",
    "process_instruction",
]
