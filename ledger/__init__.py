"""
In-memory host simulator.

Provides the services a vault program relies on from its execution
environment:
- Account storage with ownership, signer and writable rules
- Program-derived addresses (off-curve, one-way)
- Compute metering
- A built-in system program
- Atomic, all-or-nothing transaction execution

Usage:
    from ledger import Ledger

    ledger = Ledger()
    ledger.add_program(PROGRAM_ID, process_instruction)
    receipt = ledger.send_transaction([ix])
"""
from .accounts import (
    ADDRESS_LENGTH,
    LAMPORTS_PER_SOL,
    SYSTEM_PROGRAM_ID,
    Account,
    AccountInfo,
    AccountMeta,
    Instruction,
)
from .compute import ComputeMeter
from .context import InvokeContext
from .ledger import Ledger, ProgramEntrypoint
from .pda import (
    MAX_SEED_LEN,
    MAX_SEEDS,
    PDA_MARKER,
    create_program_address,
    find_program_address,
    hash_program_address,
    is_on_curve,
)
from .system import (
    create_account_instruction,
    process_system_instruction,
    transfer_instruction,
)


__all__ = [
    # Accounts
    "ADDRESS_LENGTH",
    "LAMPORTS_PER_SOL",
    "SYSTEM_PROGRAM_ID",
    "Account",
    "AccountInfo",
    "AccountMeta",
    "Instruction",
    # Execution
    "ComputeMeter",
    "InvokeContext",
    "Ledger",
    "ProgramEntrypoint",
    # Address derivation
    "PDA_MARKER",
    "MAX_SEEDS",
    "MAX_SEED_LEN",
    "is_on_curve",
    "hash_program_address",
    "create_program_address",
    "find_program_address",
    # System program
    "create_account_instruction",
    "transfer_instruction",
    "process_system_instruction",
]
