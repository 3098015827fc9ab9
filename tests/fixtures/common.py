"""
Common test fixtures shared by all modules.

Provides factory functions for the core vault building blocks:
- Deterministic one-time keys and addresses
- A ledger with the vault program deployed
- Opened (and optionally funded) vaults
- Split / Close instructions signed by a vault's key

These are the foundational building blocks used by the scenario tests.
"""

from dataclasses import dataclass
from typing import Optional

from core.config.runtime import DEFAULT_PROGRAM_ID, RuntimeConfig
from core.crypto.hashing import sha256
from core.winternitz import WinternitzPrivkey
from ledger import LAMPORTS_PER_SOL, Instruction, Ledger, transfer_instruction
from vault_program import (
    close_message,
    close_vault_instruction,
    find_vault_address,
    open_vault_instruction,
    process_instruction,
    split_message,
    split_vault_instruction,
)


PROGRAM_ID = DEFAULT_PROGRAM_ID

# Enough for any Split/Close verification
MAX_UNITS = 1_400_000


# =============================================================================
# Keys & Addresses
# =============================================================================

def make_address(label: str) -> bytes:
    """Deterministic 32-byte address for a readable label."""
    return sha256(f"address:{label}".encode())


def make_privkey(seed: str = "vault-test-key") -> WinternitzPrivkey:
    """Deterministic one-time key."""
    return WinternitzPrivkey.from_seed(seed.encode())


# =============================================================================
# Ledger
# =============================================================================

def make_ledger(config: Optional[RuntimeConfig] = None) -> Ledger:
    """
    Create a ledger with the vault program deployed.

    Uses a default RuntimeConfig rather than the environment so tests are
    unaffected by QVAULT_* variables.
    """
    ledger = Ledger(config or RuntimeConfig())
    ledger.add_program(PROGRAM_ID, process_instruction)
    return ledger


def make_funded_payer(ledger: Ledger, label: str = "payer", sol: int = 10) -> bytes:
    payer = make_address(label)
    ledger.airdrop(payer, sol * LAMPORTS_PER_SOL)
    return payer


# =============================================================================
# Vaults
# =============================================================================

@dataclass
class OpenedVault:
    """A vault on the ledger together with the key that unlocks it."""
    key: WinternitzPrivkey
    address: bytes
    bump: int

    @property
    def commitment(self) -> bytes:
        return self.key.commitment()


def open_vault(
    ledger: Ledger,
    payer: bytes,
    key: Optional[WinternitzPrivkey] = None,
    fund: int = 0,
) -> OpenedVault:
    """
    Open a vault for ``key`` and deposit ``fund`` lamports on top of rent.

    Asserts that the transaction committed.
    """
    key = key or make_privkey()
    commitment = key.commitment()
    address, bump = find_vault_address(commitment, PROGRAM_ID)

    instructions: list[Instruction] = [open_vault_instruction(payer, commitment, bump, PROGRAM_ID)]
    if fund:
        instructions.append(transfer_instruction(payer, address, fund))

    receipt = ledger.send_transaction(instructions)
    assert receipt.ok, receipt.pretty_logs()
    return OpenedVault(key=key, address=address, bump=bump)


def make_split_instruction(
    vault: OpenedVault,
    amount: int,
    split_recipient: bytes,
    refund_recipient: bytes,
    signer: Optional[WinternitzPrivkey] = None,
) -> Instruction:
    """Split instruction signed by the vault's key (or ``signer``)."""
    signer = signer or vault.key
    signature = signer.sign(split_message(amount, split_recipient, refund_recipient))
    return split_vault_instruction(
        vault.address, signature, vault.bump, amount, split_recipient, refund_recipient, PROGRAM_ID
    )


def make_close_instruction(
    vault: OpenedVault,
    refund_recipient: bytes,
    signer: Optional[WinternitzPrivkey] = None,
) -> Instruction:
    """Close instruction signed by the vault's key (or ``signer``)."""
    signer = signer or vault.key
    signature = signer.sign(close_message(refund_recipient))
    return close_vault_instruction(
        vault.address, signature, vault.bump, refund_recipient, PROGRAM_ID
    )
