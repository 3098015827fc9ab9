"""
Test fixtures package for vault tests.

This package provides factory functions for creating test objects:
- common.py: keys, addresses, a ledger with the vault program, opened vaults
  and signed Split/Close instructions

Usage:
    from fixtures.common import make_ledger, open_vault

    def test_something():
        ledger = make_ledger()
        vault = open_vault(ledger, payer, fund=1_000_000)
"""

from .common import (
    MAX_UNITS,
    PROGRAM_ID,
    OpenedVault,
    make_address,
    make_close_instruction,
    make_funded_payer,
    make_ledger,
    make_privkey,
    make_split_instruction,
    open_vault,
)

__all__ = [
    "MAX_UNITS",
    "PROGRAM_ID",
    "OpenedVault",
    "make_address",
    "make_privkey",
    "make_ledger",
    "make_funded_payer",
    "open_vault",
    "make_split_instruction",
    "make_close_instruction",
]
