"""
CLI Address Command

Derive the vault address for a commitment.

Usage:
    qvault address <commitment> [--program-id HEX] [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from core.crypto.hashing import HASH_LENGTH, parse_hex, to_hex
from vault_cli import EXIT_RUNTIME_ERROR, EXIT_SUCCESS
from vault_program.client import find_vault_address


def address_cmd(args: Namespace) -> int:
    try:
        commitment = parse_hex(args.commitment)
        program_id = (
            parse_hex(args.program_id)
            if args.program_id
            else args.cli_config.program.program_id_bytes
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if len(commitment) != HASH_LENGTH or len(program_id) != HASH_LENGTH:
        print(f"Error: commitment and program id must be {HASH_LENGTH} bytes", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    address, bump = find_vault_address(commitment, program_id)

    if args.json:
        print(json.dumps({
            "commitment": to_hex(commitment),
            "program_id": to_hex(program_id),
            "address": to_hex(address),
            "bump": bump,
        }, indent=2))
    else:
        print(f"address: {to_hex(address)}")
        print(f"bump: {bump}")
    return EXIT_SUCCESS
