"""
CLI Recover Command

Recover the commitment a one-time signature over a message resolves to,
and price its on-ledger verification.

Usage:
    qvault recover --message HEX --signature HEX|@FILE [--expect COMMITMENT] [--json]

Exit code 2 when ``--expect`` is given and the recovered commitment differs.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional

from core.crypto.hashing import parse_hex, to_hex
from core.schemas.errors import MalformedInputException
from core.winternitz import WinternitzSignature
from vault_cli import EXIT_RUNTIME_ERROR, EXIT_SUCCESS, EXIT_VERIFICATION_FAILED
from vault_program.client import estimate_verification_units


logger = logging.getLogger(__name__)


@dataclass
class RecoverSummary:
    """Outcome of recovering a commitment."""
    message: str
    commitment: str
    chain_steps: int
    hash_count: int
    estimated_units: int
    expected: Optional[str] = None
    matches: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if self.expected is None:
            del d["expected"]
            del d["matches"]
        return d


def read_hex_argument(value: str) -> bytes:
    """Decode ``value`` as hex, or the hex contents of a file given as ``@path``."""
    if value.startswith("@"):
        value = Path(value[1:]).read_text().strip()
    return parse_hex(value)


def recover_cmd(args: Namespace) -> int:
    try:
        message = read_hex_argument(args.message)
        signature = WinternitzSignature.from_bytes(read_hex_argument(args.signature))
        expected = parse_hex(args.expect) if args.expect else None
    except (OSError, ValueError, MalformedInputException) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    recovery = signature.recover(message)
    commitment = recovery.pubkey.merklize()
    summary = RecoverSummary(
        message=to_hex(message),
        commitment=to_hex(commitment),
        chain_steps=recovery.chain_steps,
        hash_count=recovery.hash_count,
        estimated_units=estimate_verification_units(message, args.cli_config),
    )
    if expected is not None:
        summary.expected = to_hex(expected)
        summary.matches = expected == commitment

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(f"commitment: {summary.commitment}")
        print(f"chain_steps: {summary.chain_steps}")
        print(f"estimated_units: {summary.estimated_units}")
        if summary.matches is not None:
            print(f"matches: {str(summary.matches).lower()}")

    if summary.matches is False:
        logger.warning("Recovered commitment does not match %s", summary.expected)
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
