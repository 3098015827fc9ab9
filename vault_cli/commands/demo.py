"""
CLI Demo Command

Runs the full vault lifecycle on an in-memory ledger:

1. Open a vault for a fresh one-time key and fund it
2. Split it between two recipients with a signature over (amount, split, refund)
3. Replay the same split and expect the consumed vault to be gone

Usage:
    qvault demo [--seed HEX] [--fund N] [--amount N] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from core.crypto.hashing import parse_hex, sha256, to_hex
from core.receipts.models import ExecutionReceipt
from core.schemas.errors import ErrorCodes
from core.winternitz import WinternitzPrivkey
from ledger import LAMPORTS_PER_SOL, Ledger, transfer_instruction
from vault_cli import EXIT_RUNTIME_ERROR, EXIT_SUCCESS, EXIT_VERIFICATION_FAILED
from vault_program import (
    find_vault_address,
    open_vault_instruction,
    process_instruction,
    split_message,
    split_vault_instruction,
)


logger = logging.getLogger(__name__)


@dataclass
class DemoStep:
    name: str
    ok: bool
    compute_units: int
    error: Optional[str] = None


@dataclass
class DemoSummary:
    """What the demo observed."""
    commitment: str = ""
    vault: str = ""
    bump: int = 0
    vault_balance: int = 0
    amount: int = 0
    split_credited: int = 0
    refund_credited: int = 0
    vault_removed: bool = False
    replay_error: Optional[str] = None
    steps: list[DemoStep] = field(default_factory=list)

    @property
    def all_ok(self) -> bool:
        return (
            all(step.ok for step in self.steps[:2])
            and self.split_credited == self.amount
            and self.split_credited + self.refund_credited == self.vault_balance
            and self.vault_removed
            and self.replay_error == ErrorCodes.ACCOUNT_NOT_FOUND
        )

    def record(self, name: str, receipt: ExecutionReceipt) -> None:
        self.steps.append(DemoStep(
            name=name,
            ok=receipt.ok,
            compute_units=receipt.compute_units_consumed,
            error=receipt.error_code,
        ))

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["ok"] = self.all_ok
        return d


def run_demo(
    ledger: Ledger,
    program_id: bytes,
    key: WinternitzPrivkey,
    fund: int,
    amount: int,
) -> DemoSummary:
    """Open, fund, split and replay against ``ledger``."""
    payer = sha256(b"qvault-demo-payer")
    split_recipient = sha256(b"qvault-demo-split")
    refund_recipient = sha256(b"qvault-demo-refund")
    ledger.airdrop(payer, fund + LAMPORTS_PER_SOL)

    commitment = key.commitment()
    vault, bump = find_vault_address(commitment, program_id)
    summary = DemoSummary(
        commitment=to_hex(commitment), vault=to_hex(vault), bump=bump, amount=amount
    )

    logger.info("Opening vault %s", summary.vault)
    receipt = ledger.send_transaction([
        open_vault_instruction(payer, commitment, bump, program_id),
        transfer_instruction(payer, vault, fund),
    ])
    summary.record("open", receipt)
    if not receipt.ok:
        return summary
    summary.vault_balance = ledger.get_balance(vault)

    split_before = ledger.get_balance(split_recipient)
    refund_before = ledger.get_balance(refund_recipient)
    signature = key.sign(split_message(amount, split_recipient, refund_recipient))
    split_ix = split_vault_instruction(
        vault, signature, bump, amount, split_recipient, refund_recipient, program_id
    )

    logger.info("Splitting vault %s", summary.vault)
    receipt = ledger.send_transaction(
        [split_ix], compute_unit_limit=ledger.config.compute.max_unit_limit
    )
    summary.record("split", receipt)
    summary.split_credited = ledger.get_balance(split_recipient) - split_before
    summary.refund_credited = ledger.get_balance(refund_recipient) - refund_before
    summary.vault_removed = ledger.get_account(vault) is None

    logger.info("Replaying split against consumed vault")
    receipt = ledger.send_transaction(
        [split_ix], compute_unit_limit=ledger.config.compute.max_unit_limit
    )
    summary.record("replay", receipt)
    summary.replay_error = receipt.error_code
    return summary


def print_summary_human(summary: DemoSummary) -> None:
    print(f"commitment: {summary.commitment}")
    print(f"vault: {summary.vault} (bump {summary.bump})")
    print(f"vault_balance: {summary.vault_balance}")
    print(f"split_credited: {summary.split_credited}")
    print(f"refund_credited: {summary.refund_credited}")
    print(f"vault_removed: {str(summary.vault_removed).lower()}")
    print(f"replay_error: {summary.replay_error}")
    print("\nsteps:")
    for step in summary.steps:
        status = "✓" if step.ok else "✗"
        suffix = f" [{step.error}]" if step.error else ""
        print(f"  {status} {step.name}: {step.compute_units} units{suffix}")
    print(f"\nok: {str(summary.all_ok).lower()}")


def demo_cmd(args: Namespace) -> int:
    config = args.cli_config
    try:
        key = WinternitzPrivkey.from_seed(parse_hex(args.seed)) if args.seed else WinternitzPrivkey.generate()
        program_id = config.program.program_id_bytes
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.fund < 0 or args.amount < 0:
        print("Error: --fund and --amount must be non-negative", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    ledger = Ledger(config)
    ledger.add_program(program_id, process_instruction)
    summary = run_demo(ledger, program_id, key, args.fund, args.amount)

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    if not summary.all_ok:
        logger.warning("Demo did not complete as expected")
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
