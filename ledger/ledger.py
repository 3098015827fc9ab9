"""
In-Memory Ledger

Host simulator that stores accounts, dispatches instructions to registered
programs and executes each transaction atomically:

1. Snapshot all account state
2. Run every instruction under one compute meter
3. Verify each instruction's account changes against host rules
4. On success drop emptied accounts; on any failure restore the snapshot

Addresses destroyed through close_account are retired for good: no account
can be created at them again, so a consumed vault never comes back.

Two transactions touching the same account never interleave: the ledger
executes one transaction at a time.
"""

from __future__ import annotations

import copy
import logging
from typing import Optional, Protocol, Sequence

from core.config.runtime import RuntimeConfig, get_default_config
from core.crypto.hashing import sha256, to_hex
from core.receipts.models import ExecutionReceipt
from core.receipts.recorder import DEFAULT_MAX_RECEIPTS, ReceiptRecorder
from core.schemas.errors import AccountViolationException, ErrorCodes, VaultException
from ledger.accounts import SYSTEM_PROGRAM_ID, Account, AccountInfo, AccountMeta, Instruction
from ledger.compute import ComputeMeter
from ledger.context import InvokeContext
from ledger.system import process_system_instruction


logger = logging.getLogger(__name__)


class ProgramEntrypoint(Protocol):
    def __call__(
        self,
        program_id: bytes,
        accounts: Sequence[AccountInfo],
        data: bytes,
        ctx: InvokeContext,
    ) -> None: ...


class Ledger:
    """
    Account store plus transaction executor.

    Usage:
        ledger = Ledger()
        ledger.add_program(PROGRAM_ID, process_instruction)
        ledger.airdrop(payer, 10 * LAMPORTS_PER_SOL)

        receipt = ledger.send_transaction([ix], compute_unit_limit=1_400_000)
        assert receipt.ok, receipt.pretty_logs()
    """

    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        max_receipts: int = DEFAULT_MAX_RECEIPTS,
    ) -> None:
        self.config = config or get_default_config()
        self.recorder = ReceiptRecorder(max_receipts)
        self._accounts: dict[bytes, Account] = {}
        self._programs: dict[bytes, ProgramEntrypoint] = {
            SYSTEM_PROGRAM_ID: process_system_instruction,
        }
        self._sequence = 0
        self._retired: set[bytes] = set()

    # ------------------------------------------------------------------
    # Setup & queries
    # ------------------------------------------------------------------

    def add_program(self, program_id: bytes, entrypoint: ProgramEntrypoint) -> None:
        self._programs[program_id] = entrypoint
        logger.debug("Registered program %s", to_hex(program_id))

    def airdrop(self, address: bytes, lamports: int) -> None:
        """Credit lamports out of thin air (test and tooling setup)."""
        if lamports < 0:
            raise ValueError(f"Airdrop amount must be non-negative, got {lamports}")
        account = self._accounts.setdefault(address, Account())
        account.lamports += lamports

    def get_account(self, address: bytes) -> Optional[Account]:
        """Copy of the stored account, or None if it does not exist."""
        account = self._accounts.get(address)
        if account is None or account.is_empty:
            return None
        return copy.deepcopy(account)

    def get_balance(self, address: bytes) -> int:
        account = self._accounts.get(address)
        return account.lamports if account else 0

    def minimum_balance(self, space: int) -> int:
        return self.config.rent.minimum_balance(space)

    def is_retired(self, address: bytes) -> bool:
        """True if an account at ``address`` was closed and can never be recreated."""
        return address in self._retired

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def send_transaction(
        self,
        instructions: Sequence[Instruction],
        compute_unit_limit: Optional[int] = None,
    ) -> ExecutionReceipt:
        """
        Execute ``instructions`` atomically.

        Args:
            instructions: Instructions in execution order
            compute_unit_limit: Units for the whole transaction; defaults to
                the configured limit and is capped at the configured maximum

        Returns:
            ExecutionReceipt; state is committed only when ``receipt.ok``
        """
        compute = self.config.compute
        limit = compute.default_unit_limit if compute_unit_limit is None else compute_unit_limit
        limit = min(limit, compute.max_unit_limit)

        self._sequence += 1
        receipt = self.recorder.start(
            request={
                "sequence": self._sequence,
                "instructions": [
                    (to_hex(ix.program_id), to_hex(sha256(ix.data))) for ix in instructions
                ],
            },
            instruction_count=len(instructions),
            compute_unit_limit=limit,
        )
        meter = ComputeMeter(limit)
        snapshot = copy.deepcopy(self._accounts)
        retired = set(self._retired)

        for index, ix in enumerate(instructions):
            try:
                self._execute(ix, meter, receipt)
            except VaultException as exc:
                self._restore(snapshot, retired)
                return self.recorder.fail(
                    receipt,
                    exc,
                    compute_units_consumed=meter.consumed,
                    failed_instruction=index,
                )
            except Exception:
                # host faults still must not leave partial state behind
                self._restore(snapshot, retired)
                raise

        self._collect_garbage()
        return self.recorder.complete(receipt, compute_units_consumed=meter.consumed)

    def _load_accounts(self, metas: Sequence[AccountMeta]) -> list[AccountInfo]:
        # Repeated addresses share one view with merged role flags
        flags: dict[bytes, tuple[bool, bool]] = {}
        for meta in metas:
            signer, writable = flags.get(meta.pubkey, (False, False))
            flags[meta.pubkey] = (signer or meta.is_signer, writable or meta.is_writable)

        views: dict[bytes, AccountInfo] = {}
        for key, (signer, writable) in flags.items():
            account = self._accounts.setdefault(key, Account())
            views[key] = AccountInfo(key, account, is_signer=signer, is_writable=writable)
        return [views[meta.pubkey] for meta in metas]

    def _execute(self, ix: Instruction, meter: ComputeMeter, receipt: ExecutionReceipt) -> None:
        program_hex = to_hex(ix.program_id)

        def log(line: str) -> None:
            self.recorder.log(receipt, line)

        entrypoint = self._programs.get(ix.program_id)
        if entrypoint is None:
            raise AccountViolationException(
                f"Unknown program {program_hex}",
                code=ErrorCodes.INCORRECT_PROGRAM_ID,
                details={"program_id": program_hex},
            )

        log(f"Program {program_hex} invoke [1]")
        infos = self._load_accounts(ix.accounts)
        ctx = InvokeContext(ix.program_id, meter, self.config, log, retired=self._retired)
        ctx.begin(infos)

        start = meter.consumed
        try:
            meter.consume(self.config.compute.invoke_cost)
            entrypoint(ix.program_id, infos, ix.data, ctx)
            ctx.verify(infos)
        except VaultException as exc:
            log(
                f"Program {program_hex} consumed {meter.consumed - start} "
                f"of {meter.limit - start} compute units"
            )
            log(f"Program {program_hex} failed: {exc.code}")
            raise

        log(
            f"Program {program_hex} consumed {meter.consumed - start} "
            f"of {meter.limit - start} compute units"
        )
        log(f"Program {program_hex} success")

    def _restore(self, accounts: dict[bytes, Account], retired: set[bytes]) -> None:
        self._accounts = accounts
        self._retired = retired

    def _collect_garbage(self) -> None:
        for address in [a for a, acc in self._accounts.items() if acc.lamports == 0]:
            del self._accounts[address]


__all__ = [
    "ProgramEntrypoint",
    "Ledger",
]
