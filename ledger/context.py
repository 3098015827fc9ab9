"""
Invoke Context

The narrow host interface a program sees while it executes:

- create_account(payer, new_account, lamports, space, owner)
- transfer(source, destination, amount)
- close_account(account, recipient)
- derive_address(seeds, bump)
- minimum_balance(space), consume(units), consume_sha256(num_bytes), log(message)

Host operations enforce their own rules as they run. Everything a program
changes directly is checked against the pre-instruction state by verify()
when the program returns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from core.config.runtime import RuntimeConfig
from core.crypto.hashing import to_hex
from core.schemas.errors import (
    AccountAlreadyInUseException,
    AccountViolationException,
    ErrorCodes,
    InsufficientFundsException,
    MalformedInputException,
    MissingSignatureException,
)
from ledger.accounts import SYSTEM_PROGRAM_ID, AccountInfo
from ledger.compute import ComputeMeter
from ledger.pda import create_program_address


@dataclass(frozen=True)
class _PreAccount:
    lamports: int
    data: bytes
    owner: bytes


class InvokeContext:
    """Host services bound to one executing instruction."""

    def __init__(
        self,
        program_id: bytes,
        meter: ComputeMeter,
        config: RuntimeConfig,
        log: Callable[[str], None],
        retired: Optional[set[bytes]] = None,
    ) -> None:
        self.program_id = program_id
        self.meter = meter
        self.config = config
        self._log = log
        self._pre: dict[bytes, _PreAccount] = {}
        # Shared with the ledger; closed addresses land here
        self._retired = retired if retired is not None else set()

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def begin(self, infos: Sequence[AccountInfo]) -> None:
        """Snapshot the accounts an instruction starts with."""
        self._pre = {}
        self._refresh(*infos)

    def _refresh(self, *infos: AccountInfo) -> None:
        for info in infos:
            self._pre[info.key] = _PreAccount(
                lamports=info.lamports, data=info.data, owner=info.owner
            )

    def _shift(self, info: AccountInfo, delta: int, rebase: bool = False) -> None:
        # Host-made changes move the baseline; direct program writes still show
        pre = self._pre[info.key]
        self._pre[info.key] = _PreAccount(
            lamports=pre.lamports + delta,
            data=info.data if rebase else pre.data,
            owner=info.owner if rebase else pre.owner,
        )

    def verify(self, infos: Sequence[AccountInfo]) -> None:
        """
        Check what the program did to its accounts.

        Raises:
            AccountViolationException: On writes to read-only accounts, spends or
                data writes on accounts the program does not own, or when the
                instruction created or destroyed lamports.
        """
        unique = {info.key: info for info in infos}
        pre_total = 0
        post_total = 0
        for key, info in unique.items():
            pre = self._pre[key]
            pre_total += pre.lamports
            post_total += info.lamports
            changed = (
                info.lamports != pre.lamports
                or info.data != pre.data
                or info.owner != pre.owner
            )
            if changed and not info.is_writable:
                raise AccountViolationException(
                    f"Read-only account {to_hex(key)} was modified",
                    code=ErrorCodes.READONLY_ACCOUNT_MODIFIED,
                    details={"address": to_hex(key)},
                )
            if info.lamports < pre.lamports and pre.owner != self.program_id:
                raise AccountViolationException(
                    f"Program spent lamports of external account {to_hex(key)}",
                    code=ErrorCodes.EXTERNAL_ACCOUNT_LAMPORT_SPEND,
                    details={"address": to_hex(key)},
                )
            if (info.data != pre.data or info.owner != pre.owner) and pre.owner != self.program_id:
                raise AccountViolationException(
                    f"Program modified external account {to_hex(key)}",
                    code=ErrorCodes.EXTERNAL_ACCOUNT_DATA_MODIFIED,
                    details={"address": to_hex(key)},
                )
        if pre_total != post_total:
            raise AccountViolationException(
                f"Instruction changed total lamports from {pre_total} to {post_total}",
                code=ErrorCodes.UNBALANCED_INSTRUCTION,
                details={"pre": pre_total, "post": post_total},
            )

    # ------------------------------------------------------------------
    # Metering & logging
    # ------------------------------------------------------------------

    def log(self, message: str) -> None:
        self._log(f"Program log: {message}")

    def consume(self, units: int) -> None:
        self.meter.consume(units)

    def consume_sha256(self, num_bytes: int, count: int = 1) -> None:
        """Charge for ``count`` SHA-256 invocations over ``num_bytes`` each."""
        self.meter.consume(self.config.compute.sha256_cost(num_bytes, count))

    def minimum_balance(self, space: int) -> int:
        return self.config.rent.minimum_balance(space)

    # ------------------------------------------------------------------
    # Host primitives
    # ------------------------------------------------------------------

    def derive_address(
        self,
        seeds: Sequence[bytes],
        bump: int,
        program_id: Optional[bytes] = None,
    ) -> bytes:
        """Derive a program address, defaulting to the executing program."""
        self.meter.consume(self.config.compute.derive_address_cost)
        return create_program_address(seeds, bump, program_id or self.program_id)

    def _require_writable(self, *infos: AccountInfo) -> None:
        for info in infos:
            if not info.is_writable:
                raise AccountViolationException(
                    f"Account {to_hex(info.key)} must be writable",
                    code=ErrorCodes.READONLY_ACCOUNT_MODIFIED,
                    details={"address": to_hex(info.key)},
                )

    def _move(self, source: AccountInfo, destination: AccountInfo, amount: int) -> bool:
        if amount > source.lamports:
            raise InsufficientFundsException(requested=amount, available=source.lamports)
        if source.key == destination.key:
            return False
        source.lamports -= amount
        destination.lamports += amount
        return True

    def transfer(self, source: AccountInfo, destination: AccountInfo, amount: int) -> None:
        """
        Move lamports between accounts.

        System-owned sources must sign; program-owned sources may only be
        debited by their owning program.
        """
        self.meter.consume(self.config.compute.host_call_cost)
        if amount < 0:
            raise MalformedInputException(f"Transfer amount must be non-negative, got {amount}")
        self._require_writable(source, destination)
        if source.owner == SYSTEM_PROGRAM_ID:
            if not source.is_signer:
                raise MissingSignatureException(to_hex(source.key))
        elif source.owner != self.program_id:
            raise AccountViolationException(
                f"Program cannot debit account {to_hex(source.key)} it does not own",
                code=ErrorCodes.EXTERNAL_ACCOUNT_LAMPORT_SPEND,
                details={"address": to_hex(source.key)},
            )
        if self._move(source, destination, amount):
            self._shift(source, -amount)
            self._shift(destination, amount)

    def create_account(
        self,
        payer: AccountInfo,
        new_account: AccountInfo,
        *,
        lamports: int,
        space: int,
        owner: bytes,
        signer_seeds: Optional[tuple[Sequence[bytes], int]] = None,
    ) -> None:
        """
        Fund and allocate a new account.

        The new account must sign, or be the address derived from
        ``signer_seeds`` = (seeds, bump) under the executing program. Retired
        addresses are refused like live ones.
        """
        self.meter.consume(self.config.compute.host_call_cost)
        self._require_writable(payer, new_account)
        if new_account.exists or new_account.key in self._retired:
            raise AccountAlreadyInUseException(to_hex(new_account.key))
        if not payer.is_signer:
            raise MissingSignatureException(to_hex(payer.key))
        if not new_account.is_signer:
            if signer_seeds is None:
                raise MissingSignatureException(to_hex(new_account.key))
            seeds, bump = signer_seeds
            if create_program_address(seeds, bump, self.program_id) != new_account.key:
                raise MissingSignatureException(to_hex(new_account.key))
        if payer.owner != SYSTEM_PROGRAM_ID:
            raise AccountViolationException(
                f"Payer {to_hex(payer.key)} must be a system account",
                code=ErrorCodes.EXTERNAL_ACCOUNT_LAMPORT_SPEND,
                details={"address": to_hex(payer.key)},
            )
        moved = self._move(payer, new_account, lamports)
        new_account.data = bytes(space)
        new_account.owner = owner
        if moved:
            self._shift(payer, -lamports)
        self._shift(new_account, lamports if moved else 0, rebase=True)

    def close_account(self, account: AccountInfo, recipient: AccountInfo) -> int:
        """
        Destroy a program-owned account, sending its balance to ``recipient``.

        The address is retired: create_account refuses it from then on.

        Returns:
            Lamports reclaimed
        """
        self.meter.consume(self.config.compute.host_call_cost)
        self._require_writable(account, recipient)
        if account.key == recipient.key:
            raise MalformedInputException("An account cannot be closed into itself")
        if account.owner != self.program_id:
            raise AccountViolationException(
                f"Program cannot close account {to_hex(account.key)} it does not own",
                code=ErrorCodes.EXTERNAL_ACCOUNT_DATA_MODIFIED,
                details={"address": to_hex(account.key)},
            )
        reclaimed = account.lamports
        self._move(account, recipient, reclaimed)
        account.close()
        self._retired.add(account.key)
        self._shift(account, -reclaimed, rebase=True)
        self._shift(recipient, reclaimed)
        return reclaimed


__all__ = ["InvokeContext"]
