"""
Ledger Accounts

Account records, instruction envelopes and the program-side account view.

An address nobody has funded reads as an empty, system-owned account with
zero lamports; the ledger drops such accounts after every transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.crypto.hashing import to_hex


SYSTEM_PROGRAM_ID: bytes = bytes(32)
ADDRESS_LENGTH: int = 32
LAMPORTS_PER_SOL: int = 1_000_000_000


@dataclass
class Account:
    """Stored account record."""
    lamports: int = 0
    data: bytes = b""
    owner: bytes = SYSTEM_PROGRAM_ID
    executable: bool = False

    @property
    def is_empty(self) -> bool:
        return self.lamports == 0 and not self.data and self.owner == SYSTEM_PROGRAM_ID


@dataclass(frozen=True)
class AccountMeta:
    """Account reference inside an instruction, with its role flags."""
    pubkey: bytes
    is_signer: bool = False
    is_writable: bool = False

    def __post_init__(self) -> None:
        if len(self.pubkey) != ADDRESS_LENGTH:
            raise ValueError(
                f"Address must be {ADDRESS_LENGTH} bytes, got {len(self.pubkey)}"
            )

    @classmethod
    def writable(cls, pubkey: bytes, is_signer: bool = False) -> "AccountMeta":
        return cls(pubkey=pubkey, is_signer=is_signer, is_writable=True)

    @classmethod
    def readonly(cls, pubkey: bytes, is_signer: bool = False) -> "AccountMeta":
        return cls(pubkey=pubkey, is_signer=is_signer, is_writable=False)


@dataclass(frozen=True)
class Instruction:
    """A single program invocation."""
    program_id: bytes
    accounts: tuple[AccountMeta, ...] = field(default_factory=tuple)
    data: bytes = b""

    def __post_init__(self) -> None:
        # Accept any sequence of metas
        object.__setattr__(self, "accounts", tuple(self.accounts))


class AccountInfo:
    """
    Program-side view of an account during one instruction.

    Mutations land directly on the ledger's working state. Whether they were
    allowed is checked by the host when the instruction returns.
    """

    def __init__(
        self,
        key: bytes,
        account: Account,
        is_signer: bool = False,
        is_writable: bool = False,
    ) -> None:
        self.key = key
        self._account = account
        self.is_signer = is_signer
        self.is_writable = is_writable

    @property
    def lamports(self) -> int:
        return self._account.lamports

    @lamports.setter
    def lamports(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"Lamports cannot be negative: {value}")
        self._account.lamports = value

    @property
    def data(self) -> bytes:
        return self._account.data

    @data.setter
    def data(self, value: bytes) -> None:
        self._account.data = bytes(value)

    @property
    def owner(self) -> bytes:
        return self._account.owner

    @owner.setter
    def owner(self, value: bytes) -> None:
        self._account.owner = bytes(value)

    @property
    def executable(self) -> bool:
        return self._account.executable

    @property
    def exists(self) -> bool:
        return not self._account.is_empty

    def is_owned_by(self, program_id: bytes) -> bool:
        return self._account.owner == program_id

    def close(self) -> None:
        """Zero the account and hand it back to the system program."""
        self._account.lamports = 0
        self._account.data = b""
        self._account.owner = SYSTEM_PROGRAM_ID

    def __repr__(self) -> str:
        return (
            f"AccountInfo(key={to_hex(self.key)}, lamports={self.lamports}, "
            f"owner={to_hex(self.owner)}, signer={self.is_signer}, writable={self.is_writable})"
        )


__all__ = [
    "SYSTEM_PROGRAM_ID",
    "ADDRESS_LENGTH",
    "LAMPORTS_PER_SOL",
    "Account",
    "AccountMeta",
    "Instruction",
    "AccountInfo",
]
