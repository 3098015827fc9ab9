"""
Vault Program Tests

End-to-end scenarios against the in-memory ledger:
- Open / Split / Close lifecycle and single use
- Conservation of value
- Rejection of forged, replayed and mis-targeted signatures
- Atomic rollback on every error class
- Compute exhaustion and rollover between key generations
"""

import pytest

from core.schemas import ErrorCodes, VaultInstruction, VaultState
from ledger import AccountMeta, Instruction, transfer_instruction
from vault_program import (
    estimate_verification_units,
    find_vault_address,
    open_vault_instruction,
    split_message,
    close_message,
    split_vault_instruction,
)

from fixtures.common import (
    MAX_UNITS,
    PROGRAM_ID,
    make_address,
    make_close_instruction,
    make_privkey,
    make_split_instruction,
    open_vault,
)


SPLIT_TO = make_address("split")
REFUND_TO = make_address("refund")


def _balances(ledger, *addresses):
    return [ledger.get_balance(a) for a in addresses]


# =============================================================================
# Open
# =============================================================================

class TestOpen:
    """Tests for establishing a vault."""

    def test_open_creates_rent_exempt_vault(self, ledger, payer, privkey):
        before = ledger.get_balance(payer)

        vault = open_vault(ledger, payer, privkey)

        account = ledger.get_account(vault.address)
        rent = ledger.minimum_balance(VaultState.SIZE)
        assert account.owner == PROGRAM_ID
        assert account.lamports == rent == 1_120_560
        assert VaultState.from_bytes(account.data) == VaultState(
            commitment=privkey.commitment(), bump=vault.bump
        )
        assert ledger.get_balance(payer) == before - rent

    def test_open_address_is_derived(self, ledger, payer, privkey):
        vault = open_vault(ledger, payer, privkey)
        assert (vault.address, vault.bump) == find_vault_address(privkey.commitment(), PROGRAM_ID)

    def test_open_twice_fails(self, ledger, payer, privkey, assert_failed_with):
        vault = open_vault(ledger, payer, privkey)

        receipt = ledger.send_transaction([
            open_vault_instruction(payer, privkey.commitment(), vault.bump, PROGRAM_ID)
        ])

        assert_failed_with(receipt, ErrorCodes.ACCOUNT_ALREADY_IN_USE)

    def test_open_at_wrong_address(self, ledger, payer, privkey, assert_failed_with):
        commitment = privkey.commitment()
        _, bump = find_vault_address(commitment, PROGRAM_ID)
        ix = Instruction(
            program_id=PROGRAM_ID,
            accounts=(
                AccountMeta.writable(payer, is_signer=True),
                AccountMeta.writable(make_address("not-the-vault")),
            ),
            data=bytes([VaultInstruction.OPEN]) + commitment + bytes([bump]),
        )

        assert_failed_with(ledger.send_transaction([ix]), ErrorCodes.IDENTITY_MISMATCH)

    def test_open_requires_payer_signature(self, ledger, payer, privkey, assert_failed_with):
        commitment = privkey.commitment()
        vault, bump = find_vault_address(commitment, PROGRAM_ID)
        ix = Instruction(
            program_id=PROGRAM_ID,
            accounts=(AccountMeta.writable(payer), AccountMeta.writable(vault)),
            data=bytes([VaultInstruction.OPEN]) + commitment + bytes([bump]),
        )

        assert_failed_with(ledger.send_transaction([ix]), ErrorCodes.MISSING_REQUIRED_SIGNATURE)

    def test_open_without_vault_account(self, ledger, payer, privkey, assert_failed_with):
        commitment = privkey.commitment()
        _, bump = find_vault_address(commitment, PROGRAM_ID)
        ix = Instruction(
            program_id=PROGRAM_ID,
            accounts=(AccountMeta.writable(payer, is_signer=True),),
            data=bytes([VaultInstruction.OPEN]) + commitment + bytes([bump]),
        )

        assert_failed_with(ledger.send_transaction([ix]), ErrorCodes.NOT_ENOUGH_ACCOUNT_KEYS)

    def test_open_payload_length(self, ledger, payer, privkey, assert_failed_with):
        ix = open_vault_instruction(payer, privkey.commitment(), program_id=PROGRAM_ID)
        short = Instruction(ix.program_id, ix.accounts, ix.data[:-1])

        assert_failed_with(ledger.send_transaction([short]), ErrorCodes.INVALID_INSTRUCTION_DATA)

    def test_open_compute_cost(self, ledger, payer, privkey):
        receipt = ledger.send_transaction([
            open_vault_instruction(payer, privkey.commitment(), program_id=PROGRAM_ID)
        ])
        compute = ledger.config.compute

        assert receipt.ok
        assert receipt.compute_units_consumed == (
            compute.invoke_cost + compute.derive_address_cost + compute.host_call_cost
        )


# =============================================================================
# End-to-end
# =============================================================================

@pytest.mark.integration
class TestLifecycle:
    """Open, fund, spend once."""

    def test_split_scenario(self, ledger, funded_vault, assert_failed_with):
        """Fund with 1,000,000; split 400,000 to X, the rest to Y; replay fails."""
        vault_balance = ledger.get_balance(funded_vault.address)
        assert vault_balance == ledger.minimum_balance(VaultState.SIZE) + 1_000_000

        receipt = ledger.send_transaction(
            [make_split_instruction(funded_vault, 400_000, SPLIT_TO, REFUND_TO)],
            compute_unit_limit=MAX_UNITS,
        )

        assert receipt.ok, receipt.pretty_logs()
        assert ledger.get_balance(SPLIT_TO) == 400_000
        assert ledger.get_balance(REFUND_TO) == vault_balance - 400_000
        assert ledger.get_account(funded_vault.address) is None

        replay = ledger.send_transaction(
            [make_split_instruction(funded_vault, 400_000, SPLIT_TO, REFUND_TO)],
            compute_unit_limit=MAX_UNITS,
        )
        assert_failed_with(replay, ErrorCodes.ACCOUNT_NOT_FOUND)

        close = ledger.send_transaction(
            [make_close_instruction(funded_vault, REFUND_TO)], compute_unit_limit=MAX_UNITS
        )
        assert_failed_with(close, ErrorCodes.ACCOUNT_NOT_FOUND)

    def test_split_conserves_value(self, ledger, funded_vault):
        addresses = (funded_vault.address, SPLIT_TO, REFUND_TO)
        total_before = sum(_balances(ledger, *addresses))
        vault_before = ledger.get_balance(funded_vault.address)

        receipt = ledger.send_transaction(
            [make_split_instruction(funded_vault, 123_456, SPLIT_TO, REFUND_TO)],
            compute_unit_limit=MAX_UNITS,
        )

        assert receipt.ok, receipt.pretty_logs()
        split_credit, refund_credit = _balances(ledger, SPLIT_TO, REFUND_TO)
        assert split_credit + refund_credit == vault_before
        assert sum(_balances(ledger, *addresses)) == total_before

    def test_close_refunds_everything(self, ledger, funded_vault, assert_failed_with):
        vault_balance = ledger.get_balance(funded_vault.address)

        receipt = ledger.send_transaction(
            [make_close_instruction(funded_vault, REFUND_TO)], compute_unit_limit=MAX_UNITS
        )

        assert receipt.ok, receipt.pretty_logs()
        assert ledger.get_balance(REFUND_TO) == vault_balance
        assert ledger.get_account(funded_vault.address) is None

        again = ledger.send_transaction(
            [make_close_instruction(funded_vault, REFUND_TO)], compute_unit_limit=MAX_UNITS
        )
        assert_failed_with(again, ErrorCodes.ACCOUNT_NOT_FOUND)

    def test_consumed_vault_cannot_be_reopened(self, ledger, payer, funded_vault, assert_failed_with):
        """Re-opening a consumed vault would let its revealed signature spend again."""
        close = make_close_instruction(funded_vault, REFUND_TO)
        assert ledger.send_transaction([close], compute_unit_limit=MAX_UNITS).ok
        refund_after_close = ledger.get_balance(REFUND_TO)

        reopen = ledger.send_transaction([
            open_vault_instruction(payer, funded_vault.commitment, funded_vault.bump, PROGRAM_ID),
            transfer_instruction(payer, funded_vault.address, 500_000),
        ])

        assert_failed_with(reopen, ErrorCodes.ACCOUNT_ALREADY_IN_USE)
        assert ledger.get_account(funded_vault.address) is None
        assert ledger.is_retired(funded_vault.address)

        replay = ledger.send_transaction([close], compute_unit_limit=MAX_UNITS)

        assert_failed_with(replay, ErrorCodes.ACCOUNT_NOT_FOUND)
        assert ledger.get_balance(REFUND_TO) == refund_after_close

    def test_failed_spend_does_not_retire_vault(self, ledger, funded_vault, assert_failed_with):
        receipt = ledger.send_transaction(
            [
                make_close_instruction(funded_vault, REFUND_TO),
                make_close_instruction(funded_vault, REFUND_TO),
            ],
            compute_unit_limit=MAX_UNITS,
        )

        assert_failed_with(receipt, ErrorCodes.ACCOUNT_NOT_FOUND)
        assert not ledger.is_retired(funded_vault.address)

        retry = ledger.send_transaction(
            [make_close_instruction(funded_vault, REFUND_TO)], compute_unit_limit=MAX_UNITS
        )
        assert retry.ok, retry.pretty_logs()

    def test_split_entire_balance(self, ledger, funded_vault):
        vault_balance = ledger.get_balance(funded_vault.address)

        receipt = ledger.send_transaction(
            [make_split_instruction(funded_vault, vault_balance, SPLIT_TO, REFUND_TO)],
            compute_unit_limit=MAX_UNITS,
        )

        assert receipt.ok, receipt.pretty_logs()
        assert ledger.get_balance(SPLIT_TO) == vault_balance
        assert ledger.get_balance(REFUND_TO) == 0

    def test_split_and_refund_to_same_account(self, ledger, funded_vault):
        vault_balance = ledger.get_balance(funded_vault.address)

        receipt = ledger.send_transaction(
            [make_split_instruction(funded_vault, 1_000, REFUND_TO, REFUND_TO)],
            compute_unit_limit=MAX_UNITS,
        )

        assert receipt.ok, receipt.pretty_logs()
        assert ledger.get_balance(REFUND_TO) == vault_balance

    def test_rollover_into_new_vault(self, ledger, payer, funded_vault):
        """Value moves between key generations without leaving program custody."""
        successor = open_vault(ledger, payer, make_privkey("next-generation"))
        successor_before = ledger.get_balance(successor.address)
        vault_balance = ledger.get_balance(funded_vault.address)

        receipt = ledger.send_transaction(
            [make_close_instruction(funded_vault, successor.address)],
            compute_unit_limit=MAX_UNITS,
        )

        assert receipt.ok, receipt.pretty_logs()
        assert ledger.get_balance(successor.address) == successor_before + vault_balance
        assert ledger.get_account(successor.address).owner == PROGRAM_ID

        final = ledger.send_transaction(
            [make_split_instruction(successor, 500_000, SPLIT_TO, REFUND_TO)],
            compute_unit_limit=MAX_UNITS,
        )
        assert final.ok, final.pretty_logs()
        assert ledger.get_balance(SPLIT_TO) == 500_000

    def test_compute_matches_estimate(self, ledger, funded_vault):
        message = split_message(400_000, SPLIT_TO, REFUND_TO)
        compute = ledger.config.compute

        receipt = ledger.send_transaction(
            [make_split_instruction(funded_vault, 400_000, SPLIT_TO, REFUND_TO)],
            compute_unit_limit=MAX_UNITS,
        )

        assert receipt.ok
        assert receipt.compute_units_consumed == (
            compute.invoke_cost
            + estimate_verification_units(message, ledger.config)
            + 2 * compute.host_call_cost
        )

    def test_program_logs(self, ledger, funded_vault):
        receipt = ledger.send_transaction(
            [make_close_instruction(funded_vault, REFUND_TO)], compute_unit_limit=MAX_UNITS
        )

        program = "0x" + PROGRAM_ID.hex()
        assert receipt.logs[0] == f"Program {program} invoke [1]"
        assert "Program log: Instruction: Close" in receipt.logs
        assert receipt.logs[-1] == f"Program {program} success"


# =============================================================================
# Rejection
# =============================================================================

class TestAuthorization:
    """Anything but the vault's own signature over these exact fields fails."""

    @pytest.mark.parametrize("byte_index", [0, 447, 895])
    def test_bit_flipped_signature(self, ledger, funded_vault, byte_index, assert_failed_with):
        ix = make_split_instruction(funded_vault, 400_000, SPLIT_TO, REFUND_TO)
        data = bytearray(ix.data)
        data[1 + byte_index] ^= 0x80
        before = _balances(ledger, funded_vault.address, SPLIT_TO, REFUND_TO)

        receipt = ledger.send_transaction(
            [Instruction(ix.program_id, ix.accounts, bytes(data))], compute_unit_limit=MAX_UNITS
        )

        assert_failed_with(receipt, ErrorCodes.IDENTITY_MISMATCH)
        assert _balances(ledger, funded_vault.address, SPLIT_TO, REFUND_TO) == before

    def test_changed_amount(self, ledger, funded_vault, assert_failed_with):
        signature = funded_vault.key.sign(split_message(400_000, SPLIT_TO, REFUND_TO))
        ix = split_vault_instruction(
            funded_vault.address, signature, funded_vault.bump, 400_001, SPLIT_TO, REFUND_TO, PROGRAM_ID
        )

        receipt = ledger.send_transaction([ix], compute_unit_limit=MAX_UNITS)

        assert_failed_with(receipt, ErrorCodes.IDENTITY_MISMATCH)

    @pytest.mark.parametrize("swap", ["split", "refund"])
    def test_changed_recipient(self, ledger, funded_vault, swap, assert_failed_with):
        thief = make_address("thief")
        signature = funded_vault.key.sign(split_message(400_000, SPLIT_TO, REFUND_TO))
        split_to, refund_to = (thief, REFUND_TO) if swap == "split" else (SPLIT_TO, thief)
        ix = split_vault_instruction(
            funded_vault.address, signature, funded_vault.bump, 400_000, split_to, refund_to, PROGRAM_ID
        )

        receipt = ledger.send_transaction([ix], compute_unit_limit=MAX_UNITS)

        assert_failed_with(receipt, ErrorCodes.IDENTITY_MISMATCH)
        assert ledger.get_balance(thief) == 0

    def test_close_signature_bound_to_refund(self, ledger, funded_vault, assert_failed_with):
        signature = funded_vault.key.sign(close_message(REFUND_TO))
        ix = Instruction(
            program_id=PROGRAM_ID,
            accounts=(
                AccountMeta.writable(funded_vault.address),
                AccountMeta.writable(make_address("thief")),
            ),
            data=bytes([VaultInstruction.CLOSE]) + signature.to_bytes() + bytes([funded_vault.bump]),
        )

        receipt = ledger.send_transaction([ix], compute_unit_limit=MAX_UNITS)

        assert_failed_with(receipt, ErrorCodes.IDENTITY_MISMATCH)

    def test_other_vaults_key(self, ledger, payer, funded_vault, assert_failed_with):
        """A valid signature for vault A does not unlock vault B."""
        other = open_vault(ledger, payer, make_privkey("someone-else"), fund=5_000)

        ix = make_close_instruction(other, REFUND_TO, signer=funded_vault.key)
        receipt = ledger.send_transaction([ix], compute_unit_limit=MAX_UNITS)

        assert_failed_with(receipt, ErrorCodes.IDENTITY_MISMATCH)
        assert ledger.get_account(other.address) is not None

    def test_wrong_bump(self, ledger, funded_vault, assert_failed_with):
        signature = funded_vault.key.sign(close_message(REFUND_TO))
        ix = Instruction(
            program_id=PROGRAM_ID,
            accounts=(AccountMeta.writable(funded_vault.address), AccountMeta.writable(REFUND_TO)),
            data=bytes([VaultInstruction.CLOSE]) + signature.to_bytes()
            + bytes([(funded_vault.bump - 1) % 256]),
        )

        receipt = ledger.send_transaction([ix], compute_unit_limit=MAX_UNITS)

        assert_failed_with(receipt, ErrorCodes.IDENTITY_MISMATCH)

    def test_unopened_vault(self, ledger, privkey, assert_failed_with):
        address, bump = find_vault_address(privkey.commitment(), PROGRAM_ID)
        ix = split_vault_instruction(
            address,
            privkey.sign(split_message(1, SPLIT_TO, REFUND_TO)),
            bump,
            1,
            SPLIT_TO,
            REFUND_TO,
            PROGRAM_ID,
        )

        receipt = ledger.send_transaction([ix], compute_unit_limit=MAX_UNITS)

        assert_failed_with(receipt, ErrorCodes.ACCOUNT_NOT_FOUND)
        assert receipt.compute_units_consumed == ledger.config.compute.invoke_cost


class TestFailureHandling:
    """Every failure aborts with no partial effect."""

    def test_insufficient_funds(self, ledger, funded_vault, assert_failed_with):
        vault_balance = ledger.get_balance(funded_vault.address)

        receipt = ledger.send_transaction(
            [make_split_instruction(funded_vault, vault_balance + 1, SPLIT_TO, REFUND_TO)],
            compute_unit_limit=MAX_UNITS,
        )

        assert_failed_with(receipt, ErrorCodes.INSUFFICIENT_FUNDS)
        assert ledger.get_balance(funded_vault.address) == vault_balance
        assert ledger.get_balance(SPLIT_TO) == 0

    def test_compute_exhaustion(self, ledger, funded_vault, assert_failed_with):
        vault_balance = ledger.get_balance(funded_vault.address)

        receipt = ledger.send_transaction(
            [make_split_instruction(funded_vault, 400_000, SPLIT_TO, REFUND_TO)],
            compute_unit_limit=50_000,
        )

        assert_failed_with(receipt, ErrorCodes.COMPUTE_BUDGET_EXCEEDED)
        assert receipt.compute_units_consumed == 50_000
        assert ledger.get_balance(funded_vault.address) == vault_balance

        # Same signature succeeds once properly provisioned
        retry = ledger.send_transaction(
            [make_split_instruction(funded_vault, 400_000, SPLIT_TO, REFUND_TO)],
            compute_unit_limit=MAX_UNITS,
        )
        assert retry.ok, retry.pretty_logs()

    def test_default_limit_is_not_enough(self, ledger, funded_vault, assert_failed_with):
        receipt = ledger.send_transaction(
            [make_split_instruction(funded_vault, 400_000, SPLIT_TO, REFUND_TO)]
        )
        assert_failed_with(receipt, ErrorCodes.COMPUTE_BUDGET_EXCEEDED)

    def test_failure_rolls_back_whole_transaction(self, ledger, payer, funded_vault, assert_failed_with):
        payer_before = ledger.get_balance(payer)
        forged = make_split_instruction(
            funded_vault, 400_000, SPLIT_TO, REFUND_TO, signer=make_privkey("forger")
        )

        receipt = ledger.send_transaction(
            [transfer_instruction(payer, SPLIT_TO, 77), forged], compute_unit_limit=MAX_UNITS
        )

        assert_failed_with(receipt, ErrorCodes.IDENTITY_MISMATCH)
        assert receipt.failed_instruction == 1
        assert ledger.get_balance(payer) == payer_before
        assert ledger.get_balance(SPLIT_TO) == 0

    def test_only_one_of_two_spends_commits(self, ledger, funded_vault, assert_failed_with):
        """Two spends of one vault in a single transaction: the second sees it gone."""
        receipt = ledger.send_transaction(
            [
                make_close_instruction(funded_vault, REFUND_TO),
                make_close_instruction(funded_vault, REFUND_TO),
            ],
            compute_unit_limit=MAX_UNITS,
        )

        assert_failed_with(receipt, ErrorCodes.ACCOUNT_NOT_FOUND)
        assert ledger.get_account(funded_vault.address) is not None


class TestMalformedInput:
    """Rejected before any cryptography runs."""

    def test_empty_data(self, ledger, funded_vault, assert_failed_with):
        ix = Instruction(PROGRAM_ID, (AccountMeta.writable(funded_vault.address),), b"")
        assert_failed_with(ledger.send_transaction([ix]), ErrorCodes.INVALID_INSTRUCTION_DATA)

    def test_unknown_discriminator(self, ledger, funded_vault, assert_failed_with):
        ix = Instruction(PROGRAM_ID, (AccountMeta.writable(funded_vault.address),), b"\x07")
        assert_failed_with(ledger.send_transaction([ix]), ErrorCodes.INVALID_INSTRUCTION_DATA)

    @pytest.mark.parametrize("delta", [-1, 1])
    def test_split_payload_length(self, ledger, funded_vault, delta, assert_failed_with):
        ix = make_split_instruction(funded_vault, 1, SPLIT_TO, REFUND_TO)
        data = ix.data[:-1] if delta < 0 else ix.data + b"\x00"

        receipt = ledger.send_transaction([Instruction(ix.program_id, ix.accounts, data)])

        assert_failed_with(receipt, ErrorCodes.INVALID_INSTRUCTION_DATA)
        assert receipt.compute_units_consumed == ledger.config.compute.invoke_cost

    def test_missing_refund_account(self, ledger, funded_vault, assert_failed_with):
        ix = make_split_instruction(funded_vault, 1, SPLIT_TO, REFUND_TO)
        short = Instruction(ix.program_id, ix.accounts[:2], ix.data)

        assert_failed_with(ledger.send_transaction([short]), ErrorCodes.NOT_ENOUGH_ACCOUNT_KEYS)

    @pytest.mark.parametrize("kind", ["split", "close"])
    def test_extra_account_rejected(self, ledger, funded_vault, kind, assert_failed_with):
        if kind == "split":
            ix = make_split_instruction(funded_vault, 1, SPLIT_TO, REFUND_TO)
        else:
            ix = make_close_instruction(funded_vault, REFUND_TO)
        padded = Instruction(
            ix.program_id, ix.accounts + (AccountMeta.writable(make_address("extra")),), ix.data
        )

        receipt = ledger.send_transaction([padded], compute_unit_limit=MAX_UNITS)

        assert_failed_with(receipt, ErrorCodes.NOT_ENOUGH_ACCOUNT_KEYS)
        assert receipt.compute_units_consumed == ledger.config.compute.invoke_cost
        assert ledger.get_account(funded_vault.address) is not None

    def test_vault_cannot_pay_itself(self, ledger, funded_vault, assert_failed_with):
        ix = make_close_instruction(funded_vault, funded_vault.address)
        receipt = ledger.send_transaction([ix], compute_unit_limit=MAX_UNITS)

        assert_failed_with(receipt, ErrorCodes.INVALID_INSTRUCTION_DATA)
