"""
Module 03 - Winternitz One-Time Signatures

Hash-chain one-time signatures over SHA-256:
- 28 chains of 255 steps (26 message digits + 2 checksum digits)
- 896-byte signatures
- Public keys compressed to a 32-byte commitment by merklization

Usage:
    from core.winternitz import WinternitzPrivkey, WinternitzSignature

    key = WinternitzPrivkey.generate()
    commitment = key.commitment()

    signature = key.sign(message)
    recovered = WinternitzSignature.from_bytes(signature.to_bytes())
    assert recovered.recover_pubkey(message).merklize() == commitment
"""
from .params import (
    WINTERNITZ_W,
    CHAIN_LENGTH,
    MESSAGE_DIGITS,
    CHECKSUM_DIGITS,
    SCALAR_COUNT,
    SIGNATURE_LENGTH,
    PUBKEY_LENGTH,
)
from .digits import (
    checksum,
    message_digits,
    recovery_steps,
    estimate_recovery_steps,
)
from .pubkey import WinternitzPubkey
from .signature import Recovery, WinternitzSignature
from .privkey import WinternitzPrivkey


__all__ = [
    # Parameters
    "WINTERNITZ_W",
    "CHAIN_LENGTH",
    "MESSAGE_DIGITS",
    "CHECKSUM_DIGITS",
    "SCALAR_COUNT",
    "SIGNATURE_LENGTH",
    "PUBKEY_LENGTH",
    # Digits
    "checksum",
    "message_digits",
    "recovery_steps",
    "estimate_recovery_steps",
    # Keys & signatures
    "WinternitzPubkey",
    "WinternitzSignature",
    "WinternitzPrivkey",
    "Recovery",
]
