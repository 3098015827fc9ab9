"""
Vault CLI

Command-line tooling for the one-time-signature vault.

Usage:
    python -m vault_cli address <commitment>
    python -m vault_cli recover --message <hex> --signature @sig.hex
    python -m vault_cli demo
    python -m vault_cli config --init
"""

__version__ = "0.1.0"

# Exit codes shared by every command
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2
