"""
CLI command modules.
"""

from vault_cli.commands import address, demo, recover

__all__ = ["address", "recover", "demo"]
