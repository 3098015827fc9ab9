"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m vault_cli address <commitment> [--program-id HEX] [--json]
    python -m vault_cli recover --message HEX --signature HEX|@FILE [--expect HEX] [--json]
    python -m vault_cli demo [--seed HEX] [--fund N] [--amount N] [--json]
    python -m vault_cli config --init
    python -m vault_cli config --show

Environment Variables:
    QVAULT_PROGRAM_ID               Vault program id (hex)
    QVAULT_COMPUTE_UNIT_LIMIT       Default transaction compute limit (default: 200000)
    QVAULT_MAX_COMPUTE_UNIT_LIMIT   Largest requestable compute limit (default: 1400000)
    QVAULT_LOG_LEVEL                Log level (default: INFO)
    QVAULT_LOG_FILE                 Log file path
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from vault_cli import EXIT_RUNTIME_ERROR, EXIT_SUCCESS, __version__
from vault_cli.commands import address, demo, recover
from vault_cli.config import DEFAULT_CONFIG_NAME, get_default_config_template, load_config


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="qvault",
        description="Quantum vault CLI - derive vault addresses, recover commitments and run the vault lifecycle.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: ./{DEFAULT_CONFIG_NAME} or ~/.config/qvault/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- address command ---
    address_parser = subparsers.add_parser(
        "address",
        help="Derive the vault address for a commitment",
        description="Search the canonical bump and print the vault address for a commitment.",
    )
    address_parser.add_argument(
        "commitment",
        type=str,
        help="32-byte merklized public key (hex)",
    )
    address_parser.add_argument(
        "--program-id",
        type=str,
        default=None,
        help="Vault program id (hex, default: from config)",
    )
    address_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    address_parser.set_defaults(func=address.address_cmd)

    # --- recover command ---
    recover_parser = subparsers.add_parser(
        "recover",
        help="Recover the commitment behind a signature",
        description="Recover the public key for a message and signature, merklize it and price the verification.",
    )
    recover_parser.add_argument(
        "--message", "-m",
        type=str,
        required=True,
        help="Signed message (hex, or @FILE containing hex)",
    )
    recover_parser.add_argument(
        "--signature", "-s",
        type=str,
        required=True,
        help="896-byte signature (hex, or @FILE containing hex)",
    )
    recover_parser.add_argument(
        "--expect",
        type=str,
        default=None,
        help="Commitment the signature must recover to (exit 2 otherwise)",
    )
    recover_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    recover_parser.set_defaults(func=recover.recover_cmd)

    # --- demo command ---
    demo_parser = subparsers.add_parser(
        "demo",
        help="Run open, split and replay on an in-memory ledger",
        description="Open and fund a vault, split it with a one-time signature, then show the replay is rejected.",
    )
    demo_parser.add_argument(
        "--seed",
        type=str,
        default=None,
        help="Master seed for the one-time key (hex, default: random)",
    )
    demo_parser.add_argument(
        "--fund",
        type=int,
        default=1_000_000,
        help="Lamports deposited into the vault after opening (default: 1000000)",
    )
    demo_parser.add_argument(
        "--amount",
        type=int,
        default=400_000,
        help="Lamports paid to the split recipient (default: 400000)",
    )
    demo_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    demo_parser.set_defaults(func=demo.demo_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Create or show configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=DEFAULT_CONFIG_NAME,
        help=f"Path for config file (default: {DEFAULT_CONFIG_NAME})",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (QVAULT_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        config_path = Path(args.path)
        config = load_config(config_path if config_path.exists() else None)
        print(json.dumps(config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: qvault config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.log_level == "DEBUG":
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
