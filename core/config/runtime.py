"""
Runtime Configuration

Central configuration for the vault program identity and for the host
simulator's compute and rent model.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

from core.crypto.hashing import parse_hex, to_hex

load_dotenv()


# Program identity of the deployed vault program
DEFAULT_PROGRAM_ID: bytes = bytes([
    0x0f, 0x1e, 0x6b, 0x14, 0x21, 0xc0, 0x4a, 0x07, 0x04, 0x31, 0x26, 0x5c, 0x19, 0xc5, 0xbb, 0xee,
    0x19, 0x92, 0xba, 0xe8, 0xaf, 0xd1, 0xcd, 0x07, 0x8e, 0xf8, 0xaf, 0x70, 0x47, 0xdc, 0x11, 0xf7,
])


@dataclass
class ComputeConfig:
    """Compute-unit pricing and transaction limits."""
    default_unit_limit: int = 200_000
    max_unit_limit: int = 1_400_000
    invoke_cost: int = 1_000
    host_call_cost: int = 1_000
    derive_address_cost: int = 1_500
    sha256_base_cost: int = 85
    sha256_byte_cost: int = 1

    def sha256_cost(self, num_bytes: int, count: int = 1) -> int:
        """Units charged for ``count`` hashes of ``num_bytes`` each."""
        per_hash = self.sha256_base_cost + self.sha256_byte_cost * ((num_bytes + 1) // 2)
        return per_hash * count


@dataclass
class RentConfig:
    """Rent-exemption model for account creation."""
    lamports_per_byte_year: int = 3480
    exemption_threshold: float = 2.0
    account_storage_overhead: int = 128

    def minimum_balance(self, space: int) -> int:
        """Lamports an account of ``space`` data bytes must hold to be rent exempt."""
        return int(
            (self.account_storage_overhead + space)
            * self.lamports_per_byte_year
            * self.exemption_threshold
        )


@dataclass
class ProgramConfig:
    """Identity of the vault program."""
    program_id: str = to_hex(DEFAULT_PROGRAM_ID)

    @property
    def program_id_bytes(self) -> bytes:
        value = parse_hex(self.program_id)
        if len(value) != 32:
            raise ValueError(f"Program id must be 32 bytes, got {len(value)}")
        return value


@dataclass
class LoggingConfig:
    """Logging setup for CLI and tooling."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    compute: ComputeConfig = field(default_factory=ComputeConfig)
    rent: RentConfig = field(default_factory=RentConfig)
    program: ProgramConfig = field(default_factory=ProgramConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - QVAULT_PROGRAM_ID: Vault program id (hex)
        - QVAULT_COMPUTE_UNIT_LIMIT: Default per-transaction compute limit
        - QVAULT_MAX_COMPUTE_UNIT_LIMIT: Largest limit a transaction may request
        - QVAULT_LOG_LEVEL: Log level
        - QVAULT_LOG_FILE: Log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv("QVAULT_PROGRAM_ID"):
            overrides.setdefault("program", {})["program_id"] = os.getenv("QVAULT_PROGRAM_ID")

        if os.getenv("QVAULT_COMPUTE_UNIT_LIMIT"):
            overrides.setdefault("compute", {})["default_unit_limit"] = int(
                os.getenv("QVAULT_COMPUTE_UNIT_LIMIT", "200000")
            )
        if os.getenv("QVAULT_MAX_COMPUTE_UNIT_LIMIT"):
            overrides.setdefault("compute", {})["max_unit_limit"] = int(
                os.getenv("QVAULT_MAX_COMPUTE_UNIT_LIMIT", "1400000")
            )

        if os.getenv("QVAULT_LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv("QVAULT_LOG_LEVEL")
        if os.getenv("QVAULT_LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv("QVAULT_LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        compute_data = data.get("compute", {})
        rent_data = data.get("rent", {})
        program_data = data.get("program", {})
        logging_data = data.get("logging", {})

        compute = ComputeConfig(**compute_data) if compute_data else ComputeConfig()
        rent = RentConfig(**rent_data) if rent_data else RentConfig()
        program = ProgramConfig(**program_data) if program_data else ProgramConfig()
        log = LoggingConfig(**logging_data) if logging_data else LoggingConfig()

        if compute.default_unit_limit > compute.max_unit_limit:
            raise ValueError(
                f"default_unit_limit ({compute.default_unit_limit}) exceeds "
                f"max_unit_limit ({compute.max_unit_limit})"
            )

        return cls(
            compute=compute,
            rent=rent,
            program=program,
            logging=log,
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        import copy
        new_config = copy.deepcopy(self)

        for section in ("compute", "program", "logging"):
            if section in overrides:
                target = getattr(new_config, section)
                for key, value in overrides[section].items():
                    setattr(target, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "compute": {
                "default_unit_limit": self.compute.default_unit_limit,
                "max_unit_limit": self.compute.max_unit_limit,
                "invoke_cost": self.compute.invoke_cost,
                "host_call_cost": self.compute.host_call_cost,
                "derive_address_cost": self.compute.derive_address_cost,
                "sha256_base_cost": self.compute.sha256_base_cost,
                "sha256_byte_cost": self.compute.sha256_byte_cost,
            },
            "rent": {
                "lamports_per_byte_year": self.rent.lamports_per_byte_year,
                "exemption_threshold": self.rent.exemption_threshold,
                "account_storage_overhead": self.rent.account_storage_overhead,
            },
            "program": {
                "program_id": self.program.program_id,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
