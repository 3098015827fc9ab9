"""
Runtime Configuration Module

Provides configuration loading and management for the vault program and
its host simulator.
"""

from .runtime import (
    DEFAULT_PROGRAM_ID,
    ComputeConfig,
    LoggingConfig,
    ProgramConfig,
    RentConfig,
    RuntimeConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "DEFAULT_PROGRAM_ID",
    "RuntimeConfig",
    "ComputeConfig",
    "RentConfig",
    "ProgramConfig",
    "LoggingConfig",
    "get_default_config",
    "set_default_config",
]
