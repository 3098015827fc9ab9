"""
CLI Configuration

Loads the runtime configuration for CLI commands from a YAML file and the
environment. Environment variables override file settings.
"""

from __future__ import annotations

from pathlib import Path

from core.config.runtime import RuntimeConfig


DEFAULT_CONFIG_NAME = "qvault.yaml"


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.cwd() / f".{DEFAULT_CONFIG_NAME}",
        Path.home() / ".config" / "qvault" / "config.yaml",
    ]


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Args:
        config_path: Optional path to a YAML config file. When omitted the
            default locations are searched.

    Returns:
        Merged configuration

    Raises:
        FileNotFoundError: An explicit ``config_path`` does not exist
    """
    if config_path is not None:
        config = RuntimeConfig.from_yaml(config_path)
    else:
        config = RuntimeConfig()
        for default_path in default_config_paths():
            if default_path.exists():
                config = RuntimeConfig.from_yaml(default_path)
                break

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    defaults = RuntimeConfig()
    return f"""# Quantum vault configuration
# Environment variables (QVAULT_* prefix) override these values.

program:
  program_id: "{defaults.program.program_id}"

compute:
  default_unit_limit: {defaults.compute.default_unit_limit}
  max_unit_limit: {defaults.compute.max_unit_limit}
  invoke_cost: {defaults.compute.invoke_cost}
  host_call_cost: {defaults.compute.host_call_cost}
  derive_address_cost: {defaults.compute.derive_address_cost}
  sha256_base_cost: {defaults.compute.sha256_base_cost}
  sha256_byte_cost: {defaults.compute.sha256_byte_cost}

rent:
  lamports_per_byte_year: {defaults.rent.lamports_per_byte_year}
  exemption_threshold: {defaults.rent.exemption_threshold}
  account_storage_overhead: {defaults.rent.account_storage_overhead}

logging:
  level: INFO
  file: null
"""


__all__ = [
    "DEFAULT_CONFIG_NAME",
    "load_config",
    "get_default_config_template",
]
