"""
Pytest configuration and shared fixtures for vault tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_address = _common.make_address
make_privkey = _common.make_privkey
make_ledger = _common.make_ledger
make_funded_payer = _common.make_funded_payer
open_vault = _common.open_vault


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _isolate_default_config(monkeypatch):
    """Keep QVAULT_* variables and cached config out of every test."""
    from core.config.runtime import set_default_config

    for name in (
        "QVAULT_PROGRAM_ID",
        "QVAULT_COMPUTE_UNIT_LIMIT",
        "QVAULT_MAX_COMPUTE_UNIT_LIMIT",
        "QVAULT_LOG_LEVEL",
        "QVAULT_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    set_default_config(None)
    yield
    set_default_config(None)


@pytest.fixture
def ledger():
    """Provide a ledger with the vault program deployed."""
    return make_ledger()


@pytest.fixture
def payer(ledger):
    """Provide a system account holding 10 SOL."""
    return make_funded_payer(ledger)


@pytest.fixture
def privkey():
    """Provide a deterministic one-time key."""
    return make_privkey()


@pytest.fixture
def funded_vault(ledger, payer, privkey):
    """Provide a vault holding rent plus 1,000,000 lamports."""
    return open_vault(ledger, payer, privkey, fund=1_000_000)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_failed_with():
    """Helper to assert a receipt failed with a specific error code."""
    def _assert(receipt, code: str):
        assert not receipt.ok, f"Expected failure with {code}, transaction committed"
        assert receipt.error_code == code, (
            f"Expected {code}, got {receipt.error_code}\n{receipt.pretty_logs()}"
        )
    return _assert
