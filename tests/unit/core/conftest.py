"""Shared fixtures for core unit tests"""

import pytest

from vaultlink.vault.memory_vault import MemoryVault


@pytest.fixture(name="vault")
def vault_fixture():
    return MemoryVault(vault_name="My Vault")
