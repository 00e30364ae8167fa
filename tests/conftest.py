"""
Shared pytest configuration and fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path to enable importing project modules
# This allows tests to import from 'core', 'sql', 'securedb', etc. without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests - isolated function-level tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interactions")
    config.addinivalue_line("markers", "smoke: Smoke tests - basic functionality checks")
    config.addinivalue_line("markers", "edge_case: Edge case tests - boundary conditions")
    config.addinivalue_line("markers", "system: System tests - full system behavior tests")


SECUREDB_ENV_VARS = [
    'SECUREDB_URL', 'SECUREDB_DRIVER', 'SECUREDB_HOST', 'SECUREDB_PORT', 'SECUREDB_USER',
    'SECUREDB_PASSWORD', 'SECUREDB_DATABASE', 'SECUREDB_CHARSET', 'SECUREDB_LOG_LEVEL',
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every SECUREDB_* variable (including ones loaded from .env) so defaults apply."""
    for name in SECUREDB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
