"""
PyTest configuration and shared fixtures for the hash ring tests.
"""

import os
import sys
from typing import List

import pytest

# Add src directory to Python path for all tests
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

# Import after path setup
from membership import MembershipManager


class Server:
    """A caller-owned node with a payload, like a real server handle."""

    def __init__(self, server_id, host="localhost", port=8000):
        self.id = server_id
        self.host = host
        self.port = port

    def __repr__(self):
        return f"Server({self.id!r})"


@pytest.fixture
def membership() -> MembershipManager:
    return MembershipManager(replicas=50)


@pytest.fixture
def servers() -> List[Server]:
    return [Server(i, port=8000 + i) for i in range(10)]


@pytest.fixture
def test_keys() -> List[str]:
    """Keys used to compare lookups before and after a membership change."""
    return [f"key_{i}" for i in range(2000)]


# Pytest markers for organizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "slow: Slow running tests (large rings)"
    )
