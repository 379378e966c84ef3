"""
Pytest configuration and fixtures for guildpanel tests.
"""

import sys
from pathlib import Path

import pytest_asyncio

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from guildpanel.database.db_connection import ConnectionManager  # noqa: E402


@pytest_asyncio.fixture
async def connection(tmp_path):
    """An open ConnectionManager on a throwaway database file."""
    manager = ConnectionManager()
    await manager.open(tmp_path / "storage" / "test.db")
    try:
        yield manager
    finally:
        await manager.close()
