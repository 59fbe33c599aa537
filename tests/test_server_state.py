"""Tests for the shared server state."""

import asyncio
from unittest.mock import patch

import pytest

from mcp_scaffold.state import ServerState


class TestServerState:

    def test_counts(self):
        """Test registration counts."""
        state = ServerState(tools_count=6, resources_count=3)
        assert state.tools_count == 6
        assert state.resources_count == 3

    def test_uptime(self):
        """Test uptime."""
        with patch("mcp_scaffold.state.time.monotonic", return_value=100.0):
            state = ServerState()
        with patch("mcp_scaffold.state.time.monotonic", return_value=142.7):
            assert state.uptime_seconds == 42

    @pytest.mark.asyncio
    async def test_store_operations(self):
        """Test store operations."""
        state = ServerState()
        await state.put(1, "one")
        assert await state.get(1) == "one"
        assert await state.get(2) is None
        assert await state.get(2, "default") == "default"
        assert await state.keys() == [1]
        assert await state.delete(1) is True
        assert await state.delete(1) is False

    @pytest.mark.asyncio
    async def test_concurrent_writers(self):
        """Test concurrent writers."""
        state = ServerState()

        async def writer(i):
            await asyncio.sleep(0)
            await state.put(i, i * i)

        await asyncio.gather(*(writer(i) for i in range(50)))
        assert sorted(await state.keys()) == list(range(50))
        assert await state.get(7) == 49
