"""Tests for the tool registry."""

from typing import List, Optional

import pytest

from mcp_scaffold.errors import (
    DuplicateRegistrationError,
    InvalidArgumentError,
    ToolFailedError,
    UnknownToolError,
)
from mcp_scaffold.tools import ToolRegistry, build_tool_descriptor


async def greet(name: str, greeting: str = "Hello", suffix: Optional[str] = None) -> str:
    """Greet someone.

    Args:
        name: Who to greet
        greeting: Greeting word
        suffix: Optional trailing text
    """
    if suffix is None:
        return f"{greeting}, {name}"
    return f"{greeting}, {name}{suffix}"


async def total(values: List[float]) -> float:
    """Sum a list of numbers."""
    return sum(values)


def shout(text: str) -> str:
    return text.upper()


async def explode() -> str:
    """Always fails."""
    raise ValueError("boom")


class TestToolRegistry:

    @pytest.fixture
    def registry(self):
        registry = ToolRegistry()
        registry.register(build_tool_descriptor(greet))
        registry.register(build_tool_descriptor(total, name="sum-values"))
        registry.register(build_tool_descriptor(shout))
        registry.register(build_tool_descriptor(explode))
        return registry

    def test_lookup_registered_tools(self, registry):
        """Test lookup registered tools."""
        for name in ["greet", "sum-values", "shout", "explode"]:
            descriptor = registry.lookup(name)
            assert descriptor is not None
            assert descriptor.name == name
        assert registry.names() == ["greet", "sum-values", "shout", "explode"]
        assert len(registry) == 4

    def test_lookup_unknown_tool(self, registry):
        """Test lookup unknown tool."""
        assert registry.lookup("missing") is None
        assert "missing" not in registry

    def test_descriptor_metadata(self, registry):
        """Test descriptor metadata."""
        descriptor = registry.lookup("greet")
        assert descriptor.description == "Greet someone."
        assert [p.name for p in descriptor.parameters] == ["name", "greeting", "suffix"]
        assert descriptor.input_schema["required"] == ["name"]
        assert descriptor.input_schema["properties"]["name"]["description"] == "Who to greet"
        assert registry.lookup("shout").description == "Tool: shout"

    def test_duplicate_registration_fails(self, registry):
        """Test duplicate registration fails."""
        with pytest.raises(DuplicateRegistrationError, match="greet"):
            registry.register(build_tool_descriptor(greet))

    @pytest.mark.asyncio
    async def test_invoke_with_defaults(self, registry):
        """Test invoke with defaults."""
        assert await registry.invoke("greet", {"name": "Ada"}) == "Hello, Ada"
        assert await registry.invoke("greet", {"name": "Ada", "greeting": "Hi", "suffix": "!"}) == "Hi, Ada!"

    @pytest.mark.asyncio
    async def test_invoke_sync_handler(self, registry):
        """Test invoke sync handler."""
        assert await registry.invoke("shout", {"text": "hi"}) == "HI"

    @pytest.mark.asyncio
    async def test_unknown_extra_arguments_are_ignored(self, registry):
        """Test unknown extra arguments are ignored."""
        assert await registry.invoke("greet", {"name": "Ada", "color": "blue"}) == "Hello, Ada"

    @pytest.mark.asyncio
    async def test_invoke_unknown_tool(self, registry):
        """Test invoke unknown tool."""
        with pytest.raises(UnknownToolError, match="Unknown tool: nope"):
            await registry.invoke("nope", {})

    @pytest.mark.asyncio
    async def test_missing_required_parameter(self, registry):
        """Test missing required parameter."""
        with pytest.raises(InvalidArgumentError, match="Missing required parameter: name"):
            await registry.invoke("greet", {})
        with pytest.raises(InvalidArgumentError):
            await registry.invoke("greet", None)

    @pytest.mark.asyncio
    async def test_type_mismatch(self, registry):
        """Test type mismatch."""
        with pytest.raises(InvalidArgumentError, match="values"):
            await registry.invoke("sum-values", {"values": ["1", "2"]})

    @pytest.mark.asyncio
    async def test_integers_decode_as_floats(self, registry):
        """Test integers decode as floats."""
        assert await registry.invoke("sum-values", {"values": [1, 2.5]}) == 3.5

    @pytest.mark.asyncio
    async def test_handler_failure_becomes_tool_failed(self, registry):
        """Test handler failure becomes tool failed."""
        with pytest.raises(ToolFailedError, match="boom") as excinfo:
            await registry.invoke("explode")
        assert isinstance(excinfo.value.__cause__, ValueError)
