"""Template MCP server built on the annotation-based scaffold.

Replace the demo tools and resources with your own. Methods marked with
@mcp_tool become tools and methods marked with @mcp_resource become
resources; everything else on the class is private to the server.
"""

import logging
import random
from typing import List, Optional

from mcp_scaffold import BaseMCPServer, mcp_resource, mcp_tool

from . import config
from .models import ExampleData, ServerConfig, ServerStatus

logger = logging.getLogger(__name__)

SUPPORTED_OPERATIONS = ("count", "join", "reverse")
MAX_ID = 2 ** 64 - 1


def resolve_log_level(name: str) -> int:
    """Map a level name such as "debug" to its number, INFO when unknown."""
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        return logging.INFO
    return level


class TemplateMCPServer(BaseMCPServer):
    """Demo server with echo, math and list-processing tools."""

    def __init__(self, log_level: str = config.LOG_LEVEL):
        super().__init__(
            config.SERVER_NAME,
            config.SERVER_VERSION,
            log_level=resolve_log_level(log_level),
            max_concurrent_requests=config.MAX_CONCURRENT_REQUESTS,
        )

    @mcp_tool()
    async def get_status(self) -> str:
        """Get server status and basic information.

        This is a simple tool that requires no parameters and returns
        a status message about the server.
        """
        return "Template MCP Server is running and ready to serve requests"

    @mcp_tool()
    async def echo(self, message: str, prefix: Optional[str] = None) -> str:
        """Echo back a message with optional prefix.

        Args:
            message: The message to echo back
            prefix: Optional prefix to add to the message
        """
        if prefix is None:
            return f"Echo: {message}"
        return f"{prefix}: {message}"

    @mcp_tool()
    async def add_numbers(self, a: float, b: float) -> float:
        """Add two numbers together.

        Args:
            a: First number
            b: Second number
        """
        return a + b

    @mcp_tool()
    async def create_data(
        self,
        name: str,
        value: float,
        tags: Optional[List[str]] = None,
    ) -> ExampleData:
        """Create example data.

        The entry is kept in the server's data store and can be read back
        through the example_data resource.

        Args:
            name: Name for the data entry
            value: Numeric value
            tags: Optional list of tags
        """
        data = ExampleData(
            id=random.getrandbits(64),
            name=name,
            value=value,
            tags=tags or [],
        )
        await self.state.put(data.id, data)
        logger.debug(f"Stored example data {data.id}")
        return data

    @mcp_tool()
    async def process_list(self, items: List[str], operation: str) -> str:
        """Process a list of items.

        Args:
            items: List of strings to process
            operation: Operation to perform ("count", "join", "reverse")
        """
        if operation == "count":
            return f"List contains {len(items)} items"
        elif operation == "join":
            return ", ".join(items)
        elif operation == "reverse":
            return ", ".join(reversed(items))
        raise ValueError(
            f"Unknown operation: {operation}. Supported: {', '.join(SUPPORTED_OPERATIONS)}"
        )

    @mcp_tool()
    async def example_with_error(self, should_fail: bool) -> str:
        """Example of a tool that might fail.

        Args:
            should_fail: If true, the tool will return an error
        """
        if should_fail:
            raise RuntimeError("This tool was asked to fail")
        return "Tool executed successfully"

    # Resources - read-only data addressed by URI

    @mcp_resource(
        uri_template="template://server-status",
        name="server_status",
        description="Current server status and statistics",
    )
    async def server_status_resource(self) -> ServerStatus:
        """Get server status information."""
        return ServerStatus(
            name=self.server_name,
            version=self.server_version,
            uptime_seconds=self.state.uptime_seconds,
            tools_count=self.state.tools_count,
            resources_count=self.state.resources_count,
        )

    @mcp_resource(
        uri_template="template://server-config",
        name="server_config",
        description="Server configuration settings",
    )
    async def server_config_resource(self) -> ServerConfig:
        """Get server configuration."""
        return ServerConfig(
            max_concurrent_requests=config.MAX_CONCURRENT_REQUESTS,
            timeout_seconds=config.REQUEST_TIMEOUT_SECONDS,
            debug_mode=config.DEBUG_MODE,
            supported_formats=list(config.SUPPORTED_FORMATS),
        )

    @mcp_resource(
        uri_template="template://example-data/{id}",
        name="example_data",
        description="Example data entry by ID",
    )
    async def example_data_resource(self, id: str) -> ExampleData:
        """Get example data by ID.

        Returns the entry stored by create_data when there is one, otherwise
        generated data for the ID. An ID that is not an unsigned 64-bit
        number reads as 1.
        """
        id_num = self._parse_id(id)

        stored = await self.state.get(id_num)
        if stored is not None:
            return stored

        return ExampleData(
            id=id_num,
            name=f"Example Item {id_num}",
            value=id_num * 1.5,
            tags=["example", "template", f"id-{id_num}"],
        )

    @staticmethod
    def _parse_id(raw_id: str) -> int:
        # Unsigned 64-bit ids written in ASCII digits; anything else reads as 1
        if not (raw_id.isascii() and raw_id.isdigit()):
            return 1
        id_num = int(raw_id)
        return id_num if id_num <= MAX_ID else 1


def main() -> None:
    """Main entry point for the template MCP server."""
    server = TemplateMCPServer()
    server.main()


if __name__ == "__main__":
    main()
