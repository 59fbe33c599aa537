"""Base class for annotation-based MCP servers."""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, Iterator, List, Optional, Tuple

import mcp.server.stdio
from mcp import types
from mcp.server import NotificationOptions, Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.models import InitializationOptions
from mcp.shared.exceptions import McpError

from .decorators import is_resource, is_tool
from .descriptors import ResourceDescriptor
from .dispatcher import Dispatcher, Failure, Request, ResourceRead, Response, ToolCall
from .errors import NotFoundError
from .resources import ResourceRegistry
from .state import ServerState
from .tools import ToolRegistry, build_tool_descriptor

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"

# JSON-RPC error code MCP uses for unknown resources
RESOURCE_NOT_FOUND = -32002


class BaseMCPServer:
    """Base class for creating MCP servers using annotated methods.

    Inherit from this class and use the @mcp_tool and @mcp_resource decorators
    to mark methods that should be exposed. Discovery runs once in
    ``__init__``; the registries are read-only afterwards.

    Example:
        class NotesServer(BaseMCPServer):
            def __init__(self):
                super().__init__("notes", "1.0.0")

            @mcp_tool()
            async def add_note(self, text: str, tags: Optional[List[str]] = None) -> str:
                '''Store a note.

                Args:
                    text: Note body
                    tags: Optional list of tags
                '''
                await self.state.put(text, tags or [])
                return "Note stored"

            @mcp_resource(uri_template="notes://{text}", name="note")
            async def note(self, text: str) -> List[str]:
                '''Tags of a stored note.'''
                return await self.state.get(text, [])
    """

    def __init__(
        self,
        server_name: str = "mcp-server",
        server_version: str = "0.1.0",
        tool_prefix: str = "",
        log_level: int = logging.INFO,
        max_concurrent_requests: Optional[int] = None,
    ):
        """Initialize the MCP server.

        Args:
            server_name: Name of the MCP server
            server_version: Version of the MCP server
            tool_prefix: Prefix to add to all tool names (e.g., "calc_" results in "calc_add")
            log_level: Root logging level
            max_concurrent_requests: Limit on requests served at once, unlimited if None
        """
        self.server_name = server_name
        self.server_version = server_version
        self.tool_prefix = tool_prefix
        self.server = Server(server_name)
        self.tools = ToolRegistry()
        self.resources = ResourceRegistry()

        logging.basicConfig(level=log_level, format=LOG_FORMAT, stream=sys.stderr)

        self._discover()

        self.state = ServerState(tools_count=len(self.tools), resources_count=len(self.resources))
        self.dispatcher = Dispatcher(self.tools, self.resources)
        self._request_slots = asyncio.Semaphore(max_concurrent_requests) if max_concurrent_requests else None

        self._register_handlers()

    def _decorated_members(self) -> Iterator[Tuple[str, Any]]:
        """Bound methods in class definition order, base classes first."""
        members: Dict[str, Any] = {}
        for klass in reversed(type(self).__mro__):
            # Overrides keep the position of the first definition
            members.update(vars(klass))
        for attr_name, value in members.items():
            if is_tool(value) or is_resource(value):
                yield attr_name, getattr(self, attr_name)

    def _discover(self) -> None:
        """Register methods decorated with @mcp_tool or @mcp_resource."""
        for _, method in self._decorated_members():
            if is_tool(method):
                tool_name = f"{self.tool_prefix}{method._mcp_tool_name}"
                descriptor = build_tool_descriptor(method, tool_name, method._mcp_tool_description)
                self.tools.register(descriptor)
                logging.info(f"Discovered MCP tool: {tool_name}")
            if is_resource(method):
                description = method._mcp_resource_description
                if not description and method.__doc__:
                    description = method.__doc__.strip().split("\n")[0]
                self.resources.register(
                    ResourceDescriptor(
                        uri_template=method._mcp_resource_uri,
                        name=method._mcp_resource_name,
                        handler=method,
                        mime_type=method._mcp_resource_mime_type,
                        description=description or "",
                    )
                )
                logging.info(f"Discovered MCP resource: {method._mcp_resource_uri}")

    async def list_tools(self) -> List[types.Tool]:
        """List all available tools."""
        tools = [
            types.Tool(
                name=descriptor.name,
                description=descriptor.description,
                inputSchema=descriptor.input_schema,
            )
            for descriptor in self.tools
        ]
        logging.info(f"Listed {len(tools)} tools")
        return tools

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
        """Run a tool and render the response as text content."""
        response = await self._dispatch(ToolCall(name, dict(arguments or {})))
        if isinstance(response, Failure):
            return [types.TextContent(type="text", text=f"Error: {response.message}")]
        return [types.TextContent(type="text", text=self._render(response.value))]

    async def list_resources(self) -> List[types.Resource]:
        """List resources with a fixed URI."""
        return [
            types.Resource(
                uri=descriptor.uri_template,
                name=descriptor.name,
                description=descriptor.description,
                mimeType=descriptor.mime_type,
            )
            for descriptor in self.resources
            if not descriptor.is_templated
        ]

    async def list_resource_templates(self) -> List[types.ResourceTemplate]:
        """List parameterized resources."""
        return [
            types.ResourceTemplate(
                uriTemplate=descriptor.uri_template,
                name=descriptor.name,
                description=descriptor.description,
                mimeType=descriptor.mime_type,
            )
            for descriptor in self.resources
            if descriptor.is_templated
        ]

    async def read_resource(self, uri: str) -> List[ReadResourceContents]:
        """Read a resource.

        Raises:
            McpError: If the URI matches no resource or the handler fails
        """
        uri = str(uri)
        response = await self._dispatch(ResourceRead(uri))
        if isinstance(response, Failure):
            code = RESOURCE_NOT_FOUND if response.kind == NotFoundError.kind else types.INTERNAL_ERROR
            raise McpError(types.ErrorData(code=code, message=response.message, data={"uri": uri}))

        resolved = self.resources.resolve(uri)
        mime_type = resolved[0].mime_type if resolved else "application/json"
        if isinstance(response.value, str) and mime_type != "application/json":
            content = response.value
        else:
            content = self._render(response.value, force_json=True)
        return [ReadResourceContents(content=content, mime_type=mime_type)]

    async def _dispatch(self, request: Request) -> Response:
        if self._request_slots is None:
            return await self.dispatcher.handle(request)
        async with self._request_slots:
            return await self.dispatcher.handle(request)

    @staticmethod
    def _render(value: Any, force_json: bool = False) -> str:
        if isinstance(value, str) and not force_json:
            return value
        return json.dumps(value, indent=2)

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> List[types.Tool]:
            return await self.list_tools()

        @self.server.call_tool()
        async def handle_call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
            return await self.call_tool(name, arguments)

        @self.server.list_resources()
        async def handle_list_resources() -> List[types.Resource]:
            return await self.list_resources()

        @self.server.list_resource_templates()
        async def handle_list_resource_templates() -> List[types.ResourceTemplate]:
            return await self.list_resource_templates()

        @self.server.read_resource()
        async def handle_read_resource(uri: Any) -> List[ReadResourceContents]:
            return await self.read_resource(str(uri))

        @self.server.list_prompts()
        async def handle_list_prompts() -> List[types.Prompt]:
            # Override in subclass if prompts are needed
            return []

    async def run(self) -> None:
        """Run the MCP server over stdio."""
        logging.info(
            f"Starting {self.server_name} v{self.server_version} "
            f"({self.state.tools_count} tools, {self.state.resources_count} resources)"
        )

        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=self.server_name,
                    server_version=self.server_version,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )

    def describe(self) -> None:
        """Print human-readable descriptions of all tools and resources."""
        metadata = self.dispatcher.metadata()

        print(f"\n{self.server_name} v{self.server_version}")
        print("=" * 60)
        print("\nAvailable Tools:\n")

        for tool in sorted(metadata["tools"], key=lambda t: t["name"]):
            print(f"Tool: {tool['name']}")
            print(f"  Description: {tool['description'] or 'No description available'}")

            properties = tool["inputSchema"].get("properties", {})
            if tool["parameters"]:
                print("  Parameters:")
                for param in tool["parameters"]:
                    requirement = "(required)" if param["required"] else "(optional)"
                    print(f"    - {param['name']}: {param['type']} {requirement}")
                    print(f"      {properties.get(param['name'], {}).get('description', 'No description')}")
            else:
                print("  Parameters: None")

            print()

        print("Available Resources:\n")
        for resource in metadata["resources"]:
            print(f"Resource: {resource['uriTemplate']} ({resource['mimeType']})")
            print(f"  Name: {resource['name']}")
            print(f"  Description: {resource['description'] or 'No description available'}")
            print()

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command line arguments.

        Args:
            args: Optional list of arguments to parse. If None, uses sys.argv.

        Returns:
            Parsed arguments namespace
        """
        parser = argparse.ArgumentParser(
            prog=self.server_name,
            description=f"{self.server_name} - MCP server",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--describe",
            action="store_true",
            help="Show available tools and resources and exit",
        )
        parser.add_argument(
            "--log-level",
            choices=["DEBUG", "INFO", "WARNING", "ERROR"],
            default=None,
            help="Override the logging level",
        )

        # Allow subclasses to add their own arguments
        self.add_arguments(parser)

        return parser.parse_args(args)

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Override in subclasses to add custom command line arguments.

        Args:
            parser: The argument parser to add arguments to
        """
        pass

    def main(self, args: Optional[List[str]] = None) -> None:
        """Main entry point for the server.

        Args:
            args: Optional list of command line arguments. If None, uses sys.argv.
        """
        parsed_args = self.parse_args(args)

        if parsed_args.log_level:
            logging.getLogger().setLevel(parsed_args.log_level)

        if parsed_args.describe:
            self.describe()
            sys.exit(0)

        asyncio.run(self.run())
