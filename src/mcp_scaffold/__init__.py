"""MCP Scaffold - build MCP tool/resource servers from annotated methods.

Define a class with methods marked by ``@mcp_tool`` and ``@mcp_resource``;
the base server discovers them at startup, registers descriptors in the
tool and resource registries, and serves them through a dispatcher that
turns every failure into a structured response.
"""

from .base import BaseMCPServer
from .decorators import mcp_resource, mcp_tool
from .descriptors import ParameterSpec, ResourceDescriptor, ToolDescriptor
from .dispatcher import Dispatcher, Failure, ResourceRead, Success, ToolCall
from .errors import (
    DuplicateRegistrationError,
    InvalidArgumentError,
    MCPError,
    NotFoundError,
    ResourceFailedError,
    ToolFailedError,
    UnknownToolError,
)
from .resources import ResourceRegistry, UriTemplate
from .state import ServerState
from .tools import ToolRegistry, build_tool_descriptor

__all__ = [
    "BaseMCPServer",
    "mcp_tool",
    "mcp_resource",
    "ParameterSpec",
    "ToolDescriptor",
    "ResourceDescriptor",
    "ToolRegistry",
    "build_tool_descriptor",
    "ResourceRegistry",
    "UriTemplate",
    "Dispatcher",
    "ToolCall",
    "ResourceRead",
    "Success",
    "Failure",
    "ServerState",
    "MCPError",
    "UnknownToolError",
    "InvalidArgumentError",
    "ToolFailedError",
    "NotFoundError",
    "ResourceFailedError",
    "DuplicateRegistrationError",
]
