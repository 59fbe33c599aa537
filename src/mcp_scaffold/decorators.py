"""Decorators for marking methods as MCP tools and resources."""

from typing import Any, Callable, Optional


def mcp_tool(
    *,
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> Callable[[Callable], Callable]:
    """Decorator to mark a method as an MCP tool.

    The method is left callable as-is; ``BaseMCPServer`` finds it at startup
    and registers a descriptor built from its signature and docstring.

    Args:
        name: Optional custom name for the tool. If not provided, uses the method name.
        description: Optional description override. If not provided, uses the method's docstring.

    Example:
        @mcp_tool()
        async def add_numbers(self, a: float, b: float) -> float:
            '''Add two numbers together.'''
            return a + b
    """
    def decorator(func: Callable) -> Callable:
        func._mcp_tool = True  # type: ignore
        func._mcp_tool_name = name or func.__name__  # type: ignore
        func._mcp_tool_description = description  # type: ignore
        return func

    return decorator


def mcp_resource(
    *,
    uri_template: str,
    name: Optional[str] = None,
    description: Optional[str] = None,
    mime_type: str = "application/json",
) -> Callable[[Callable], Callable]:
    """Decorator to mark a method as an MCP resource.

    Each ``{param}`` placeholder in the template is captured from the
    requested URI and passed to the method as a string keyword argument.

    Args:
        uri_template: URI, optionally with ``{param}`` placeholders
        name: Resource name, defaults to the method name
        description: Description override, defaults to the first docstring line
        mime_type: MIME type of the resource content

    Example:
        @mcp_resource(uri_template="template://example-data/{id}", name="example_data")
        async def example_data_resource(self, id: str) -> ExampleData:
            ...
    """
    def decorator(func: Callable) -> Callable:
        func._mcp_resource = True  # type: ignore
        func._mcp_resource_uri = uri_template  # type: ignore
        func._mcp_resource_name = name or func.__name__  # type: ignore
        func._mcp_resource_description = description  # type: ignore
        func._mcp_resource_mime_type = mime_type  # type: ignore
        return func

    return decorator


def is_tool(method: Any) -> bool:
    return getattr(method, "_mcp_tool", False) is True


def is_resource(method: Any) -> bool:
    return getattr(method, "_mcp_resource", False) is True
