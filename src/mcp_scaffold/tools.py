"""Tool registry: name -> descriptor, with argument decoding and invocation."""

import inspect
import logging
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

from .descriptors import ToolDescriptor
from .errors import (
    DuplicateRegistrationError,
    InvalidArgumentError,
    MCPError,
    ToolFailedError,
    UnknownToolError,
)
from .schema_generator import decode_value, extract_parameter_schema, extract_parameters

logger = logging.getLogger(__name__)


def build_tool_descriptor(
    handler: Callable[..., Any],
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> ToolDescriptor:
    """Wrap a handler with the descriptor derived from its signature and docstring.

    Args:
        handler: Sync or async callable implementing the tool
        name: Tool name, defaults to the handler's name
        description: Description override, defaults to the first docstring line
    """
    if not description and handler.__doc__:
        description = handler.__doc__.strip().split("\n")[0]

    parameters = extract_parameters(handler)
    tool_name = name or handler.__name__
    return ToolDescriptor(
        name=tool_name,
        handler=handler,
        parameters=tuple(parameters),
        description=description or f"Tool: {tool_name}",
        input_schema=extract_parameter_schema(parameters),
    )


class ToolRegistry:
    """Registered tools in registration order.

    Populated once at startup; lookups afterwards are read-only and need
    no locking.
    """

    def __init__(self) -> None:
        self._tools: Dict[str, ToolDescriptor] = {}

    def register(self, descriptor: ToolDescriptor) -> None:
        if descriptor.name in self._tools:
            raise DuplicateRegistrationError(f"Tool already registered: {descriptor.name}")
        self._tools[descriptor.name] = descriptor
        logger.debug(f"Registered tool {descriptor.name}")

    def lookup(self, name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def names(self) -> List[str]:
        return list(self._tools)

    def decode_arguments(
        self, descriptor: ToolDescriptor, arguments: Optional[Mapping[str, Any]]
    ) -> Dict[str, Any]:
        """Decode raw arguments against the descriptor's parameters.

        Missing optional parameters resolve to their default, or None for an
        ``Optional`` parameter without one. Unknown extra arguments are ignored.

        Raises:
            InvalidArgumentError: On a missing required parameter or a type mismatch
        """
        arguments = arguments or {}
        if not isinstance(arguments, Mapping):
            raise InvalidArgumentError("Tool arguments must be an object")

        decoded: Dict[str, Any] = {}
        for param in descriptor.parameters:
            if param.name in arguments:
                decoded[param.name] = decode_value(arguments[param.name], param.type_hint, param.name)
            elif param.required:
                raise InvalidArgumentError(f"Missing required parameter: {param.name}")
            elif param.has_default:
                decoded[param.name] = param.default
            else:
                decoded[param.name] = None

        ignored = set(arguments) - set(decoded)
        if ignored:
            logger.debug(f"Ignoring unknown arguments for {descriptor.name}: {sorted(ignored)}")
        return decoded

    async def invoke(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Any:
        """Decode arguments, call the handler and return its result.

        Raises:
            UnknownToolError: If no tool has this name
            InvalidArgumentError: If the arguments do not fit the parameters
            ToolFailedError: If the handler raises
        """
        descriptor = self.lookup(name)
        if descriptor is None:
            raise UnknownToolError(f"Unknown tool: {name}")

        kwargs = self.decode_arguments(descriptor, arguments)

        try:
            result = descriptor.handler(**kwargs)
            if inspect.isawaitable(result):
                result = await result
        except MCPError:
            raise
        except Exception as e:
            raise ToolFailedError(str(e) or type(e).__name__) from e
        return result
