"""Request dispatch: the error boundary between registries and the protocol layer."""

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Union

from .errors import InvalidArgumentError, MCPError
from .resources import ResourceRegistry
from .schema_generator import schema_type_label
from .tools import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolCall:
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResourceRead:
    uri: str


Request = Union[ToolCall, ResourceRead]


@dataclass(frozen=True)
class Success:
    value: Any

    ok = True

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": True, "result": self.value}


@dataclass(frozen=True)
class Failure:
    kind: str
    message: str

    ok = False

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": False, "error": self.message, "kind": self.kind}


Response = Union[Success, Failure]


def to_protocol_value(value: Any) -> Any:
    """Convert a handler result into plain JSON-compatible data.

    Dataclasses become dicts in field declaration order.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_protocol_value(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): to_protocol_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_protocol_value(v) for v in value]
    return value


class Dispatcher:
    """Routes tool calls and resource reads, converting every error into a Failure.

    Each request is handled independently; the dispatcher keeps no state
    between requests, so concurrent ``handle`` calls are safe.
    """

    def __init__(self, tools: ToolRegistry, resources: ResourceRegistry):
        self.tools = tools
        self.resources = resources

    async def handle(self, request: Request) -> Response:
        try:
            if isinstance(request, ToolCall):
                logger.info(f"Calling tool: {request.name} with arguments: {request.arguments}")
                value = await self.tools.invoke(request.name, request.arguments)
            elif isinstance(request, ResourceRead):
                logger.info(f"Reading resource: {request.uri}")
                value = await self.resources.read(request.uri)
            else:
                raise InvalidArgumentError(f"Unsupported request: {request!r}")
            return Success(to_protocol_value(value))
        except MCPError as e:
            # Handler exceptions keep their traceback in the log
            logger.warning(f"Request failed ({e.kind}): {e.message}", exc_info=e.__cause__ is not None)
            return Failure(e.kind, e.message)
        except Exception as e:
            logger.error(f"Unexpected error handling {request!r}: {e}", exc_info=True)
            return Failure("internal_error", str(e) or type(e).__name__)

    async def handle_message(self, message: Mapping[str, Any]) -> Dict[str, Any]:
        """Handle a request envelope and return the response envelope.

        ``{"tool": name, "arguments": {...}}`` calls a tool and ``{"uri": uri}``
        reads a resource. The result is ``{"ok": true, "result": ...}`` or
        ``{"ok": false, "error": message, "kind": tag}``.
        """
        if "tool" in message:
            arguments = message.get("arguments") or {}
            if not isinstance(arguments, Mapping):
                return Failure(InvalidArgumentError.kind, "Tool arguments must be an object").to_dict()
            request: Request = ToolCall(str(message["tool"]), dict(arguments))
        elif "uri" in message:
            request = ResourceRead(str(message["uri"]))
        else:
            return Failure(InvalidArgumentError.kind, "Request must contain 'tool' or 'uri'").to_dict()
        response = await self.handle(request)
        return response.to_dict()

    def metadata(self) -> Dict[str, Any]:
        """Registered tools with parameter schemas, and resources with MIME types."""
        tools = []
        for descriptor in self.tools:
            properties = descriptor.input_schema.get("properties", {})
            tools.append(
                {
                    "name": descriptor.name,
                    "description": descriptor.description,
                    "parameters": [
                        {
                            "name": param.name,
                            "type": schema_type_label(properties.get(param.name, {})),
                            "required": param.required,
                            "default": to_protocol_value(param.default) if param.has_default else None,
                        }
                        for param in descriptor.parameters
                    ],
                    "inputSchema": descriptor.input_schema,
                }
            )

        resources = [
            {
                "uriTemplate": descriptor.uri_template,
                "name": descriptor.name,
                "description": descriptor.description,
                "mimeType": descriptor.mime_type,
            }
            for descriptor in self.resources
        ]
        return {"tools": tools, "resources": resources}
