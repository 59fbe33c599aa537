"""Error taxonomy for tool calls and resource reads.

Registries raise these exceptions; the dispatcher catches them and turns
them into failure responses carrying the ``kind`` tag and message.
"""


class MCPError(Exception):
    """Base class for errors that map onto a failure response."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownToolError(MCPError):
    """Raised when a tool call names a tool that is not registered."""

    kind = "unknown_tool"


class InvalidArgumentError(MCPError):
    """Raised when a required parameter is missing or a value fails to decode.

    The message names the offending parameter.
    """

    kind = "invalid_argument"


class ToolFailedError(MCPError):
    """Raised when a tool handler itself fails."""

    kind = "tool_failed"


class NotFoundError(MCPError):
    """Raised when a resource URI matches no registered template."""

    kind = "not_found"


class ResourceFailedError(MCPError):
    """Raised when a resource handler fails while producing its value."""

    kind = "resource_failed"


class DuplicateRegistrationError(Exception):
    """Raised at startup when a tool name or URI template is registered twice.

    This is a programming error in the server definition, not a request
    failure, so it does not derive from MCPError.
    """

    pass
