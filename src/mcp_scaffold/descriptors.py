"""Static metadata registered for tools and resources."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple


class _Missing:
    """Marker for a parameter declared without a default."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


@dataclass(frozen=True)
class ParameterSpec:
    """One declared parameter of a tool handler."""

    name: str
    type_hint: Any
    required: bool
    default: Any = MISSING
    description: Optional[str] = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


@dataclass(frozen=True)
class ToolDescriptor:
    """A named tool: its ordered parameter list and the handler to call."""

    name: str
    handler: Callable[..., Any]
    parameters: Tuple[ParameterSpec, ...] = ()
    description: str = ""
    input_schema: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ResourceDescriptor:
    """A resource addressed by a URI template such as ``scheme://items/{id}``."""

    uri_template: str
    name: str
    handler: Callable[..., Any]
    mime_type: str = "application/json"
    description: str = ""

    @property
    def is_templated(self) -> bool:
        return "{" in self.uri_template
