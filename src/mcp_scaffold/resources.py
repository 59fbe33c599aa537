"""Resource registry: URI templates resolved against concrete URIs."""

import inspect
import logging
import re
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .descriptors import ResourceDescriptor
from .errors import DuplicateRegistrationError, MCPError, NotFoundError, ResourceFailedError

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


class UriTemplate:
    """A URI with ``{param}`` placeholders, each matching one path segment.

    Example:
        >>> UriTemplate("template://example-data/{id}").match("template://example-data/42")
        {'id': '42'}
    """

    def __init__(self, template: str):
        self.template = template
        self.params: List[str] = _PLACEHOLDER.findall(template)
        if len(set(self.params)) != len(self.params):
            raise ValueError(f"Duplicate placeholder in URI template: {template}")

        pattern = []
        position = 0
        for match in _PLACEHOLDER.finditer(template):
            pattern.append(re.escape(template[position:match.start()]))
            pattern.append(f"(?P<{match.group(1)}>[^/]+)")
            position = match.end()
        pattern.append(re.escape(template[position:]))
        self._regex = re.compile("".join(pattern))

    @property
    def structure(self) -> str:
        """The template with placeholder names erased.

        Two templates with the same structure match exactly the same URIs.
        """
        return _PLACEHOLDER.sub("{}", self.template)

    def match(self, uri: str) -> Optional[Dict[str, str]]:
        """Return the captured parameters, or None if the URI does not fit."""
        match = self._regex.fullmatch(uri)
        if match is None and uri.endswith("/"):
            match = self._regex.fullmatch(uri.rstrip("/"))
        if match is None:
            return None
        return match.groupdict()

    def __repr__(self) -> str:
        return f"UriTemplate({self.template!r})"


class ResourceRegistry:
    """Registered resources; the first registered template that matches wins."""

    def __init__(self) -> None:
        self._entries: List[Tuple[UriTemplate, ResourceDescriptor]] = []

    def register(self, descriptor: ResourceDescriptor) -> None:
        template = UriTemplate(descriptor.uri_template)
        for existing, existing_descriptor in self._entries:
            if existing.structure == template.structure:
                raise DuplicateRegistrationError(
                    f"URI template {descriptor.uri_template} collides with "
                    f"{existing_descriptor.uri_template}"
                )

        accepted = inspect.signature(descriptor.handler).parameters
        takes_any = any(p.kind is inspect.Parameter.VAR_KEYWORD for p in accepted.values())
        missing = [p for p in template.params if p not in accepted]
        if missing and not takes_any:
            raise ValueError(
                f"Handler for {descriptor.uri_template} does not accept: {', '.join(missing)}"
            )

        self._entries.append((template, descriptor))
        logger.debug(f"Registered resource {descriptor.uri_template}")

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ResourceDescriptor]:
        return (descriptor for _, descriptor in self._entries)

    def resolve(self, uri: str) -> Optional[Tuple[ResourceDescriptor, Dict[str, str]]]:
        """Find the descriptor for a URI and the parameters captured from it."""
        for template, descriptor in self._entries:
            params = template.match(uri)
            if params is not None:
                return descriptor, params
        return None

    async def read(self, uri: str) -> Any:
        """Resolve the URI and return the handler's value.

        Raises:
            NotFoundError: If no template matches
            ResourceFailedError: If the handler raises
        """
        resolved = self.resolve(uri)
        if resolved is None:
            raise NotFoundError(f"Resource not found: {uri}")

        descriptor, params = resolved
        handler: Callable[..., Any] = descriptor.handler
        try:
            result = handler(**params)
            if inspect.isawaitable(result):
                result = await result
        except MCPError:
            raise
        except Exception as e:
            raise ResourceFailedError(str(e) or type(e).__name__) from e
        return result
