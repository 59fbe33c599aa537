"""Tests for URI templates and the resource registry."""

import pytest

from mcp_scaffold.descriptors import ResourceDescriptor
from mcp_scaffold.errors import DuplicateRegistrationError, NotFoundError, ResourceFailedError
from mcp_scaffold.resources import ResourceRegistry, UriTemplate


class TestUriTemplate:

    def test_captures_parameter(self):
        """Test captures parameter."""
        template = UriTemplate("template://example-data/{id}")
        assert template.params == ["id"]
        assert template.match("template://example-data/42") == {"id": "42"}

    def test_literal_segments_must_match(self):
        """Test literal segments must match."""
        template = UriTemplate("template://example-data/{id}")
        assert template.match("template://other-data/42") is None
        assert template.match("template://example-data") is None

    def test_parameter_does_not_span_segments(self):
        """Test parameter does not span segments."""
        template = UriTemplate("template://example-data/{id}")
        assert template.match("template://example-data/42/extra") is None

    def test_multiple_parameters(self):
        """Test multiple parameters."""
        template = UriTemplate("files://{owner}/docs/{name}")
        assert template.match("files://ada/docs/notes.txt") == {"owner": "ada", "name": "notes.txt"}

    def test_static_uri_and_trailing_slash(self):
        """Test static uri and trailing slash."""
        template = UriTemplate("template://server-status")
        assert template.match("template://server-status") == {}
        assert template.match("template://server-status/") == {}

    def test_literal_characters_are_escaped(self):
        """Test literal characters are escaped."""
        template = UriTemplate("data://a.b/{x}")
        assert template.match("data://aXb/1") is None

    def test_structure_ignores_parameter_names(self):
        """Test structure ignores parameter names."""
        assert UriTemplate("x://items/{id}").structure == UriTemplate("x://items/{key}").structure

    def test_duplicate_placeholder_rejected(self):
        """Test duplicate placeholder rejected."""
        with pytest.raises(ValueError):
            UriTemplate("x://{id}/{id}")


def make_descriptor(uri_template, name, handler):
    return ResourceDescriptor(uri_template=uri_template, name=name, handler=handler)


class TestResourceRegistry:

    @pytest.fixture
    def registry(self):
        async def status():
            return {"status": "ok"}

        async def item(id: str):
            return {"id": id}

        async def latest_item():
            return {"id": "latest"}

        def broken(id: str):
            raise KeyError(id)

        registry = ResourceRegistry()
        registry.register(make_descriptor("test://status", "status", status))
        registry.register(make_descriptor("test://items/{id}", "item", item))
        registry.register(make_descriptor("test://items/latest", "latest_item", latest_item))
        registry.register(make_descriptor("test://broken/{id}", "broken", broken))
        return registry

    def test_resolve_captures_parameters(self, registry):
        """Test resolve captures parameters."""
        descriptor, params = registry.resolve("test://items/42")
        assert descriptor.name == "item"
        assert params == {"id": "42"}

    def test_first_registered_match_wins(self, registry):
        """Test first registered match wins."""
        descriptor, params = registry.resolve("test://items/latest")
        assert descriptor.name == "item"
        assert params == {"id": "latest"}

    def test_resolve_no_match(self, registry):
        """Test resolve no match."""
        assert registry.resolve("test://unknown") is None

    def test_colliding_template_rejected(self, registry):
        """Test colliding template rejected."""
        async def other(key: str):
            return key

        with pytest.raises(DuplicateRegistrationError):
            registry.register(make_descriptor("test://items/{key}", "other", other))

    def test_handler_must_accept_placeholders(self):
        """Test handler must accept placeholders."""
        async def no_params():
            return None

        registry = ResourceRegistry()
        with pytest.raises(ValueError, match="id"):
            registry.register(make_descriptor("test://things/{id}", "things", no_params))

    @pytest.mark.asyncio
    async def test_read(self, registry):
        """Test reading static and templated resources."""
        assert await registry.read("test://status") == {"status": "ok"}
        assert await registry.read("test://items/7") == {"id": "7"}

    @pytest.mark.asyncio
    async def test_read_not_found(self, registry):
        """Test read not found."""
        with pytest.raises(NotFoundError, match="test://nothing"):
            await registry.read("test://nothing")

    @pytest.mark.asyncio
    async def test_read_handler_failure(self, registry):
        """Test read handler failure."""
        with pytest.raises(ResourceFailedError):
            await registry.read("test://broken/1")

    def test_iteration_keeps_registration_order(self, registry):
        """Test iteration keeps registration order."""
        assert [d.name for d in registry] == ["status", "item", "latest_item", "broken"]
        assert len(registry) == 4

    @pytest.mark.asyncio
    async def test_handler_taking_keyword_arguments(self):
        """Test that a handler with **kwargs accepts every placeholder."""
        async def anything(**params):
            return params

        registry = ResourceRegistry()
        registry.register(make_descriptor("test://pairs/{left}/{right}", "pairs", anything))
        assert await registry.read("test://pairs/a/b") == {"left": "a", "right": "b"}
