"""
Network Client Tests

Tests the convenience wrappers: preset methods, JSON headers, HTML parsing
and plain GraphQL over POST.
"""

import json

import pytest

from vidplug.core.exceptions import NetworkError
from vidplug.network.client import NetworkClient, build_descriptor
from vidplug.network.request import RequestDescriptor

from tests.conftest import ok


class TestBuildDescriptor:
    """Test descriptor construction from keyword options."""

    def test_options_become_fields(self):
        descriptor = build_descriptor("https://x", method="PUT", retries=1, use_auth=True)

        assert descriptor.method == "PUT"
        assert descriptor.retries == 1
        assert descriptor.use_auth is True


class TestMethodWrappers:
    """Test method-specific wrappers."""

    @pytest.mark.asyncio
    async def test_get(self, client, transport):
        transport.queue(ok("body"))

        response = await client.get("https://x/a", headers={"X-Test": "1"})

        assert response.body == "body"
        assert transport.calls[0]["method"] == "GET"
        assert transport.calls[0]["headers"] == {"X-Test": "1"}

    @pytest.mark.asyncio
    async def test_post_sends_data(self, client, transport):
        transport.queue(ok())

        await client.post("https://x/a", {"a": 1})

        assert transport.calls[0]["method"] == "POST"
        assert transport.calls[0]["body"] == '{"a":1}'

    @pytest.mark.asyncio
    async def test_put_and_delete(self, client, transport):
        transport.queue(ok(), ok())

        await client.put("https://x/a", "payload")
        await client.delete("https://x/a")

        assert [c["method"] for c in transport.calls] == ["PUT", "DELETE"]
        assert transport.calls[0]["body"] == "payload"
        assert transport.calls[1]["body"] == ""

    @pytest.mark.asyncio
    async def test_fetch_accepts_descriptor(self, client, transport):
        transport.queue(ok())

        await client.fetch(RequestDescriptor(url="https://x/d", method="HEAD"))

        assert transport.calls[0]["method"] == "HEAD"

    @pytest.mark.asyncio
    async def test_caller_cannot_override_preset_method(self, client, transport):
        transport.queue(ok())

        await client.get("https://x/a", method="POST")

        assert transport.calls[0]["method"] == "GET"

    @pytest.mark.asyncio
    async def test_repeated_get_sends_identical_requests(self, client, transport):
        transport.queue(ok("first"), ok("second"))

        await client.get("https://x/a", headers={"X-Test": "1"}, use_auth=True)
        await client.get("https://x/a", headers={"X-Test": "1"}, use_auth=True)

        assert len(transport.calls) == 2
        assert transport.calls[0] == transport.calls[1]

    def test_build_descriptor_is_repeatable(self):
        first = build_descriptor("https://x/a", method="GET", headers={"X-Test": "1"}, retries=2)
        second = build_descriptor("https://x/a", method="GET", headers={"X-Test": "1"}, retries=2)

        assert first == second
        assert first is not second


class TestJsonWrappers:
    """Test JSON wrappers."""

    @pytest.mark.asyncio
    async def test_get_json_sets_accept(self, client, transport):
        transport.queue(ok('{"id": 1}'))

        result = await client.get_json("https://x/a")

        assert result == {"id": 1}
        assert transport.calls[0]["headers"]["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_post_json_sets_content_type(self, client, transport):
        transport.queue(ok('{"created": true}'))

        result = await client.post_json("https://x/a", {"name": "n"}, headers={"X-Trace": "t"})

        headers = transport.calls[0]["headers"]
        assert result == {"created": True}
        assert headers["Content-Type"] == "application/json"
        assert headers["Accept"] == "application/json"
        assert headers["X-Trace"] == "t"
        assert json.loads(transport.calls[0]["body"]) == {"name": "n"}

    @pytest.mark.asyncio
    async def test_caller_accept_header_wins(self, client, transport):
        transport.queue(ok("[]"))

        await client.get_json("https://x/a", headers={"Accept": "application/vnd.api+json"})

        assert transport.calls[0]["headers"]["Accept"] == "application/vnd.api+json"

    @pytest.mark.asyncio
    async def test_failure_raises_after_retries(self, client, transport, sleep):
        transport.queue(ok(code=500))

        with pytest.raises(NetworkError):
            await client.get_json("https://x/a", retries=1, retry_delay=10)

        assert len(transport.calls) == 2
        assert sleep.delays == [0.01]


class TestHtmlWrappers:
    """Test HTML wrappers."""

    @pytest.mark.asyncio
    async def test_get_html(self, client, transport):
        transport.queue(ok('<div class="t">Hi</div>'))

        document = await client.get_html("https://x/page")

        assert document.find_text(".t") == "Hi"
        assert transport.calls[0]["method"] == "GET"


class TestFetchGraphQL:
    """Test plain GraphQL over POST."""

    @pytest.mark.asyncio
    async def test_returns_data_member(self, client, transport):
        transport.queue(ok('{"data": {"viewer": {"id": "u1"}}}'))

        result = await client.fetch_graphql("https://x/graphql", "{ viewer { id } }", {"a": 1})

        assert result == {"viewer": {"id": "u1"}}
        call = transport.calls[0]
        assert call["method"] == "POST"
        assert json.loads(call["body"]) == {"query": "{ viewer { id } }", "variables": {"a": 1}}
        assert call["headers"]["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_returns_payload_without_data(self, client, transport):
        transport.queue(ok('{"extensions": {"cost": 1}}'))

        result = await client.fetch_graphql("https://x/graphql", "{ a }")

        assert result == {"extensions": {"cost": 1}}

    @pytest.mark.asyncio
    async def test_variables_default_to_empty_object(self, client, transport):
        transport.queue(ok('{"data": {"a": 1}}'))

        await client.fetch_graphql("https://x/graphql", "{ a }")

        assert json.loads(transport.calls[0]["body"])["variables"] == {}
