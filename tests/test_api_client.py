"""
API Client Tests

Tests base URL prefixing for every API shortcut.
"""

import json

import pytest

from vidplug.core.exceptions import ConfigurationError
from vidplug.network.api import APIClient

from tests.conftest import ok


@pytest.fixture
def api(client, source_settings):
    return APIClient(client, source_settings.get_base_url)


class TestGetUrl:
    """Test URL construction."""

    def test_joins_endpoint(self, api):
        assert api.get_url("/videos") == "https://api.example.com/videos"
        assert api.get_url("videos") == "https://api.example.com/videos"

    def test_unconfigured_base_url(self, client):
        api = APIClient(client, lambda: "")

        with pytest.raises(ConfigurationError):
            api.get_url("/videos")

    def test_follows_user_selection(self, client, plugin_config):
        from vidplug.core.settings import SourceSettings

        settings = SourceSettings(plugin_config, {"baseUrl": "1"})
        api = APIClient(client, settings.get_base_url)

        assert api.get_url("/v") == "https://mirror.example.com/v"


class TestShortcuts:
    """Test that shortcuts delegate with the full URL."""

    @pytest.mark.asyncio
    async def test_get_json(self, api, transport):
        transport.queue(ok('{"items": []}'))

        result = await api.get_json("/videos", use_auth=True)

        assert result == {"items": []}
        assert transport.calls[0]["url"] == "https://api.example.com/videos"
        assert transport.calls[0]["use_auth"] is True

    @pytest.mark.asyncio
    async def test_post_json(self, api, transport):
        transport.queue(ok('{"ok": true}'))

        await api.post_json("/likes", {"id": "v1"})

        assert transport.calls[0]["method"] == "POST"
        assert json.loads(transport.calls[0]["body"]) == {"id": "v1"}

    @pytest.mark.asyncio
    async def test_method_shortcuts(self, api, transport):
        transport.queue(ok())

        await api.get("/a")
        await api.post("/b", "x")
        await api.put("/c", "y")
        await api.delete("/d")

        assert [(c["method"], c["url"]) for c in transport.calls] == [
            ("GET", "https://api.example.com/a"),
            ("POST", "https://api.example.com/b"),
            ("PUT", "https://api.example.com/c"),
            ("DELETE", "https://api.example.com/d"),
        ]

    @pytest.mark.asyncio
    async def test_get_html(self, api, transport):
        transport.queue(ok("<title>Home</title>"))

        document = await api.get_html("/")

        assert document.find_text("title") == "Home"

    @pytest.mark.asyncio
    async def test_graphql_default_endpoint(self, api, transport):
        transport.queue(ok('{"data": {"a": 1}}'))

        result = await api.graphql("{ a }")

        assert result == {"a": 1}
        assert transport.calls[0]["url"] == "https://api.example.com/graphql"

    @pytest.mark.asyncio
    async def test_request(self, api, transport):
        transport.queue(ok())

        await api.request("/x", method="OPTIONS")

        assert transport.calls[0]["method"] == "OPTIONS"
        assert transport.calls[0]["url"] == "https://api.example.com/x"
