"""
Device Testing Tests

Tests the local dist server, mDNS and subnet discovery, and the dev portal
client.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiohttp import test_utils
from zeroconf import ServiceStateChange

from vidplug.network.client import NetworkClient
from vidplug.network.request import RequestExecutor
from vidplug.tools.dev_server import create_app, resolve_request_path
from vidplug.tools.discovery import (
    DevPortalClient,
    DiscoveredDevice,
    discover_devices,
    discover_mdns_hosts,
    pick_local_ip,
    probe_hosts,
    subnet_hosts,
)

from tests.conftest import StubTransport, ok


@pytest.fixture
def dist(tmp_path):
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "script.js").write_text("source.getHome = function () {};", encoding="utf-8")
    (dist / "config.json").write_text('{"name": "Example Videos"}', encoding="utf-8")
    return dist


class TestResolveRequestPath:
    """Test URL path to file mapping."""

    def test_root_serves_config(self, dist):
        assert resolve_request_path(dist, "/") == (dist / "config.json").resolve()

    def test_file(self, dist):
        assert resolve_request_path(dist, "/script.js") == (dist / "script.js").resolve()

    def test_traversal_refused(self, dist):
        assert resolve_request_path(dist, "/../secret.pem") is None
        assert resolve_request_path(dist, "/a/../../secret.pem") is None


class TestDevServer:
    """Test the static dist server."""

    def test_missing_dist(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            create_app(tmp_path / "dist")

    @pytest.mark.asyncio
    async def test_serves_files(self, dist):
        async with test_utils.TestClient(test_utils.TestServer(create_app(dist))) as client:
            response = await client.get("/script.js")
            body = await response.text()

            assert response.status == 200
            assert response.headers["Content-Type"].startswith("application/javascript")
            assert response.headers["Access-Control-Allow-Origin"] == "*"
            assert body.startswith("source.getHome")

            response = await client.get("/")
            assert json.loads(await response.text()) == {"name": "Example Videos"}

    @pytest.mark.asyncio
    async def test_missing_file(self, dist):
        async with test_utils.TestClient(test_utils.TestServer(create_app(dist))) as client:
            response = await client.get("/icon.png")

            assert response.status == 404


class TestDiscoveryHelpers:
    """Test subnet and address selection helpers."""

    def test_subnet_hosts(self):
        hosts = subnet_hosts("192.168.1.20")

        assert len(hosts) == 253
        assert "192.168.1.20" not in hosts
        assert hosts[0] == "192.168.1.1"
        assert hosts[-1] == "192.168.1.254"

    def test_pick_local_ip_same_subnet(self):
        assert pick_local_ip("192.168.1.50", ["10.0.0.5", "192.168.1.20"]) == "192.168.1.20"

    def test_pick_local_ip_fallbacks(self):
        assert pick_local_ip("172.16.0.9", ["10.0.0.5"]) == "10.0.0.5"
        assert pick_local_ip("172.16.0.9", []) == "localhost"

    @pytest.mark.asyncio
    async def test_no_local_addresses(self):
        assert await discover_devices(local_ips=[], skip_mdns=True) == []


def device(host, response_time=0.01):
    return DiscoveredDevice(host, 11337, response_time, 200)


class TestDiscoverDevices:
    """Test mDNS discovery with the subnet scan as fallback."""

    @pytest.mark.asyncio
    async def test_mdns_devices_skip_scan(self):
        probe = AsyncMock(return_value=[device("192.168.1.50")])

        with patch("vidplug.tools.discovery.discover_mdns_hosts", AsyncMock(return_value=["192.168.1.50"])), \
                patch("vidplug.tools.discovery.probe_hosts", probe):
            devices = await discover_devices(local_ips=["192.168.1.20"])

        assert [d.host for d in devices] == ["192.168.1.50"]
        probe.assert_awaited_once()
        assert probe.call_args[0][0] == ["192.168.1.50"]

    @pytest.mark.asyncio
    async def test_falls_back_to_scan(self):
        probe = AsyncMock(side_effect=[[], [device("192.168.1.77")]])

        with patch("vidplug.tools.discovery.discover_mdns_hosts", AsyncMock(return_value=[])), \
                patch("vidplug.tools.discovery.probe_hosts", probe):
            devices = await discover_devices(local_ips=["192.168.1.20"])

        assert [d.host for d in devices] == ["192.168.1.77"]
        assert probe.await_count == 2
        assert len(probe.call_args_list[1][0][0]) == 253

    @pytest.mark.asyncio
    async def test_mdns_failure_falls_back_to_scan(self):
        probe = AsyncMock(side_effect=[[], [device("192.168.1.77")]])

        with patch("vidplug.tools.discovery.discover_mdns_hosts", AsyncMock(side_effect=OSError("no multicast"))), \
                patch("vidplug.tools.discovery.probe_hosts", probe):
            devices = await discover_devices(local_ips=["192.168.1.20"])

        assert [d.host for d in devices] == ["192.168.1.77"]

    @pytest.mark.asyncio
    async def test_skip_mdns(self):
        browse = AsyncMock(return_value=["192.168.1.50"])
        probe = AsyncMock(return_value=[])

        with patch("vidplug.tools.discovery.discover_mdns_hosts", browse), \
                patch("vidplug.tools.discovery.probe_hosts", probe):
            assert await discover_devices(local_ips=["192.168.1.20"], skip_mdns=True) == []

        browse.assert_not_awaited()
        probe.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_probe_hosts_without_hosts(self):
        assert await probe_hosts([]) == []


class FakeBrowser:
    """Announces a fixed set of services as soon as browsing starts."""

    services = ["Living Room TV._gsync._tcp.local.", "Phone._gsync._tcp.local."]

    def __init__(self, zeroconf, service_types, handlers):
        self.cancelled = False
        for name in self.services:
            for handler in handlers:
                handler(
                    zeroconf=zeroconf,
                    service_type=service_types[0],
                    name=name,
                    state_change=ServiceStateChange.Added,
                )

    async def async_cancel(self):
        self.cancelled = True


class FakeServiceInfo:
    """Resolves the TV to a repeated address and the phone to its own."""

    def __init__(self, service_type, name):
        self.name = name

    async def async_request(self, zeroconf, timeout):
        return True

    def parsed_addresses(self, version=None):
        if self.name.startswith("Phone"):
            return ["192.168.1.60"]
        return ["192.168.1.50", "192.168.1.50"]


class TestMdnsBrowse:
    """Test mDNS browsing with zeroconf replaced."""

    @pytest.mark.asyncio
    async def test_resolves_announced_services(self):
        aiozc = MagicMock()
        aiozc.async_close = AsyncMock()

        with patch("vidplug.tools.discovery.AsyncZeroconf", return_value=aiozc), \
                patch("vidplug.tools.discovery.AsyncServiceBrowser", FakeBrowser), \
                patch("vidplug.tools.discovery.AsyncServiceInfo", FakeServiceInfo):
            hosts = await discover_mdns_hosts(timeout=0)

        assert hosts == ["192.168.1.50", "192.168.1.60"]
        aiozc.async_close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unresolved_service_skipped(self):
        aiozc = MagicMock()
        aiozc.async_close = AsyncMock()

        with patch("vidplug.tools.discovery.AsyncZeroconf", return_value=aiozc), \
                patch("vidplug.tools.discovery.AsyncServiceBrowser", FakeBrowser), \
                patch.object(FakeServiceInfo, "async_request", AsyncMock(return_value=False)), \
                patch("vidplug.tools.discovery.AsyncServiceInfo", FakeServiceInfo):
            assert await discover_mdns_hosts(timeout=0) == []


@pytest.fixture
def portal_transport():
    return StubTransport()


@pytest.fixture
def portal(portal_transport):
    return DevPortalClient("192.168.1.50", client=NetworkClient(RequestExecutor(portal_transport)))


class TestDevPortalClient:
    """Test dev portal calls."""

    def test_urls(self, portal):
        assert portal.base_url == "http://192.168.1.50:11337"
        assert portal.portal_url == "http://192.168.1.50:11337/dev"

    @pytest.mark.asyncio
    async def test_load_portal(self, portal, portal_transport):
        portal_transport.queue(ok("<html></html>"))

        await portal.load_portal()

        assert portal_transport.calls[0]["url"] == "http://192.168.1.50:11337/dev"

    @pytest.mark.asyncio
    async def test_update_test_plugin(self, portal, portal_transport):
        portal_transport.queue(ok())

        await portal.update_test_plugin("http://192.168.1.20:3000/script.js", {"name": "Example Videos"})

        call = portal_transport.calls[0]
        assert call["url"] == "http://192.168.1.50:11337/plugin/updateTestPlugin"
        assert json.loads(call["body"]) == {
            "name": "Example Videos",
            "scriptUrl": "http://192.168.1.20:3000/script.js",
        }

    @pytest.mark.asyncio
    async def test_method_success(self, portal, portal_transport):
        portal_transport.queue(ok('{"name": "Example Videos"}'))

        result = await portal.test_method("enable")

        assert result.success is True
        assert result.result == {"name": "Example Videos"}
        assert portal_transport.calls[0]["url"].endswith("/plugin/remoteCall?method=enable")
        assert json.loads(portal_transport.calls[0]["body"]) == []

    @pytest.mark.asyncio
    async def test_method_failure_does_not_raise(self, portal, portal_transport):
        portal_transport.queue(ok("boom", code=500))

        result = await portal.test_method("getHome")

        assert result.success is False
        assert "500" in result.error
        assert len(portal_transport.calls) == 1
