"""
Device Discovery - Find host devices with developer mode enabled.

A host device in developer mode runs a dev server on port 11337 that serves
a test portal at ``/dev``. Discovery browses mDNS for devices advertising
the sync service and probes their dev port; when that finds nothing it
probes the port on every address of the local /24 subnets.
``DevPortalClient`` then talks to the chosen device: it loads the portal,
injects the plugin under test, and calls plugin methods remotely.
"""

import asyncio
import ipaddress
import logging
import time
from typing import Any, Dict, List, NamedTuple, Optional, Sequence

import aiohttp
from zeroconf import IPVersion, ServiceStateChange
from zeroconf.asyncio import AsyncServiceBrowser, AsyncServiceInfo, AsyncZeroconf

from vidplug.core.exceptions import NetworkError
from vidplug.network.client import NetworkClient
from vidplug.network.request import RequestExecutor
from vidplug.network.transport import AiohttpTransport
from vidplug.tools.shell import get_local_ips


logger = logging.getLogger(__name__)


DEV_SERVER_PORT = 11337
PORTAL_PATH = "/dev"
MAX_CONCURRENT_PROBES = 64
MDNS_SERVICE_TYPE = "_gsync._tcp.local."


class DiscoveredDevice(NamedTuple):
    """A dev server that answered a probe."""

    host: str
    port: int
    response_time: float
    status_code: int


class MethodResult(NamedTuple):
    """Outcome of a remote plugin method call."""

    success: bool
    result: Any = None
    error: Optional[str] = None


def subnet_hosts(ip: str) -> List[str]:
    """Every other host address in the /24 around ``ip``."""
    network = ipaddress.ip_network(f"{ip}/24", strict=False)
    return [str(host) for host in network.hosts() if str(host) != ip]


async def probe_endpoint(
    session: aiohttp.ClientSession,
    host: str,
    port: int = DEV_SERVER_PORT,
    path: str = PORTAL_PATH,
) -> Optional[DiscoveredDevice]:
    """
    Check whether ``host:port`` answers ``path`` with a 2xx-3xx status.

    Returns:
        The device, or None if it did not answer in time or failed
    """
    started = time.monotonic()
    try:
        async with session.get(f"http://{host}:{port}{path}") as response:
            if 200 <= response.status < 400:
                return DiscoveredDevice(host, port, time.monotonic() - started, response.status)
            logger.debug(f"{host}:{port} answered {response.status}")
    except (aiohttp.ClientError, asyncio.TimeoutError):
        pass
    return None


async def discover_mdns_hosts(
    timeout: float = 3.0,
    service_type: str = MDNS_SERVICE_TYPE,
    resolve_timeout_ms: int = 3000,
) -> List[str]:
    """
    Browse mDNS for devices advertising the host's sync service.

    Args:
        timeout: Seconds to collect announcements
        service_type: Service to browse for
        resolve_timeout_ms: Time allowed to resolve each service's address

    Returns:
        IPv4 addresses of the advertising devices
    """
    names: List[str] = []

    def on_service_state_change(zeroconf: Any, service_type: str, name: str, state_change: ServiceStateChange) -> None:
        if state_change is ServiceStateChange.Added and name not in names:
            logger.debug(f"mDNS service found: {name}")
            names.append(name)

    aiozc = AsyncZeroconf()
    browser = AsyncServiceBrowser(aiozc.zeroconf, [service_type], handlers=[on_service_state_change])
    try:
        await asyncio.sleep(timeout)

        hosts: List[str] = []
        for name in names:
            info = AsyncServiceInfo(service_type, name)
            if not await info.async_request(aiozc.zeroconf, resolve_timeout_ms):
                logger.debug(f"Could not resolve {name}")
                continue
            for address in info.parsed_addresses(IPVersion.V4Only):
                if address not in hosts:
                    hosts.append(address)
    finally:
        await browser.async_cancel()
        await aiozc.async_close()

    logger.info(f"mDNS found {len(hosts)} device(s)")
    return hosts


async def probe_hosts(
    hosts: Sequence[str],
    port: int = DEV_SERVER_PORT,
    timeout: float = 1.0,
    max_concurrent: int = MAX_CONCURRENT_PROBES,
) -> List[DiscoveredDevice]:
    """
    Probe ``hosts`` for dev servers concurrently.

    Returns:
        Responding devices, fastest first
    """
    if not hosts:
        return []

    logger.info(f"Probing {len(hosts)} hosts on port {port}")
    semaphore = asyncio.Semaphore(max_concurrent)

    async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout)) as session:
        async def probe(host: str) -> Optional[DiscoveredDevice]:
            async with semaphore:
                return await probe_endpoint(session, host, port)

        results = await asyncio.gather(*(probe(host) for host in hosts))

    return sorted((d for d in results if d is not None), key=lambda d: d.response_time)


async def discover_devices(
    port: int = DEV_SERVER_PORT,
    timeout: float = 1.0,
    local_ips: Optional[Sequence[str]] = None,
    max_concurrent: int = MAX_CONCURRENT_PROBES,
    skip_mdns: bool = False,
    mdns_timeout: float = 3.0,
) -> List[DiscoveredDevice]:
    """
    Find dev servers, over mDNS first and then by scanning the local /24 subnets.

    Args:
        port: Dev server port to probe
        timeout: Seconds to wait for each host
        local_ips: Local addresses whose subnets are scanned (detected when omitted)
        max_concurrent: Maximum simultaneous probes
        skip_mdns: Go straight to the subnet scan
        mdns_timeout: Seconds to browse mDNS

    Returns:
        Responding devices, fastest first
    """
    if not skip_mdns:
        try:
            mdns_hosts = await discover_mdns_hosts(mdns_timeout)
        except Exception as e:
            logger.warning(f"mDNS discovery failed, falling back to network scan: {e}")
            mdns_hosts = []

        devices = await probe_hosts(mdns_hosts, port, timeout, max_concurrent)
        if devices:
            logger.info(f"Found {len(devices)} dev server(s) over mDNS")
            return devices
        logger.info("No dev servers found over mDNS, scanning the network")

    local_ips = list(local_ips) if local_ips is not None else get_local_ips()
    if not local_ips:
        logger.warning("No local network addresses found")
        return []

    hosts: List[str] = []
    for ip in local_ips:
        for host in subnet_hosts(ip):
            if host not in hosts:
                hosts.append(host)

    devices = await probe_hosts(hosts, port, timeout, max_concurrent)
    logger.info(f"Found {len(devices)} dev server(s)")
    return devices


def pick_local_ip(device_host: str, local_ips: Sequence[str]) -> str:
    """The local address in the device's /24, else the first one, else ``localhost``."""
    subnet = device_host.rsplit(".", 1)[0] + "."
    for ip in local_ips:
        if ip.startswith(subnet):
            return ip
    return local_ips[0] if local_ips else "localhost"


class DevPortalClient:
    """Client for a host device's developer portal."""

    def __init__(self, host: str, port: int = DEV_SERVER_PORT, client: Optional[NetworkClient] = None):
        """
        Initialize the portal client.

        Args:
            host: Device address
            port: Dev server port
            client: Network client; one backed by ``AiohttpTransport`` is
                created when omitted
        """
        self.host = host
        self.port = port
        self._transport: Optional[AiohttpTransport] = None
        if client is None:
            self._transport = AiohttpTransport(timeout=30)
            client = NetworkClient(RequestExecutor(self._transport))
        self.client = client

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    @property
    def portal_url(self) -> str:
        return f"{self.base_url}{PORTAL_PATH}"

    async def load_portal(self, timeout: float = 10.0) -> None:
        """
        Load the portal page, which initializes the device's test session.

        Raises:
            NetworkError: If the portal does not load within ``timeout``
        """
        try:
            await asyncio.wait_for(self.client.get(self.portal_url, retries=0), timeout)
        except asyncio.TimeoutError:
            raise NetworkError(f"Dev portal at {self.portal_url} did not load in {timeout}s", url=self.portal_url)
        logger.debug(f"Loaded dev portal at {self.portal_url}")

    async def update_test_plugin(self, script_url: str, config: Dict[str, Any]) -> None:
        """
        Inject the plugin under test.

        Args:
            script_url: URL the device downloads the script from
            config: Plugin ``config.json`` contents
        """
        await self.client.post(
            f"{self.base_url}/plugin/updateTestPlugin",
            {**config, "scriptUrl": script_url},
            headers={"Content-Type": "application/json"},
            retries=0,
        )
        logger.info(f"Injected test plugin {config.get('name')} from {script_url}")

    async def test_method(self, method: str, *args: Any) -> MethodResult:
        """
        Call a method on the injected plugin.

        Never raises; failures come back as an unsuccessful result.
        """
        try:
            result = await self.client.post_json(
                f"{self.base_url}/plugin/remoteCall?method={method}",
                list(args),
                retries=0,
            )
            return MethodResult(True, result)
        except Exception as e:
            logger.debug(f"Remote call {method} failed: {e}")
            return MethodResult(False, error=str(e))

    async def close(self) -> None:
        if self._transport is not None:
            await self._transport.cleanup()


__all__ = [
    "DEV_SERVER_PORT",
    "DiscoveredDevice",
    "MethodResult",
    "DevPortalClient",
    "subnet_hosts",
    "probe_endpoint",
    "discover_mdns_hosts",
    "probe_hosts",
    "discover_devices",
    "pick_local_ip",
]
