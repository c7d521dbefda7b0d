"""
Shared Test Fixtures

Provides a recording stub transport, a no-op sleep recorder and sample plugin
configurations used across the test suite.
"""

from typing import Any, Dict, List, Optional, Union

import pytest

from vidplug.core.config_schemas import PluginConfig
from vidplug.core.settings import SourceSettings
from vidplug.network.client import NetworkClient
from vidplug.network.request import RequestExecutor
from vidplug.network.transport import BaseTransport, TransportResponse


Outcome = Union[TransportResponse, Exception]


class StubTransport(BaseTransport):
    """Transport that replays queued outcomes and records every call."""

    def __init__(self, outcomes: Optional[List[Outcome]] = None):
        self.outcomes: List[Outcome] = list(outcomes or [])
        self.calls: List[Dict[str, Any]] = []
        self.cleaned_up = False

    def queue(self, *outcomes: Outcome) -> None:
        self.outcomes.extend(outcomes)

    def _next(self, call: Dict[str, Any]) -> TransportResponse:
        self.calls.append(call)
        if not self.outcomes:
            raise AssertionError(f"Unexpected request: {call}")
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def get(self, url, headers, use_auth=False):
        return self._next({"method": "GET", "url": url, "headers": dict(headers), "use_auth": use_auth, "body": None})

    async def post(self, url, body, headers, use_auth=False):
        return self._next({"method": "POST", "url": url, "headers": dict(headers), "use_auth": use_auth, "body": body})

    async def request(self, method, url, body, headers, use_auth=False):
        return self._next({"method": method, "url": url, "headers": dict(headers), "use_auth": use_auth, "body": body})

    async def cleanup(self):
        self.cleaned_up = True


class SleepRecorder:
    """Awaitable sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def ok(body: str = "", code: int = 200, url: str = "") -> TransportResponse:
    return TransportResponse(code=code, body=body, url=url)


@pytest.fixture
def transport():
    return StubTransport()


@pytest.fixture
def sleep():
    return SleepRecorder()


@pytest.fixture
def executor(transport, sleep):
    return RequestExecutor(transport, sleep=sleep)


@pytest.fixture
def client(executor):
    return NetworkClient(executor)


@pytest.fixture
def plugin_config_data() -> Dict[str, Any]:
    return {
        "name": "Example Videos",
        "id": "4e2a1a2c-0b7d-4d7e-9d3c-2f8f3b6a9c11",
        "description": "Example video platform",
        "author": "Example Author",
        "version": 3,
        "platformUrl": "https://videos.example.com/",
        "sourceUrl": "https://plugins.example.com/example/config.json",
        "repositoryUrl": "https://github.com/example-dev/example-plugin",
        "scriptUrl": "./script.js",
        "packages": ["Http"],
        "allowEval": False,
        "allowUrls": ["videos.example.com", "api.example.com"],
        "settings": [
            {
                "variable": "baseUrl",
                "name": "API Server",
                "type": "Dropdown",
                "default": "0",
                "options": ["https://api.example.com", "https://mirror.example.com"],
            },
        ],
        "constants": {
            "defaultHeaders": {"User-Agent": "VidPlug/1.0", "Accept-Language": "en"},
        },
    }


@pytest.fixture
def plugin_config(plugin_config_data) -> PluginConfig:
    return PluginConfig.model_validate(plugin_config_data)


@pytest.fixture
def source_settings(plugin_config) -> SourceSettings:
    return SourceSettings(plugin_config)
