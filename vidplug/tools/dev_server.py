"""
Local Dev Server - Serve ``dist/`` to a test device over HTTP.

The device fetches the plugin script and config from this machine while it
is being tested. ``/`` serves ``config.json``; anything outside ``dist/`` is
refused.
"""

import logging
from pathlib import Path
from typing import Union

from aiohttp import web


logger = logging.getLogger(__name__)


CONTENT_TYPES = {
    ".json": "application/json",
    ".js": "application/javascript",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".html": "text/html",
}

DEFAULT_DOCUMENT = "config.json"


def resolve_request_path(dist_dir: Path, request_path: str) -> Union[Path, None]:
    """
    Map a URL path to a file under ``dist_dir``.

    Returns:
        The resolved path, or None if it escapes ``dist_dir``
    """
    relative = request_path.lstrip("/") or DEFAULT_DOCUMENT
    root = dist_dir.resolve()
    target = (root / relative).resolve()
    if target != root and root not in target.parents:
        return None
    return target


def create_app(dist_dir: Union[str, Path]) -> web.Application:
    """
    Build the static file application.

    Raises:
        FileNotFoundError: If ``dist_dir`` does not exist
    """
    dist = Path(dist_dir)
    if not dist.is_dir():
        raise FileNotFoundError(f"{dist} not found. Run 'vidplug build' first.")

    async def serve(request: web.Request) -> web.StreamResponse:
        target = resolve_request_path(dist, request.path)
        if target is None:
            logger.warning(f"Refused path outside dist: {request.path}")
            return web.Response(status=403, text="Forbidden")
        if not target.is_file():
            return web.Response(status=404, text="Not Found")

        logger.debug(f"Serving {target.name}")
        return web.Response(
            body=target.read_bytes(),
            content_type=CONTENT_TYPES.get(target.suffix, "text/plain"),
            headers={"Access-Control-Allow-Origin": "*"},
        )

    app = web.Application()
    app.router.add_get("/{path:.*}", serve)
    return app


async def start_server(dist_dir: Union[str, Path], port: int = 3000, host: str = "0.0.0.0") -> web.AppRunner:
    """
    Start serving ``dist_dir``; call ``cleanup()`` on the runner to stop.

    Returns:
        The running app runner
    """
    runner = web.AppRunner(create_app(dist_dir))
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info(f"Serving {dist_dir} on http://{host}:{port}")
    return runner


__all__ = ["CONTENT_TYPES", "create_app", "resolve_request_path", "start_server"]
