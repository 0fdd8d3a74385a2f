"""Starting the router and the web server together."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from facade.control import Control
from facade.router import RouterSender, route
from facade.server import load_assets, serve
from facade.settings import Settings, load_settings

log = logging.getLogger(__name__)

_background: set[asyncio.Task] = set()


async def routine(
    settings: Settings,
    sender: RouterSender,
    requests: asyncio.Queue,
    assets: Mapping[str, bytes],
) -> None:
    """Run the router and the server side by side; raise the first error once both end."""
    results = await asyncio.gather(
        route(requests), serve(settings, sender, assets), return_exceptions=True
    )
    for result in results:
        if isinstance(result, BaseException):
            raise result


def _finished(task: asyncio.Task) -> None:
    _background.discard(task)
    if not task.cancelled() and task.exception() is not None:
        log.error("facade stopped: %s", task.exception())


async def start(
    settings: Settings | None = None,
    assets: Mapping[str, bytes] | bytes | None = None,
) -> Control:
    """Start serving in the background of the running loop and return its Control.

    Settings default to those read by ``load_settings``; assets may be a mapping
    of paths to contents or a gzipped tar archive.
    """
    settings = load_settings() if settings is None else settings
    if assets is None:
        files: dict[str, bytes] = {}
    elif isinstance(assets, (bytes, bytearray)):
        files = load_assets(bytes(assets))
    else:
        files = dict(assets)
    sender = RouterSender()
    control = Control(sender)
    task = asyncio.get_running_loop().create_task(
        routine(settings, sender, sender.requests, files)
    )
    _background.add(task)
    task.add_done_callback(_finished)
    return control