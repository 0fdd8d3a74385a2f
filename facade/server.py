"""HTTP server delivering the UI assets and the live websocket feed."""

from __future__ import annotations

import asyncio
import io
import logging
import mimetypes
import tarfile
from collections.abc import Mapping
from typing import Any

from aiohttp import WSMsgType, web

from facade.protocol import (
    Id,
    ProtocolError,
    Reaction,
    deserialize_action,
    overlay_id,
    serialize_reaction,
)
from facade.router import RouterError, RouterSender
from facade.settings import Settings

log = logging.getLogger(__name__)

_INDEX_PATH = "/index.html"


class ServerError(Exception):
    """Raised when the server cannot load its assets, bind or talk to a client."""


def load_assets(archive: bytes) -> dict[str, bytes]:
    """Read the non-empty files of a gzipped tar archive, keyed by path without ``./``."""
    files: dict[str, bytes] = {}
    try:
        with tarfile.open(fileobj=io.BytesIO(archive), mode="r:gz") as tar:
            for member in tar:
                if not member.isfile():
                    continue
                handle = tar.extractfile(member)
                data = handle.read() if handle is not None else b""
                if not data:
                    continue
                if len(member.name) < 2:
                    raise ServerError("wrong assets format")
                name = member.name[2:]
                log.debug("Register asset file: %s", name)
                files[name] = data
    except (tarfile.TarError, OSError, EOFError) as exc:
        raise ServerError(f"io error: {exc}") from exc
    return files


async def process_ws(settings: Settings, router: RouterSender, websocket: Any) -> None:
    """Feed router reactions to a websocket, throttled, and read its actions.

    Within each throttle interval only the latest reaction per overlay id is sent.
    """
    try:
        subscription = await router.register()
    except RouterError as exc:
        raise ServerError(f"router error: {exc}") from exc

    throttle: dict[Id | None, Reaction] = {}
    stopped = asyncio.Event()

    async def outbound_get() -> None:
        async for reaction in subscription:
            log.debug("Reaction: %r", reaction)
            throttle[overlay_id(reaction)] = reaction

    async def outbound_send() -> None:
        interval = settings.throttle_seconds()
        while True:
            try:
                await asyncio.wait_for(stopped.wait(), timeout=interval)
            except TimeoutError:
                pass
            else:
                return
            pending = list(throttle.values())
            throttle.clear()
            for reaction in pending:
                try:
                    await websocket.send_bytes(serialize_reaction(reaction))
                except ConnectionError as exc:
                    raise ServerError(f"io error: {exc}") from exc

    async def inbound() -> None:
        async for message in websocket:
            if message.type in (WSMsgType.TEXT, WSMsgType.BINARY):
                try:
                    action = deserialize_action(message.data)
                except ProtocolError as exc:
                    raise ServerError(f"protocol error: {exc}") from exc
                log.debug("Action: %r", action)
            elif message.type == WSMsgType.ERROR:
                raise ServerError(f"io error: {websocket.exception()}")

    tasks = [asyncio.create_task(outbound_get()), asyncio.create_task(outbound_send())]
    try:
        await inbound()
    finally:
        stopped.set()
        await subscription.close()
        results = await asyncio.gather(*tasks, return_exceptions=True)
    for result in results:
        if isinstance(result, Exception):
            raise result


def _content_type(path: str) -> str:
    return mimetypes.guess_type(path)[0] or "application/octet-stream"


def build_app(
    settings: Settings, router: RouterSender, assets: Mapping[str, bytes]
) -> web.Application:
    """Build the web application: index redirect, live feed and static assets."""
    files = dict(assets)

    async def index(request: web.Request) -> web.StreamResponse:
        log.debug("redirect %s to %s", request.path, _INDEX_PATH)
        return web.Response(status=301, headers={"Location": _INDEX_PATH})

    async def asset(request: web.Request) -> web.StreamResponse:
        tail = request.path[1:]
        log.debug("req: %s", tail)
        headers = {"Content-Type": _content_type(tail)}
        data = files.get(tail)
        if data is None:
            return web.Response(status=404, headers=headers)
        return web.Response(body=data, headers=headers)

    async def live(request: web.Request) -> web.StreamResponse:
        websocket = web.WebSocketResponse()
        if not websocket.can_prepare(request).ok:
            return await asset(request)
        await websocket.prepare(request)
        try:
            await process_ws(settings, router, websocket)
        except ServerError as exc:
            log.debug("websocket closed: %s", exc)
        finally:
            await websocket.close()
        return websocket

    application = web.Application()
    application.router.add_get("/", index)
    application.router.add_get("/live", live)
    application.router.add_get("/live/{rest:.*}", live)
    application.router.add_get("/{tail:.*}", asset)
    return application


async def serve(
    settings: Settings, router: RouterSender, assets: Mapping[str, bytes]
) -> None:
    """Listen on the configured address until cancelled."""
    host, port = settings.socket_addr()
    runner = web.AppRunner(build_app(settings, router, assets))
    await runner.setup()
    try:
        site = web.TCPSite(runner, host, port)
        try:
            await site.start()
        except OSError as exc:
            raise ServerError("bind error") from exc
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()