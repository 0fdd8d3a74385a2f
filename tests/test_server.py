import asyncio
import contextlib
import io
import socket
import tarfile
from decimal import Decimal

import pytest
from aiohttp import WSMsgType
from aiohttp.test_utils import TestClient, TestServer

from facade.protocol import (
    Action,
    Delta,
    Id,
    Kind,
    Spinner,
    Value,
    deserialize_reaction,
    serialize_action,
    to_value,
)
from facade.router import RouterSender, SetValue, route
from facade.server import ServerError, build_app, load_assets, serve
from facade.settings import Settings


@contextlib.asynccontextmanager
async def running_router():
    sender = RouterSender()
    task = asyncio.create_task(route(sender.requests))
    try:
        yield sender
    finally:
        await sender.close()
        await asyncio.wait_for(task, 2)


@contextlib.asynccontextmanager
async def client_for(sender, ms=20, assets=None):
    app = build_app(Settings(ms=ms), sender, assets or {})
    async with TestClient(TestServer(app)) as client:
        yield client


def make_archive(entries):
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, data in entries:
            if data is None:
                info = tarfile.TarInfo(name)
                info.type = tarfile.DIRTYPE
                tar.addfile(info)
            else:
                info = tarfile.TarInfo(name)
                info.size = len(data)
                tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


async def next_reaction(ws):
    msg = await ws.receive(timeout=2)
    assert msg.type == WSMsgType.BINARY
    return deserialize_reaction(msg.data)


def test_load_assets_strips_prefix_and_skips_empty():
    archive = make_archive(
        [
            ("./css", None),
            ("./index.html", b"<html></html>"),
            ("./css/app.css", b"body{}"),
            ("./empty.txt", b""),
        ]
    )
    assert load_assets(archive) == {"index.html": b"<html></html>", "css/app.css": b"body{}"}


def test_load_assets_rejects_garbage():
    with pytest.raises(ServerError):
        load_assets(b"not an archive")


@pytest.mark.asyncio
async def test_root_redirects_to_index():
    async with running_router() as sender, client_for(sender) as client:
        resp = await client.get("/", allow_redirects=False)
        assert resp.status == 301
        assert resp.headers["Location"] == "/index.html"


@pytest.mark.asyncio
async def test_asset_is_served_with_mime_type():
    assets = {"index.html": b"<p>hello</p>"}
    async with running_router() as sender, client_for(sender, assets=assets) as client:
        resp = await client.get("/index.html")
        assert resp.status == 200
        assert resp.content_type == "text/html"
        assert await resp.read() == b"<p>hello</p>"


@pytest.mark.asyncio
async def test_missing_asset_is_not_found():
    async with running_router() as sender, client_for(sender) as client:
        resp = await client.get("/style.css")
        assert resp.status == 404
        assert resp.content_type == "text/css"


@pytest.mark.asyncio
async def test_live_without_upgrade_falls_back_to_assets():
    async with running_router() as sender, client_for(sender) as client:
        resp = await client.get("/live")
        assert resp.status == 404


@pytest.mark.asyncio
async def test_live_streams_scene_and_values():
    delta = Delta(Id("temp"), to_value(21))
    async with running_router() as sender, client_for(sender) as client:
        ws = await client.ws_connect("/live")
        assert await next_reaction(ws) == Spinner()
        await sender.send(SetValue(delta))
        assert await next_reaction(ws) == delta
        await ws.close()


@pytest.mark.asyncio
async def test_live_throttles_to_latest_value():
    async with running_router() as sender, client_for(sender, ms=200) as client:
        ws = await client.ws_connect("/live/")
        assert await next_reaction(ws) == Spinner()
        for number in (1, 2, 3):
            await sender.send(SetValue(Delta(Id("n"), to_value(number))))
        assert await next_reaction(ws) == Delta(Id("n"), Value(Decimal(3)))
        with pytest.raises(asyncio.TimeoutError):
            await ws.receive(timeout=0.5)
        await ws.close()


@pytest.mark.asyncio
async def test_live_accepts_actions():
    delta = Delta(Id("after"), to_value("ok"))
    async with running_router() as sender, client_for(sender) as client:
        ws = await client.ws_connect("/live")
        assert await next_reaction(ws) == Spinner()
        await ws.send_bytes(serialize_action(Action(Id("button"), Kind.CLICK)))
        await sender.send(SetValue(delta))
        assert await next_reaction(ws) == delta
        await ws.close()


@pytest.mark.asyncio
async def test_live_closes_on_bad_action():
    async with running_router() as sender, client_for(sender) as client:
        ws = await client.ws_connect("/live")
        await ws.send_str("not json")
        msg = await ws.receive(timeout=2)
        while msg.type == WSMsgType.BINARY:
            msg = await ws.receive(timeout=2)
        assert msg.type in (WSMsgType.CLOSE, WSMsgType.CLOSING, WSMsgType.CLOSED)


@pytest.mark.asyncio
async def test_serve_reports_bind_error():
    with socket.socket() as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen()
        port = busy.getsockname()[1]
        with pytest.raises(ServerError):
            await serve(Settings(port=port), RouterSender(), {})