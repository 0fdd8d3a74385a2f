from decimal import Decimal

import pytest

from facade import dsl
from facade.control import Control
from facade.protocol import Component, Delta, Icon, Id, Spinner, Value
from facade.router import RouterError, RouterSender, SetScene, SetValue


def make_control():
    sender = RouterSender()
    return Control(sender), sender


@pytest.mark.asyncio
async def test_scene_sends_set_scene():
    control, sender = make_control()
    scene = dsl.scene(
        dsl.app(
            dsl.navigation_drawer(dsl.list_([dsl.list_item(Icon.HOME, "Home")])),
            dsl.container(dsl.row([dsl.col([Component.CARD])])),
        )
    )
    await control.scene(scene)
    assert sender.requests.get_nowait() == SetScene(scene)


@pytest.mark.asyncio
async def test_assign_converts_id_and_value():
    control, sender = make_control()
    await control.assign("x", 5)
    assert sender.requests.get_nowait() == SetValue(Delta(Id("x"), Value(Decimal(5))))


@pytest.mark.asyncio
async def test_assign_accepts_id_and_string():
    control, sender = make_control()
    await control.assign(Id("y"), "text")
    assert sender.requests.get_nowait() == SetValue(Delta(Id("y"), Value("text")))


@pytest.mark.asyncio
async def test_assign_rejects_bad_value():
    control, sender = make_control()
    with pytest.raises(TypeError):
        await control.assign("x", 1.5)
    assert sender.requests.empty()


@pytest.mark.asyncio
async def test_assign_rejects_bad_id():
    control, _ = make_control()
    with pytest.raises(TypeError):
        await control.assign(7, "text")


@pytest.mark.asyncio
async def test_scene_rejects_non_scene():
    control, _ = make_control()
    with pytest.raises(TypeError):
        await control.scene("Spinner")


@pytest.mark.asyncio
async def test_closed_router_raises():
    control, sender = make_control()
    await sender.close()
    with pytest.raises(RouterError):
        await control.scene(Spinner())


def test_repr_hides_internals():
    control, _ = make_control()
    assert repr(control) == "Control()"