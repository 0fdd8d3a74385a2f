"""Handle used by applications to drive the UI."""

from __future__ import annotations

from typing import Any

from facade.protocol import App, Container, Delta, Id, Spinner, to_value
from facade.router import RouterSender, SetScene, SetValue


class Control:
    """Changes the scene and board values shown by connected browsers."""

    def __init__(self, sender: RouterSender) -> None:
        self._sender = sender

    def __repr__(self) -> str:
        return "Control()"

    async def scene(self, scene: Spinner | App | Container) -> None:
        """Replace the scene shown to every client."""
        if not isinstance(scene, (Spinner, App, Container)):
            raise TypeError(f"not a scene: {type(scene).__name__}")
        await self._sender.send(SetScene(scene))

    async def assign(self, id: Id | str, value: Any) -> None:
        """Set a board value; ``value`` may be None, a string, an integer or a Decimal."""
        ident = Id(id) if isinstance(id, str) else id
        if not isinstance(ident, Id):
            raise TypeError(f"not an id: {type(id).__name__}")
        await self._sender.send(SetValue(Delta(ident, to_value(value))))