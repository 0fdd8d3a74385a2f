"""Fan-out of scenes and board values to every connected subscriber."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import AsyncIterator
from dataclasses import dataclass

from facade.protocol import App, Container, Delta, Id, Reaction, Scene, Spinner, Value

_CAPACITY = 8


class RouterError(Exception):
    """Raised when a message cannot be delivered through the router."""


class Subscription:
    """Bounded stream of reactions delivered to one subscriber."""

    def __init__(self, capacity: int = _CAPACITY) -> None:
        self._capacity = capacity
        self._items: deque[Reaction] = deque()
        self._closed = False
        self._finished = False
        self._changed = asyncio.Condition()

    @property
    def is_closed(self) -> bool:
        """True once the receiving side has closed the subscription."""
        return self._closed

    async def send(self, reaction: Reaction) -> None:
        """Queue a reaction, waiting while the subscription is full."""
        async with self._changed:
            await self._changed.wait_for(
                lambda: self._closed or self._finished or len(self._items) < self._capacity
            )
            if self._closed or self._finished:
                raise RouterError("subscription is closed")
            self._items.append(reaction)
            self._changed.notify_all()

    async def get(self) -> Reaction | None:
        """Return the next reaction, or None once the stream has ended."""
        async with self._changed:
            await self._changed.wait_for(
                lambda: bool(self._items) or self._closed or self._finished
            )
            if self._closed or not self._items:
                return None
            reaction = self._items.popleft()
            self._changed.notify_all()
            return reaction

    async def close(self) -> None:
        """Stop receiving; pending reactions are dropped and senders fail."""
        async with self._changed:
            self._closed = True
            self._items.clear()
            self._changed.notify_all()

    async def _finish(self) -> None:
        async with self._changed:
            self._finished = True
            self._changed.notify_all()

    async def __aiter__(self) -> AsyncIterator[Reaction]:
        while (reaction := await self.get()) is not None:
            yield reaction


@dataclass(frozen=True)
class Subscribe:
    subscription: Subscription


@dataclass(frozen=True)
class SetScene:
    scene: Scene


@dataclass(frozen=True)
class SetValue:
    delta: Delta


Request = Subscribe | SetScene | SetValue


class RouterSender:
    """Sending side of the router's request queue."""

    def __init__(self, requests: asyncio.Queue | None = None) -> None:
        self.requests: asyncio.Queue = (
            asyncio.Queue(_CAPACITY) if requests is None else requests
        )
        self._closed = False

    async def send(self, request: Request) -> None:
        """Pass a request to the router."""
        if self._closed:
            raise RouterError("router is closed")
        await self.requests.put(request)

    async def register(self) -> Subscription:
        """Subscribe to the router and return the new subscription."""
        subscription = Subscription()
        await self.send(Subscribe(subscription))
        return subscription

    async def close(self) -> None:
        """Tell the router to stop once earlier requests are handled."""
        if not self._closed:
            self._closed = True
            await self.requests.put(None)


async def _deliver(subscription: Subscription, reaction: Reaction) -> bool:
    try:
        await subscription.send(reaction)
    except RouterError:
        return False
    return True


async def route(requests: asyncio.Queue) -> None:
    """Serve requests until the queue yields None.

    New subscribers get the current scene followed by every board value;
    later scene changes and value updates go to all subscribers.
    """
    subscribers: list[Subscription] = []
    board: dict[Id, Value] = {}
    scene: Scene = Spinner()
    try:
        while (request := await requests.get()) is not None:
            failed = False
            match request:
                case Subscribe(subscription=subscription):
                    failed |= not await _deliver(subscription, scene)
                    for ident, value in list(board.items()):
                        failed |= not await _deliver(subscription, Delta(ident, value))
                    subscribers.append(subscription)
                case SetScene(scene=new_scene):
                    if not isinstance(new_scene, (Spinner, App, Container)):
                        raise TypeError(f"not a scene: {type(new_scene).__name__}")
                    if new_scene != scene:
                        scene = new_scene
                        for subscription in list(subscribers):
                            failed |= not await _deliver(subscription, scene)
                case SetValue(delta=delta):
                    board[delta.id] = delta.value
                    for subscription in list(subscribers):
                        failed |= not await _deliver(subscription, delta)
                case _:
                    raise TypeError(f"unknown request: {type(request).__name__}")
            if failed:
                subscribers = [sub for sub in subscribers if not sub.is_closed]
    finally:
        for subscription in subscribers:
            await subscription._finish()