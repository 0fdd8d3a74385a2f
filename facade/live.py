"""Browser-side agent that keeps the latest scene and board and feeds them to widgets."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from facade.protocol import (
    Action,
    App,
    Container,
    Delta,
    Id,
    ProtocolError,
    Reaction,
    Scene,
    Spinner,
    Value,
    deserialize_reaction,
    serialize_action,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Requirement:
    """What a listener wants to hear about: the scene (``id`` is None) or one board value."""

    id: Id | None = None

    @property
    def is_scene_change(self) -> bool:
        return self.id is None


SCENE_CHANGE = Requirement()


def requirement_for(reaction: Reaction) -> Requirement:
    """The requirement that a reaction satisfies."""
    if isinstance(reaction, Delta):
        return Requirement(reaction.id)
    if isinstance(reaction, (Spinner, App, Container)):
        return SCENE_CHANGE
    raise TypeError(f"not a reaction: {type(reaction).__name__}")


@dataclass(frozen=True)
class Listen:
    """Replace a listener's requirements; an empty set unsubscribes it."""

    requirements: frozenset[Requirement] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "requirements", frozenset(self.requirements))


@dataclass(frozen=True)
class ActionRequest:
    """Forward a user action to the server."""

    action: Action


Request = Listen | ActionRequest
Handler = Callable[[Reaction], object]


class Bridge:
    """A listener's connection to the agent."""

    def __init__(self, agent: LiveAgent, who: int) -> None:
        self._agent = agent
        self.id = who
        self._connected = True

    def send(self, request: Request) -> None:
        """Pass a request to the agent on behalf of this listener."""
        if not self._connected:
            raise RuntimeError("bridge is disconnected")
        self._agent.handle(request, self.id)

    def _disconnect(self) -> None:
        if self._connected:
            self._connected = False
            self._agent._disconnect(self.id)


class LiveAgent:
    """Holds the current scene and board and notifies listeners of what they require.

    ``outgoing`` is called with the encoded bytes of every action to send to the server.
    """

    def __init__(self, outgoing: Callable[[bytes], object] | None = None) -> None:
        self._outgoing = outgoing
        self._handlers: dict[int, Handler] = {}
        self._ids = itertools.count()
        self.subscriptions: dict[int, frozenset[Requirement]] = {}
        self.listeners: dict[Requirement, dict[int, None]] = {}
        self.scene: Scene = Spinner()
        self.board: dict[Id, Value] = {}

    def bridge(self, callback: Handler) -> Bridge:
        """Connect a listener whose callback receives reactions."""
        who = next(self._ids)
        self._handlers[who] = callback
        return Bridge(self, who)

    def receive(self, reaction: Reaction | bytes | str) -> None:
        """Apply a reaction from the server; undecodable messages are ignored."""
        if isinstance(reaction, (bytes, bytearray, str)):
            try:
                reaction = deserialize_reaction(bytes(reaction) if isinstance(reaction, bytearray) else reaction)
            except ProtocolError as exc:
                log.debug("Dropped message: %s", exc)
                return
        requirement = requirement_for(reaction)
        if isinstance(reaction, Delta):
            log.debug("Delta: %r", reaction)
            self.board[reaction.id] = reaction.value
        else:
            log.debug("Scene: %r", reaction)
            self.scene = reaction
        self._send_data_for(requirement)

    def handle(self, request: Request, who: int) -> None:
        """Process a request from the listener ``who``."""
        match request:
            case Listen(requirements=requirements):
                self._unsubscribe(who)
                if requirements:
                    for requirement in requirements:
                        log.debug("Subscribed to: %r", requirement)
                        self.listeners.setdefault(requirement, {})[who] = None
                        self._send_data_to(requirement, who)
                    self.subscriptions[who] = requirements
            case ActionRequest(action=action):
                if self._outgoing is None:
                    raise RuntimeError("no connection to send actions through")
                self._outgoing(serialize_action(action))
            case _:
                raise TypeError(f"unknown request: {type(request).__name__}")

    def _unsubscribe(self, who: int) -> None:
        for requirement in self.subscriptions.pop(who, frozenset()):
            log.debug("Unsubscribed from: %r", requirement)
            listeners = self.listeners.get(requirement)
            if listeners is not None:
                listeners.pop(who, None)
                if not listeners:
                    del self.listeners[requirement]

    def _disconnect(self, who: int) -> None:
        self._unsubscribe(who)
        self._handlers.pop(who, None)

    def _send_data_to(self, requirement: Requirement, who: int) -> None:
        handler = self._handlers.get(who)
        if handler is None:
            return
        if requirement.id is None:
            handler(self.scene)
            return
        value = self.board.get(requirement.id)
        if value is not None:
            handler(Delta(requirement.id, value))

    def _send_data_for(self, requirement: Requirement) -> None:
        for who in list(self.listeners.get(requirement, {})):
            self._send_data_to(requirement, who)


def _listen(requirements: Iterable[Requirement]) -> Listen:
    return Listen(frozenset(requirements))