"""Widgets rendered to HTML and wired to the live agent."""

from __future__ import annotations

import html
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any

from facade.live import LiveAgent, Listen, Requirement
from facade.protocol import Reaction

log = logging.getLogger(__name__)

_VOID = frozenset({"area", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"})


class _Markup(str):
    """Text that is already HTML and must not be escaped again."""

    __slots__ = ()


def _attribute(name: str, value: Any) -> str:
    name = name.rstrip("_").replace("_", "-")
    if value is None or value is False:
        return ""
    if value is True:
        return name
    if isinstance(value, (list, tuple, set, frozenset)):
        text = " ".join(str(part) for part in value if part)
    else:
        text = str(value)
    return f'{name}="{html.escape(text, quote=True)}"'


def _children(args: Iterable[Any]) -> Iterator[str]:
    for arg in args:
        if arg is None or arg is False:
            continue
        if isinstance(arg, _Markup):
            yield arg
        elif isinstance(arg, str):
            yield html.escape(arg, quote=False)
        elif isinstance(arg, Iterable) and not isinstance(arg, (bytes, bytearray)):
            yield from _children(arg)
        else:
            yield html.escape(str(arg), quote=False)


def element(tag: str, *args: Any, **kwargs: Any) -> str:
    """Render an HTML element.

    Positional arguments are children: text is escaped, rendered elements are kept,
    iterables are flattened and None is skipped. Keyword arguments are attributes:
    a trailing underscore is dropped and underscores become hyphens; lists are joined
    with spaces, True gives a bare attribute and None or False omits it.
    """
    parts = [f"<{tag}"]
    for name, value in kwargs.items():
        rendered = _attribute(name, value)
        if rendered:
            parts.append(" " + rendered)
    parts.append(">")
    if tag in _VOID:
        if args:
            raise ValueError(f"<{tag}> cannot have children")
        return _Markup("".join(parts))
    parts.extend(_children(args))
    parts.append(f"</{tag}>")
    return _Markup("".join(parts))


class Widget(ABC):
    """Behaviour of one kind of widget; the constructor receives its properties."""

    def __init__(self, props: Any = None) -> None:
        self.props = props

    def recompose(self, props: Any) -> set[Requirement] | None:
        """Take new properties; return the requirements to listen to, or None to keep them."""
        self.props = props
        return None

    def handle_incoming(self, event: Reaction) -> bool:
        """React to data from the agent; return True if the view changed."""
        return False

    def handle_inner(self, msg: Any) -> bool:
        """React to an internal message; return True if the view changed.

        Widgets without internal messages ignore them and keep their view.
        """
        handled = False
        if not handled:
            log.debug("%s ignores inner msg: %r", type(self).__name__, msg)
        return handled

    @abstractmethod
    def main_view(self, ctx: WidgetModel) -> str:
        """Render the widget; ``ctx`` creates child widgets."""


class WidgetModel:
    """A mounted widget: its properties, its connection to the agent and its children."""

    def __init__(self, widget_cls: type[Widget], props: Any, agent: LiveAgent) -> None:
        self._agent = agent
        self.props = props
        self.widget = widget_cls(props)
        self.requirements: frozenset[Requirement] = frozenset()
        self._children: dict[tuple[type[Widget], int], WidgetModel] = {}
        self._previous: dict[tuple[type[Widget], int], WidgetModel] = {}
        self._cursor: dict[type[Widget], int] = {}
        self._bridge = agent.bridge(self.incoming)
        self._recompose()

    def _recompose(self) -> None:
        new = self.widget.recompose(self.props)
        if new is None:
            return
        new = frozenset(new)
        if new != self.requirements:
            self.requirements = new
            self._bridge.send(Listen(new))

    def incoming(self, event: Reaction) -> bool:
        """Deliver data from the agent to the widget."""
        log.debug("Incoming event: %r", event)
        return self.widget.handle_incoming(event)

    def inner(self, msg: Any) -> bool:
        """Deliver an internal message to the widget."""
        log.debug("Inner msg: %r", msg)
        return self.widget.handle_inner(msg)

    def change(self, props: Any) -> bool:
        """Replace the properties and recompose the widget."""
        self.props = props
        self._recompose()
        return True

    def child(self, widget_cls: type[Widget], props: Any) -> str:
        """Render a child widget, reusing the one mounted in the same place last time."""
        index = self._cursor.get(widget_cls, 0)
        self._cursor[widget_cls] = index + 1
        key = (widget_cls, index)
        model = self._previous.get(key) or self._children.get(key)
        if model is None:
            model = WidgetModel(widget_cls, props, self._agent)
        elif model.props != props:
            model.change(props)
        self._children[key] = model
        return model.view()

    def view(self) -> str:
        """Render the widget and its children."""
        self._previous = self._children
        self._children = {}
        self._cursor = {}
        try:
            return _Markup(self.widget.main_view(self))
        finally:
            for key, model in self._previous.items():
                if key not in self._children:
                    model._detach()
            self._previous = {}

    def _detach(self) -> None:
        for model in self._children.values():
            model._detach()
        self._children = {}
        self._bridge._disconnect()