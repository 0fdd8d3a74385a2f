"""Leaf widgets: placeholders, values, icons and simple components."""

from __future__ import annotations

import logging

from facade.live import Requirement
from facade.protocol import Delta, DynamicBind, FixedBind, Icon, Reaction, Value
from facade.widgets.base import Widget, WidgetModel, element

log = logging.getLogger(__name__)


class Blank(Widget):
    def main_view(self, ctx: WidgetModel) -> str:
        return element("div", element("img", src="./blank.svg", width=200), class_="blank")


class Button(Widget):
    def main_view(self, ctx: WidgetModel) -> str:
        return element("button", "Button!")


class SpinnerWidget(Widget):
    def main_view(self, ctx: WidgetModel) -> str:
        return element("div", element("img", src="./spinner.svg", width=200), class_="spinner")


class Welcome(Widget):
    def main_view(self, ctx: WidgetModel) -> str:
        return element("p", "Welcome!")


class Fixed(Widget):
    """Shows a constant value; its properties are a Value."""

    def main_view(self, ctx: WidgetModel) -> str:
        return element("p", str(self.props), class_="fixed")


class Dynamic(Widget):
    """Shows the board value with the Id given as properties."""

    def __init__(self, props=None) -> None:
        super().__init__(props)
        self.value = Value()

    def recompose(self, props) -> set[Requirement]:
        self.props = props
        return {Requirement(props)}

    def handle_incoming(self, event: Reaction) -> bool:
        if isinstance(event, Delta):
            log.debug("Changing value: %r", event)
            self.value = event.value
            return True
        return False

    def main_view(self, ctx: WidgetModel) -> str:
        return element("p", str(self.value), class_="dynamic")


class BindWidget(Widget):
    """Shows a fixed value or a board value, depending on its bind."""

    def main_view(self, ctx: WidgetModel) -> str:
        bind = self.props
        if isinstance(bind, FixedBind):
            return ctx.child(Fixed, bind.value)
        if isinstance(bind, DynamicBind):
            return ctx.child(Dynamic, bind.id)
        raise TypeError(f"not a bind: {type(bind).__name__}")


_ICON_NAMES = {
    Icon.HOME: "home",
    Icon.CONTACT_MAIL: "contact_mail",
    Icon.MENU_SANDWICH: "menu",
}


def icon_class(icon: Icon) -> str:
    """Material icon name of an icon."""
    return _ICON_NAMES[icon]


class IconView:
    """Renders an icon inside any widget."""

    def __init__(self, icon: Icon) -> None:
        self.icon = icon

    def render(self) -> str:
        classes = ["v-icon", "notranslate", "material-icons", "theme--light"]
        return element("i", icon_class(self.icon), class_=classes)


class ComponentWidget(Widget):
    def main_view(self, ctx: WidgetModel) -> str:
        return element("p", "Component")


class CardWidget(Widget):
    def main_view(self, ctx: WidgetModel) -> str:
        return element("div", class_=["v-card"])