"""Layout widgets: the scene, the application frame, containers, rows and lists."""

from __future__ import annotations

import logging

from facade.live import SCENE_CHANGE, LiveAgent, Requirement
from facade.protocol import App, Container, Reaction, Spinner
from facade.utils import to_class
from facade.widgets.base import Widget, WidgetModel, element
from facade.widgets.simple import ComponentWidget, IconView, SpinnerWidget

log = logging.getLogger(__name__)


class AppWidget(Widget):
    """The application frame; its properties are an App."""

    def main_view(self, ctx: WidgetModel) -> str:
        app: App = self.props
        classes = ["v-application", "v-application--is-ltr", "theme--light"]
        content_style = "padding: 64px 0px 36px 256px;"
        return element(
            "div",
            element(
                "div",
                ctx.child(NavigationDrawerWidget, app.navigation_drawer),
                ctx.child(AppBarWidget, app.app_bar),
                element(
                    "div",
                    element(
                        "div",
                        ctx.child(ContainerWidget, app.content),
                        class_="v-content__wrap",
                    ),
                    class_="v-content",
                    style=content_style,
                ),
                ctx.child(FooterWidget, app.footer),
                class_="v-application--wrap",
            ),
            class_=classes,
        )


class AppBarWidget(Widget):
    """The top bar; its properties are a Bar."""

    def main_view(self, ctx: WidgetModel) -> str:
        classes = [
            "v-app-bar",
            "v-app-bar--fixed",
            "v-sheet",
            "v-sheet--tile",
            "theme--dark",
            "v-toolbar",
            "indigo",
        ]
        style = "".join(
            (
                "margin-top: 0px;",
                "transform: translateY(0px);",
                "left: 256px;",
                "right: 0px;",
            )
        )
        return element(
            "div",
            element(
                "div",
                element("div", class_="v-app-bar__nav-icon"),
                element("div", self.props.title.caption, class_="v-toolbar__title"),
                class_="v-toolbar__content",
                style="height: 64px;",
            ),
            class_=classes,
            style=style,
        )


class ContainerWidget(Widget):
    """A container holding one row; its properties are a Container."""

    def main_view(self, ctx: WidgetModel) -> str:
        container: Container = self.props
        classes = ["container", "fill-height"]
        if container.fluid:
            classes.append("container--fluid")
        return element("div", ctx.child(RowWidget, container.row), class_=classes)


class FooterWidget(Widget):
    """The page footer; its properties are a Footer."""

    def main_view(self, ctx: WidgetModel) -> str:
        classes = [
            "v-footer",
            "v-footer--fixed",
            "v-sheet",
            "v-sheet--tile",
            "theme--light",
            "indigo",
        ]
        style = "left: 0px; right: 0px; bottom: 0px;"
        return element(
            "div",
            element("span", "© 2019", class_="white--text"),
            class_=classes,
            style=style,
        )


class ListWidget(Widget):
    """A list of icon and title items; its properties are a List."""

    def main_view(self, ctx: WidgetModel) -> str:
        classes = ["v-list", "v-sheet", "v-sheet--tile", "theme--light"]
        if self.props.dense:
            classes.append("v-list--dense")
        return element("div", (self._item(item) for item in self.props.items), class_=classes)

    @staticmethod
    def _item(item) -> str:
        return element(
            "div",
            element("div", IconView(item.action).render(), class_="v-list-item__action"),
            element(
                "div",
                element("div", item.content.caption, class_="v-list-item__title"),
                class_="v-list-item__content",
            ),
            class_=["v-list-item", "v-list-item--link", "theme--light"],
        )


class NavigationDrawerWidget(Widget):
    """The side drawer; its properties are a NavigationDrawer."""

    def main_view(self, ctx: WidgetModel) -> str:
        classes = [
            "v-navigation-drawer",
            "v-navigation-drawer--fixed",
            "v-navigation-drawer--open",
            "theme--light",
        ]
        style = "".join(
            (
                "height: 100vh;",
                "top: 0px;",
                "max-height: calc(100% - 36px);",
                "transform: translateX(0%);",
                "width: 256px;",
            )
        )
        return element(
            "div",
            element(
                "div",
                ctx.child(ListWidget, self.props.list),
                class_="v-navigation-drawer__content",
            ),
            element("div", class_="v-navigation-drawer__border"),
            class_=classes,
            style=style,
        )


class RowWidget(Widget):
    """A row of columns; its properties are a Row."""

    def main_view(self, ctx: WidgetModel) -> str:
        row = self.props
        classes = ["row"]
        if row.wrap:
            classes.append("wrap")
        if row.fill:
            classes.append("fill")
        if row.reverse:
            classes.append("reverse")
        for setting in (row.direction, row.align, row.justify):
            if setting is not None:
                classes.append(to_class(setting))
        return element("div", (self._col(ctx, col) for col in row.cols), class_=classes)

    @staticmethod
    def _col(ctx: WidgetModel, col) -> str:
        return element(
            "div",
            [ctx.child(ComponentWidget, component) for component in col.components],
            class_=["col"],
        )


class SceneWidget(Widget):
    """Shows whatever scene the server has set, starting with the spinner."""

    def __init__(self, props=None) -> None:
        super().__init__(props)
        self.scene = Spinner()

    def recompose(self, props) -> set[Requirement]:
        self.props = props
        return {SCENE_CHANGE}

    def handle_incoming(self, event: Reaction) -> bool:
        if isinstance(event, (Spinner, App, Container)):
            log.info("Changing scene: %r", event)
            self.scene = event
            return True
        return False

    def main_view(self, ctx: WidgetModel) -> str:
        scene = self.scene
        if isinstance(scene, App):
            return ctx.child(AppWidget, scene)
        if isinstance(scene, Container):
            return ctx.child(ContainerWidget, scene)
        return ctx.child(SpinnerWidget, None)


def render_root(agent: LiveAgent) -> str:
    """Render the whole page for the agent's current scene."""
    return WidgetModel(SceneWidget, None, agent).view()