"""Helpers for building scenes concisely."""

from __future__ import annotations

from collections.abc import Iterable

from facade.protocol import (
    App,
    Bar,
    Col,
    Component,
    Container,
    Footer,
    Icon,
    List,
    ListItem,
    NavigationDrawer,
    Row,
    Title,
)


def scene(app: App) -> App:
    """Wrap an application as a scene."""
    if not isinstance(app, App):
        raise TypeError(f"a scene is built from an App, got {type(app).__name__}")
    return app


def app(navigation_drawer: NavigationDrawer, content: Container) -> App:
    """Build an application with the standard app bar and footer."""
    return App(
        navigation_drawer=navigation_drawer,
        app_bar=Bar(nav_icon=Icon.MENU_SANDWICH, title=Title(caption="Title")),
        content=content,
        footer=Footer(),
    )


def navigation_drawer(item_list: List) -> NavigationDrawer:
    return NavigationDrawer(list=item_list)


def list_(items: Iterable[ListItem]) -> List:
    """Build a dense list."""
    return List(dense=True, items=list(items))


def list_item(icon: Icon, title: str) -> ListItem:
    return ListItem(action=icon, content=Title(caption=title))


def container(row: Row) -> Container:
    """Build a fluid container."""
    return Container(fluid=True, row=row)


def row(cols: Iterable[Col]) -> Row:
    """Build a plain row of columns."""
    return Row(
        cols=list(cols),
        wrap=False,
        fill=False,
        reverse=False,
        direction=None,
        align=None,
        justify=None,
    )


def col(components: Iterable[Component]) -> Col:
    """Build a column with no breakpoints or offsets."""
    return Col(breakpoints={}, offsets={}, components=list(components))