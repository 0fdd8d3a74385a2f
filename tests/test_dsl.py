import pytest

from facade import dsl
from facade.protocol import (
    App,
    Component,
    Container,
    Footer,
    Icon,
    ListItem,
    Title,
    deserialize_reaction,
    serialize_reaction,
)


def _build():
    return dsl.scene(
        dsl.app(
            dsl.navigation_drawer(
                dsl.list_(
                    [
                        dsl.list_item(Icon.HOME, "Home"),
                        dsl.list_item(Icon.CONTACT_MAIL, "Contact"),
                    ]
                )
            ),
            dsl.container(dsl.row([dsl.col([]), dsl.col([Component.CARD])])),
        )
    )


def test_app_has_standard_bar_and_footer():
    built = _build()
    assert built.app_bar.nav_icon is Icon.MENU_SANDWICH
    assert built.app_bar.title == Title("Title")
    assert built.footer == Footer()


def test_list_is_dense_and_keeps_items():
    built = _build()
    drawer_list = built.navigation_drawer.list
    assert drawer_list.dense is True
    assert drawer_list.items == [
        ListItem(Icon.HOME, Title("Home")),
        ListItem(Icon.CONTACT_MAIL, Title("Contact")),
    ]


def test_container_is_fluid():
    assert dsl.container(dsl.row([])).fluid is True


def test_row_defaults():
    built = dsl.row(iter([dsl.col([])]))
    assert len(built.cols) == 1
    assert (built.wrap, built.fill, built.reverse) == (False, False, False)
    assert (built.direction, built.align, built.justify) == (None, None, None)


def test_col_has_no_widths():
    built = dsl.col((Component.LIST,))
    assert built.breakpoints == {}
    assert built.offsets == {}
    assert built.components == [Component.LIST]


def test_scene_returns_app():
    built = _build()
    assert isinstance(built, App)
    assert dsl.scene(built) is built


def test_scene_rejects_other_objects():
    with pytest.raises(TypeError):
        dsl.scene(dsl.container(dsl.row([])))


def test_built_scene_round_trips():
    built = _build()
    assert deserialize_reaction(serialize_reaction(built)) == built


def test_container_can_be_a_scene_itself():
    built = dsl.container(dsl.row([dsl.col([Component.LIST])]))
    decoded = deserialize_reaction(serialize_reaction(built))
    assert isinstance(decoded, Container)
    assert decoded == built