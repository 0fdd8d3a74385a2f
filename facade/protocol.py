"""Messages exchanged between the server and the browser UI, and their JSON form."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import total_ordering
from typing import Any, Union


class ProtocolError(ValueError):
    """Raised when a message cannot be encoded or decoded."""


class Kind(Enum):
    CLICK = "Click"


class Icon(Enum):
    HOME = "Home"
    CONTACT_MAIL = "ContactMail"
    MENU_SANDWICH = "MenuSandwich"


class Direction(Enum):
    ROW = "Row"
    COLUMN = "Column"


class Align(Enum):
    START = "Start"
    CENTER = "Center"
    END = "End"
    SPACE_AROUND = "SpaceAround"
    SPACE_BETWEEN = "SpaceBetween"


class Justify(Enum):
    START = "Start"
    CENTER = "Center"
    END = "End"
    SPACE_AROUND = "SpaceAround"
    SPACE_BETWEEN = "SpaceBetween"


class Breakpoint(Enum):
    X_SMALL = "XSmall"
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    X_LARGE = "XLarge"


class Cols(Enum):
    N1 = "N1"
    N2 = "N2"
    N3 = "N3"
    N4 = "N4"
    N5 = "N5"
    N6 = "N6"
    N7 = "N7"
    N8 = "N8"
    N9 = "N9"
    N10 = "N10"
    N11 = "N11"
    N12 = "N12"


class Component(Enum):
    LIST = "List"
    CARD = "Card"


@dataclass(frozen=True, order=True)
class Id:
    """Identifier of a value on the shared board."""

    name: str = "<default>"

    def __str__(self) -> str:
        return self.name


def _decimal_text(number: Decimal) -> str:
    return format(number, "f")


_VALUE_RANK = {type(None): 0, str: 1, Decimal: 2}


@total_ordering
@dataclass(frozen=True)
class Value:
    """A board value: nothing, a string or a decimal number."""

    content: Union[str, Decimal, None] = None

    def __post_init__(self) -> None:
        content = self.content
        if content is None or isinstance(content, str):
            return
        if isinstance(content, Decimal):
            if not content.is_finite():
                raise ValueError(f"decimal value must be finite, got {content}")
            return
        raise TypeError(f"unsupported value content: {type(content).__name__}")

    @property
    def is_nothing(self) -> bool:
        return self.content is None

    def _key(self) -> tuple:
        rank = _VALUE_RANK[type(self.content)]
        return (rank, self.content) if self.content is not None else (rank,)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        if self.content is None:
            return ""
        if isinstance(self.content, Decimal):
            return _decimal_text(self.content)
        return self.content


def to_value(value: Any) -> Value:
    """Convert None, a string, an integer or a Decimal to a Value."""
    if isinstance(value, Value):
        return value
    if value is None:
        return Value()
    if isinstance(value, bool):
        raise TypeError("booleans cannot be converted to a value")
    if isinstance(value, str):
        return Value(value)
    if isinstance(value, int):
        return Value(Decimal(value))
    if isinstance(value, Decimal):
        return Value(value)
    raise TypeError(f"cannot convert {type(value).__name__} to a value")


@dataclass(frozen=True, order=True)
class Delta:
    id: Id
    value: Value


@dataclass(frozen=True, order=True)
class DynamicBind:
    id: Id


@dataclass(frozen=True, order=True)
class FixedBind:
    value: Value


@dataclass(frozen=True)
class Action:
    id: Id
    kind: Kind


@dataclass
class Title:
    caption: str


@dataclass
class Bar:
    nav_icon: Icon
    title: Title


@dataclass
class Footer:
    pass


@dataclass
class Card:
    pass


@dataclass
class ListItem:
    action: Icon
    content: Title


@dataclass
class List:
    dense: bool
    items: list[ListItem] = field(default_factory=list)


@dataclass
class NavigationDrawer:
    list: List


@dataclass
class Col:
    breakpoints: dict[Breakpoint, Cols] = field(default_factory=dict)
    offsets: dict[Breakpoint, Cols] = field(default_factory=dict)
    components: list[Component] = field(default_factory=list)


@dataclass
class Row:
    cols: list[Col]
    wrap: bool = False
    fill: bool = False
    reverse: bool = False
    direction: Direction | None = None
    align: Align | None = None
    justify: Justify | None = None


@dataclass
class Container:
    fluid: bool
    row: Row


@dataclass
class App:
    navigation_drawer: NavigationDrawer
    app_bar: Bar
    content: Container
    footer: Footer


@dataclass(frozen=True)
class Spinner:
    """The scene shown while nothing else has been set."""


Scene = Union[Spinner, App, Container]
Reaction = Union[Spinner, App, Container, Delta]


def overlay_id(reaction: Reaction) -> Id | None:
    """Key under which a reaction replaces earlier ones: None for scenes."""
    if isinstance(reaction, Delta):
        return reaction.id
    return None


# ---- encoding ----------------------------------------------------------------


def _encode_value(value: Value) -> Any:
    content = value.content
    if content is None:
        return "Nothing"
    if isinstance(content, str):
        return {"String": content}
    return {"Decimal": _decimal_text(content)}


def _encode_title(title: Title) -> dict:
    return {"caption": title.caption}


def _encode_list(item_list: List) -> dict:
    return {
        "dense": item_list.dense,
        "items": [
            {"action": item.action.value, "content": _encode_title(item.content)}
            for item in item_list.items
        ],
    }


def _encode_optional(member: Enum | None) -> Any:
    return None if member is None else member.value


def _encode_col(col: Col) -> dict:
    return {
        "breakpoints": {bp.value: cols.value for bp, cols in col.breakpoints.items()},
        "offsets": {bp.value: cols.value for bp, cols in col.offsets.items()},
        "components": [component.value for component in col.components],
    }


def _encode_row(row: Row) -> dict:
    return {
        "cols": [_encode_col(col) for col in row.cols],
        "wrap": row.wrap,
        "fill": row.fill,
        "reverse": row.reverse,
        "direction": _encode_optional(row.direction),
        "align": _encode_optional(row.align),
        "justify": _encode_optional(row.justify),
    }


def _encode_container(container: Container) -> dict:
    return {"fluid": container.fluid, "row": _encode_row(container.row)}


def _encode_app(app: App) -> dict:
    return {
        "navigation_drawer": {"list": _encode_list(app.navigation_drawer.list)},
        "app_bar": {
            "nav_icon": app.app_bar.nav_icon.value,
            "title": _encode_title(app.app_bar.title),
        },
        "content": _encode_container(app.content),
        "footer": {},
    }


def _encode_scene(scene: Scene) -> Any:
    if isinstance(scene, Spinner):
        return "Spinner"
    if isinstance(scene, App):
        return {"App": _encode_app(scene)}
    if isinstance(scene, Container):
        return {"Container": _encode_container(scene)}
    raise ProtocolError(f"not a scene: {type(scene).__name__}")


def _encode_reaction(reaction: Reaction) -> dict:
    if isinstance(reaction, Delta):
        return {"Delta": {"id": reaction.id.name, "value": _encode_value(reaction.value)}}
    return {"Scene": _encode_scene(reaction)}


def _dump(payload: Any) -> bytes:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def serialize_reaction(reaction: Reaction) -> bytes:
    """Encode a reaction as compact JSON bytes."""
    return _dump(_encode_reaction(reaction))


def serialize_action(action: Action) -> bytes:
    """Encode an action as compact JSON bytes."""
    return _dump({"id": action.id.name, "kind": action.kind.value})


# ---- decoding ----------------------------------------------------------------


def _object(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise ProtocolError(f"expected an object for {what}, got {type(data).__name__}")
    return data


def _member(obj: dict, key: str) -> Any:
    if key not in obj:
        raise ProtocolError(f"missing field `{key}`")
    return obj[key]


def _string(data: Any, what: str) -> str:
    if not isinstance(data, str):
        raise ProtocolError(f"expected a string for {what}, got {type(data).__name__}")
    return data


def _boolean(data: Any, what: str) -> bool:
    if not isinstance(data, bool):
        raise ProtocolError(f"expected a boolean for {what}, got {type(data).__name__}")
    return data


def _enum(cls: type[Enum], data: Any) -> Any:
    text = _string(data, cls.__name__)
    try:
        return cls(text)
    except ValueError:
        raise ProtocolError(f"unknown variant `{text}` of {cls.__name__}") from None


def _optional_enum(cls: type[Enum], data: Any) -> Any:
    return None if data is None else _enum(cls, data)


def _list(data: Any, what: str) -> list:
    if not isinstance(data, list):
        raise ProtocolError(f"expected an array for {what}, got {type(data).__name__}")
    return data


_UNIT = object()


def _variant(data: Any, what: str) -> tuple[str, Any]:
    if isinstance(data, str):
        return data, _UNIT
    if isinstance(data, dict) and len(data) == 1:
        return next(iter(data.items()))
    raise ProtocolError(f"expected an enum value for {what}")


def _decode_decimal(data: Any) -> Decimal:
    if isinstance(data, bool):
        raise ProtocolError("expected a decimal, got a boolean")
    if isinstance(data, str):
        try:
            number = Decimal(data)
        except InvalidOperation:
            raise ProtocolError(f"invalid decimal `{data}`") from None
    elif isinstance(data, int):
        number = Decimal(data)
    elif isinstance(data, float):
        number = Decimal(repr(data))
    else:
        raise ProtocolError(f"expected a decimal, got {type(data).__name__}")
    if not number.is_finite():
        raise ProtocolError(f"invalid decimal `{data}`")
    return number


def _decode_value(data: Any) -> Value:
    tag, payload = _variant(data, "Value")
    if tag == "Nothing" and payload is _UNIT:
        return Value()
    if tag == "String" and payload is not _UNIT:
        return Value(_string(payload, "String"))
    if tag == "Decimal" and payload is not _UNIT:
        return Value(_decode_decimal(payload))
    raise ProtocolError(f"unknown variant `{tag}` of Value")


def _decode_id(data: Any) -> Id:
    return Id(_string(data, "Id"))


def _decode_delta(data: Any) -> Delta:
    obj = _object(data, "Delta")
    return Delta(_decode_id(_member(obj, "id")), _decode_value(_member(obj, "value")))


def _decode_title(data: Any) -> Title:
    obj = _object(data, "Title")
    return Title(_string(_member(obj, "caption"), "caption"))


def _decode_list(data: Any) -> List:
    obj = _object(data, "List")
    items = []
    for raw in _list(_member(obj, "items"), "items"):
        item = _object(raw, "ListItem")
        items.append(
            ListItem(
                action=_enum(Icon, _member(item, "action")),
                content=_decode_title(_member(item, "content")),
            )
        )
    return List(dense=_boolean(_member(obj, "dense"), "dense"), items=items)


def _decode_widths(data: Any, what: str) -> dict[Breakpoint, Cols]:
    return {
        _enum(Breakpoint, key): _enum(Cols, value)
        for key, value in _object(data, what).items()
    }


def _decode_col(data: Any) -> Col:
    obj = _object(data, "Col")
    return Col(
        breakpoints=_decode_widths(_member(obj, "breakpoints"), "breakpoints"),
        offsets=_decode_widths(_member(obj, "offsets"), "offsets"),
        components=[
            _enum(Component, raw) for raw in _list(_member(obj, "components"), "components")
        ],
    )


def _decode_row(data: Any) -> Row:
    obj = _object(data, "Row")
    return Row(
        cols=[_decode_col(raw) for raw in _list(_member(obj, "cols"), "cols")],
        wrap=_boolean(_member(obj, "wrap"), "wrap"),
        fill=_boolean(_member(obj, "fill"), "fill"),
        reverse=_boolean(_member(obj, "reverse"), "reverse"),
        direction=_optional_enum(Direction, obj.get("direction")),
        align=_optional_enum(Align, obj.get("align")),
        justify=_optional_enum(Justify, obj.get("justify")),
    )


def _decode_container(data: Any) -> Container:
    obj = _object(data, "Container")
    return Container(
        fluid=_boolean(_member(obj, "fluid"), "fluid"),
        row=_decode_row(_member(obj, "row")),
    )


def _decode_app(data: Any) -> App:
    obj = _object(data, "App")
    drawer = _object(_member(obj, "navigation_drawer"), "NavigationDrawer")
    bar = _object(_member(obj, "app_bar"), "Bar")
    _object(_member(obj, "footer"), "Footer")
    return App(
        navigation_drawer=NavigationDrawer(list=_decode_list(_member(drawer, "list"))),
        app_bar=Bar(
            nav_icon=_enum(Icon, _member(bar, "nav_icon")),
            title=_decode_title(_member(bar, "title")),
        ),
        content=_decode_container(_member(obj, "content")),
        footer=Footer(),
    )


def _decode_scene(data: Any) -> Scene:
    tag, payload = _variant(data, "Scene")
    if tag == "Spinner" and payload is _UNIT:
        return Spinner()
    if tag == "App" and payload is not _UNIT:
        return _decode_app(payload)
    if tag == "Container" and payload is not _UNIT:
        return _decode_container(payload)
    raise ProtocolError(f"unknown variant `{tag}` of Scene")


def _decode_reaction(data: Any) -> Reaction:
    tag, payload = _variant(data, "Reaction")
    if tag == "Scene" and payload is not _UNIT:
        return _decode_scene(payload)
    if tag == "Delta" and payload is not _UNIT:
        return _decode_delta(payload)
    raise ProtocolError(f"unknown variant `{tag}` of Reaction")


def _decode_action(data: Any) -> Action:
    obj = _object(data, "Action")
    return Action(id=_decode_id(_member(obj, "id")), kind=_enum(Kind, _member(obj, "kind")))


def _load(data: bytes | str) -> Any:
    try:
        return json.loads(data)
    except ValueError as exc:
        raise ProtocolError(f"serialization error: {exc}") from exc


def deserialize_reaction(data: bytes | str) -> Reaction:
    """Decode a reaction from JSON."""
    return _decode_reaction(_load(data))


def deserialize_action(data: bytes | str) -> Action:
    """Decode an action from JSON."""
    return _decode_action(_load(data))