from html.parser import HTMLParser

import pytest

from facade.live import SCENE_CHANGE, LiveAgent, Requirement
from facade.protocol import Container, Delta, Id, Row, Spinner, Value
from facade.widgets.base import Widget, WidgetModel, element

_VOID = {"img"}


class _Tree(HTMLParser):
    def __init__(self):
        super().__init__()
        self.root = {"tag": None, "attrs": {}, "children": []}
        self.stack = [self.root]

    def handle_starttag(self, tag, attrs):
        node = {"tag": tag, "attrs": dict(attrs), "children": []}
        self.stack[-1]["children"].append(node)
        if tag not in _VOID:
            self.stack.append(node)

    def handle_endtag(self, tag):
        self.stack.pop()

    def handle_data(self, data):
        self.stack[-1]["children"].append(data)


def parse(markup):
    tree = _Tree()
    tree.feed(markup)
    tree.close()
    return tree.root["children"]


def text(node):
    return "".join(child for child in node["children"] if isinstance(child, str))


def test_text_is_escaped_and_round_trips():
    raw = "<b>&\"quoted\"</b>"
    [node] = parse(element("p", raw))
    assert node["tag"] == "p"
    assert node["children"] == [raw]


def test_nested_elements_are_not_escaped():
    [outer] = parse(element("div", element("span", "inner")))
    [inner] = outer["children"]
    assert inner["tag"] == "span"
    assert text(inner) == "inner"


def test_attributes():
    markup = element("div", class_=["a", "", "b"], data_role="x", hidden=True, title=None, lang=False)
    [node] = parse(markup)
    assert node["attrs"] == {"class": "a b", "data-role": "x", "hidden": None}


def test_attribute_values_are_escaped():
    value = 'say "hi" & <go>'
    [node] = parse(element("a", title=value))
    assert node["attrs"]["title"] == value


def test_iterables_are_flattened():
    names = ["one", "two", "three"]
    [node] = parse(element("ul", (element("li", name) for name in names), None))
    assert [text(child) for child in node["children"]] == names


def test_void_element():
    markup = element("img", src="a.svg", width=200)
    assert "</img>" not in markup
    [node] = parse(markup)
    assert node["attrs"] == {"src": "a.svg", "width": "200"}
    with pytest.raises(ValueError):
        element("img", "child")


class Plain(Widget):
    def main_view(self, ctx):
        return element("p", "plain")


class Counter(Widget):
    def __init__(self, props):
        super().__init__(props)
        self.count = 0

    def handle_inner(self, msg):
        self.count += msg
        return True

    def main_view(self, ctx):
        return element("span", self.count)


class Watcher(Widget):
    def __init__(self, props):
        super().__init__(props)
        self.events = []

    def recompose(self, props):
        super().recompose(props)
        return {Requirement(props)}

    def handle_incoming(self, event):
        self.events.append(event)
        return True

    def main_view(self, ctx):
        return element("span", str(self.props))


class SceneWatcher(Watcher):
    def recompose(self, props):
        self.props = props
        return {SCENE_CHANGE}


def test_widget_is_abstract():
    with pytest.raises(TypeError):
        Widget(None)


def test_default_handlers_do_not_render():
    model = WidgetModel(Plain, None, LiveAgent())
    assert model.incoming(Spinner()) is False
    assert model.inner("msg") is False
    assert model.requirements == frozenset()
    assert text(parse(model.view())[0]) == "plain"


def test_inner_message_reaches_widget():
    model = WidgetModel(Counter, None, LiveAgent())
    assert model.inner(2) is True
    assert model.inner(3) is True
    assert model.widget.count == 5
    assert text(parse(model.view())[0]) == "5"


def test_existing_value_is_delivered_on_mount():
    agent = LiveAgent()
    delta = Delta(Id("a"), Value("1"))
    agent.receive(delta)
    model = WidgetModel(Watcher, Id("a"), agent)
    assert model.widget.events == [delta]
    assert model.requirements == {Requirement(Id("a"))}


def test_change_moves_subscription():
    agent = LiveAgent()
    model = WidgetModel(Watcher, Id("a"), agent)
    assert model.change(Id("b")) is True
    assert model.requirements == {Requirement(Id("b"))}
    agent.receive(Delta(Id("a"), Value("x")))
    second = Delta(Id("b"), Value("y"))
    agent.receive(second)
    assert model.widget.events == [second]


def test_unchanged_requirements_are_not_resent():
    agent = LiveAgent()
    model = WidgetModel(SceneWatcher, 1, agent)
    model.change(2)
    model.change(3)
    assert model.widget.events == [Spinner()]
    assert model.widget.props == 3


def test_children_are_reused_and_updated():
    created = []

    class Leaf(Widget):
        def __init__(self, props):
            super().__init__(props)
            created.append(self)

        def main_view(self, ctx):
            return element("i", self.props)

    class Parent(Widget):
        def main_view(self, ctx):
            return element("div", ctx.child(Leaf, self.props))

    model = WidgetModel(Parent, "x", LiveAgent())
    model.view()
    model.view()
    assert len(created) == 1
    model.change("y")
    [outer] = parse(model.view())
    assert text(outer["children"][0]) == "y"
    assert len(created) == 1


def test_dropped_child_stops_listening():
    watchers = []

    class Tracked(SceneWatcher):
        def __init__(self, props):
            super().__init__(props)
            watchers.append(self)

    class Parent(Widget):
        def main_view(self, ctx):
            return element("div", ctx.child(Tracked, None) if self.props else None)

    agent = LiveAgent()
    model = WidgetModel(Parent, True, agent)
    model.view()
    model.change(False)
    model.view()
    agent.receive(Container(fluid=True, row=Row(cols=[])))
    assert [w.events for w in watchers] == [[Spinner()]]