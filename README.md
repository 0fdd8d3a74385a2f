# facade

`facade` lets an asyncio program drive a live dashboard in the browser. You
describe a *scene* (an application frame with a navigation drawer, an app bar,
a content container and a footer) and assign values to named ids. A built-in
aiohttp server streams the scene and the values over a WebSocket: a client
that connects receives the current scene and every known value, and then each
change after that.

## Modules

- `facade.protocol` – the data model and its JSON wire format: `App`,
  `NavigationDrawer`, `List`, `ListItem`, `Title`, `Bar`, `Footer`, `Card`,
  `Container`, `Row`, `Col`, `Spinner`, the enums `Icon`, `Direction`,
  `Align`, `Justify`, `Breakpoint`, `Cols`, `Component` and `Kind`, plus
  `Id`, `Value`, `Delta`, `Action`, `DynamicBind` and `FixedBind`.
  `to_value` converts `None`, a string, an integer or a `Decimal` to a
  `Value`. `serialize_reaction` / `deserialize_reaction` and
  `serialize_action` / `deserialize_action` encode and decode messages;
  malformed input raises `ProtocolError`.
- `facade.dsl` – short constructors: `scene`, `app`, `navigation_drawer`,
  `list_`, `list_item`, `container`, `row` and `col`. `app` adds an app bar
  titled "Title" with the `Icon.MENU_SANDWICH` icon and an empty footer;
  `list_` builds a dense list; `container` builds a fluid container.
- `facade.settings` – `Settings` and `load_settings`.
- `facade.router` – `route` keeps the current scene and the board of values
  and fans updates out to every `Subscription`; `RouterSender` feeds it.
- `facade.server` – `load_assets`, `build_app`, `process_ws` and `serve`.
- `facade.control` – `Control`, the handle returned by `facade.app.start`.
- `facade.app` – `start` and `routine`.
- `facade.utils` – `to_class`, CSS class names for `Align`, `Direction`,
  `Justify` and `(Breakpoint, Cols)` pairs.
- `facade.live` – `LiveAgent`, the client-side model that holds the latest
  scene and board and notifies listeners of the `Requirement`s they asked for.
- `facade.widgets` – widgets that render a scene to HTML strings, with
  `facade.widgets.layout.render_root(agent)` rendering the whole page.

## Quick start

```python
import asyncio

from facade.app import start
from facade.dsl import app, col, container, list_, list_item, navigation_drawer, row, scene
from facade.protocol import Icon


async def main() -> None:
    control = await start(assets={"index.html": b"<html>...</html>"})
    await control.scene(
        scene(
            app(
                navigation_drawer(
                    list_([
                        list_item(Icon.HOME, "Home"),
                        list_item(Icon.CONTACT_MAIL, "Contact"),
                    ])
                ),
                container(row([col([]), col([]), col([])])),
            )
        )
    )
    await control.assign("temperature", 21)
    await control.assign("status", "ready")
    await asyncio.Event().wait()


asyncio.run(main())
```

`start` must be awaited inside a running event loop. It runs the router and
the server as a background task and returns a `Control`. Both `Control.scene`
and `Control.assign` are coroutines. `assign` accepts an `Id` or a string;
integers and `Decimal`s become decimal values, strings stay strings and
`None` stores an empty value.

`assets` may be a mapping of paths to file contents or the bytes of a
gzipped tar archive; `load_assets` keeps its non-empty files and strips the
leading `./` from their names.

## The server

- `GET /` answers with a 301 redirect to `/index.html`.
- `GET /live` (or any path below it) upgrades to a WebSocket. Reactions are
  sent as binary JSON messages. Each connection is throttled: once per
  interval it sends only the latest reaction for each id and the latest scene.
- Any other path is served from the assets with a content type guessed from
  its name, or answered with 404.

`serve` raises `ServerError("bind error")` if it cannot listen.

## Configuration

`load_settings(name="facade", environ=None)` merges, from lowest to highest
priority:

1. defaults: `ms = 100`, `address = "127.0.0.1"`, `port = 12400`;
2. an optional file `facade.toml`, or else `facade.json`, in the current
   directory;
3. environment variables starting with `FACADE_` (any case), such as
   `FACADE_PORT` or `FACADE_MS`.

`ms` is the throttle interval in milliseconds; `address` and `port` are where
the server listens. Invalid or out-of-range values raise `ValueError`.

## Widgets

`render_root(agent)` mounts a `SceneWidget` on a `LiveAgent` and returns the
page as HTML. Feed the agent server messages with `LiveAgent.receive` (bytes
that cannot be decoded are dropped) and render again to see the new scene.
Widgets that listen to board values, such as `Dynamic`, subscribe through the
agent and are updated when a matching `Delta` arrives.

## What it does not do

- No browser client ships with the package. The server serves whatever
  assets you give it; without them every path other than `/` and `/live`
  returns 404. The widgets render HTML in Python but nothing connects them to
  a page in a browser.
- Actions sent by a client over the WebSocket are decoded and logged, but not
  passed on to the application. A message that cannot be decoded closes that
  connection.
- There is no command-line program; the package is used as a library.

## Tests

The test suite uses pytest and pytest-asyncio, installable through the
`test` extra.