"""CSS class names for layout settings."""

from __future__ import annotations

from typing import Any

from facade.protocol import Align, Breakpoint, Cols, Direction, Justify

_ALIGN = {
    Align.START: "align-start",
    Align.CENTER: "align-center",
    Align.END: "align-end",
    Align.SPACE_AROUND: "align-space-around",
    Align.SPACE_BETWEEN: "align-space-between",
}

_DIRECTION = {
    Direction.ROW: "row",
    Direction.COLUMN: "column",
}

_JUSTIFY = {
    Justify.START: "justify-start",
    Justify.CENTER: "justify-center",
    Justify.END: "justify-end",
    Justify.SPACE_AROUND: "justify-space-around",
    Justify.SPACE_BETWEEN: "justify-space-between",
}

_BREAKPOINTS = {
    Breakpoint.X_SMALL: "xs",
    Breakpoint.SMALL: "sm",
    Breakpoint.MEDIUM: "md",
    Breakpoint.LARGE: "la",
    Breakpoint.X_LARGE: "xl",
}

_COLS = {cols: cols.name[1:] for cols in Cols}

_FLEX_WIDTH = {
    (brk, cols): f"{brk_cls}-{cols_cls}"
    for brk, brk_cls in _BREAKPOINTS.items()
    for cols, cols_cls in _COLS.items()
}


def to_class(item: Any) -> str:
    """Return the CSS class for an alignment, direction, justification or flex width.

    A flex width is a ``(Breakpoint, Cols)`` pair.
    """
    if isinstance(item, Align):
        return _ALIGN[item]
    if isinstance(item, Direction):
        return _DIRECTION[item]
    if isinstance(item, Justify):
        return _JUSTIFY[item]
    if isinstance(item, tuple):
        try:
            return _FLEX_WIDTH[item]
        except KeyError:
            raise ValueError(f"not a flex width: {item!r}") from None
    raise TypeError(f"no CSS class for {type(item).__name__}")