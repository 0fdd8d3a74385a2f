"""Widgets that render a scene to HTML strings: base, simple and layout widgets."""