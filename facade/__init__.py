"""Live browser dashboards driven from asyncio code over a WebSocket."""

__version__ = "0.1.0"