"""Runtime settings read from an optional file and the environment."""

from __future__ import annotations

import ipaddress
import json
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

_MAX_MS = 2**64 - 1
_MAX_PORT = 65535


@dataclass(frozen=True)
class Settings:
    """Throttle interval in milliseconds and the address to listen on."""

    ms: int = 100
    address: IPAddress = field(default=ipaddress.ip_address("127.0.0.1"))
    port: int = 12400

    def __post_init__(self) -> None:
        if isinstance(self.ms, bool) or not isinstance(self.ms, int):
            raise ValueError("ms must be an integer")
        if not 0 <= self.ms <= _MAX_MS:
            raise ValueError(f"ms out of range: {self.ms}")
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError("port must be an integer")
        if not 0 <= self.port <= _MAX_PORT:
            raise ValueError(f"port out of range: {self.port}")
        if not isinstance(self.address, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
            object.__setattr__(self, "address", _address(self.address))

    def throttle_seconds(self) -> float:
        """Throttle interval in seconds."""
        return self.ms / 1000

    def socket_addr(self) -> tuple[str, int]:
        """Host and port to bind."""
        return str(self.address), self.port


def _read_file(name: str) -> dict[str, Any]:
    loaders = ((".toml", tomllib.load), (".json", json.load))
    for suffix, loader in loaders:
        path = Path(f"{name}{suffix}")
        if path.is_file():
            with path.open("rb") as handle:
                data = loader(handle)
            if not isinstance(data, dict):
                raise ValueError(f"{path}: expected a table of settings")
            return {str(key).lower(): value for key, value in data.items()}
    return {}


def _integer(value: Any, key: str, maximum: int) -> int:
    if isinstance(value, bool):
        raise ValueError(f"invalid value for `{key}`: {value!r}")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ValueError(f"invalid value for `{key}`: {value!r}") from None
    if not isinstance(value, int):
        raise ValueError(f"invalid value for `{key}`: {value!r}")
    if not 0 <= value <= maximum:
        raise ValueError(f"value for `{key}` out of range: {value}")
    return value


def _address(value: Any) -> IPAddress:
    try:
        return ipaddress.ip_address(str(value).strip())
    except ValueError:
        raise ValueError(f"invalid value for `address`: {value!r}") from None


def load_settings(name: str = "facade", environ: Mapping[str, str] | None = None) -> Settings:
    """Read settings from ``<name>.toml`` or ``<name>.json`` and ``<NAME>_*`` variables.

    The file is optional; environment variables override it.
    """
    environ = os.environ if environ is None else environ
    raw = _read_file(name)
    prefix = Path(name).name.lower() + "_"
    for key, value in environ.items():
        lowered = key.lower()
        if lowered.startswith(prefix) and len(lowered) > len(prefix):
            raw[lowered[len(prefix):]] = value
    return Settings(
        ms=_integer(raw.get("ms", 100), "ms", _MAX_MS),
        address=_address(raw.get("address", "127.0.0.1")),
        port=_integer(raw.get("port", 12400), "port", _MAX_PORT),
    )