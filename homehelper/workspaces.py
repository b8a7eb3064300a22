"""Workspaces reported by Hyprland."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from homehelper.hyprctl import send_command

_I32 = (-(2**31), 2**31 - 1)
_U32 = (0, 2**32 - 1)


@dataclass(frozen=True)
class Workspace:
    """One workspace as described by Hyprland."""

    id: int
    name: str
    monitor: str
    monitor_id: int
    windows: int
    has_fullscreen: bool
    last_window: str
    last_window_title: str
    is_persistent: bool

    def to_json(self) -> dict[str, Any]:
        """Plain JSON-ready form using Hyprland's key names."""
        return {
            "id": self.id,
            "name": self.name,
            "monitor": self.monitor,
            "monitorID": self.monitor_id,
            "windows": self.windows,
            "hasfullscreen": self.has_fullscreen,
            "lastwindow": self.last_window,
            "lastwindowtitle": self.last_window_title,
            "ispersistent": self.is_persistent,
        }


def _field(data: dict, key: str, kind: type, bounds: tuple[int, int] | None = None) -> Any:
    try:
        value = data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None
    is_bool = isinstance(value, bool)
    if kind is bool:
        valid = is_bool
    elif kind is int:
        valid = isinstance(value, int) and not is_bool
    else:
        valid = isinstance(value, kind)
    if not valid:
        raise ValueError(f"invalid type for field `{key}`: {value!r}")
    if bounds is not None and not bounds[0] <= value <= bounds[1]:
        raise ValueError(f"field `{key}` out of range: {value}")
    return value


def workspace_from_json(data: dict) -> Workspace:
    """Build a Workspace from one entry of Hyprland's `j/workspaces` reply."""
    if not isinstance(data, dict):
        raise ValueError(f"expected a workspace object, got {data!r}")
    return Workspace(
        id=_field(data, "id", int, _I32),
        name=_field(data, "name", str),
        monitor=_field(data, "monitor", str),
        monitor_id=_field(data, "monitorID", int, _U32),
        windows=_field(data, "windows", int, _U32),
        has_fullscreen=_field(data, "hasfullscreen", bool),
        last_window=_field(data, "lastwindow", str),
        last_window_title=_field(data, "lastwindowtitle", str),
        is_persistent=_field(data, "ispersistent", bool),
    )


def parse_workspaces(text: str) -> list[Workspace]:
    """Parse the JSON text of a `j/workspaces` reply."""
    items = json.loads(text)
    if not isinstance(items, list):
        raise ValueError("expected a list of workspaces")
    return [workspace_from_json(item) for item in items]


def workspaces() -> list[Workspace]:
    """Fetch all workspaces from Hyprland."""
    return parse_workspaces(send_command(b"j/workspaces"))