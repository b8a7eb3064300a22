"""Monitors reported by Hyprland."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from homehelper.hyprctl import send_command

_I32 = (-(2**31), 2**31 - 1)
_U32 = (0, 2**32 - 1)


class Transform(IntEnum):
    """Output transform of a monitor."""

    NORMAL = 0
    ROTATE_90 = 1
    ROTATE_180 = 2
    ROTATE_270 = 3
    FLIP = 4
    FLIP_ROTATE_90 = 5
    FLIP_ROTATE_180 = 6
    FLIP_ROTATE_270 = 7


@dataclass(frozen=True)
class MonitorWorkspace:
    """A workspace reference attached to a monitor."""

    id: int
    name: str


@dataclass(frozen=True)
class MonitorReserved:
    """Space reserved at the monitor edges."""

    top: int
    left: int
    bottom: int
    right: int


@dataclass
class Monitor:
    """One monitor as described by Hyprland."""

    id: int
    name: str
    description: str
    make: str
    model: str
    serial: str
    width: int
    height: int
    active_workspace: MonitorWorkspace
    special_workspace: MonitorWorkspace | None
    reserved: MonitorReserved
    scale: float
    transform: Transform
    focused: bool
    dpms_status: bool
    variable_refresh_rate: bool
    actively_tearing: bool
    direct_scanout_to: str
    enabled: bool
    current_format: str
    mirror_of: str | None
    available_modes: list[str] = field(default_factory=list)

    def to_json(self) -> dict[str, Any]:
        """Plain JSON-ready form with camelCase keys."""
        special = self.special_workspace
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "make": self.make,
            "model": self.model,
            "serial": self.serial,
            "width": self.width,
            "height": self.height,
            "activeWorkspace": {
                "id": self.active_workspace.id,
                "name": self.active_workspace.name,
            },
            "specialWorkspace": (
                None if special is None else {"id": special.id, "name": special.name}
            ),
            "reserved": {
                "top": self.reserved.top,
                "left": self.reserved.left,
                "bottom": self.reserved.bottom,
                "right": self.reserved.right,
            },
            "scale": self.scale,
            "transform": int(self.transform),
            "focused": self.focused,
            "dpmsStatus": self.dpms_status,
            "variableRefreshRate": self.variable_refresh_rate,
            "activelyTearing": self.actively_tearing,
            "directScanoutTo": self.direct_scanout_to,
            "enabled": self.enabled,
            "currentFormat": self.current_format,
            "mirrorOf": self.mirror_of,
            "availableModes": list(self.available_modes),
        }


def _field(data: Any, key: str, kind: type, bounds: tuple[int, int] | None = None) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"expected an object, got {data!r}")
    try:
        value = data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None
    is_bool = isinstance(value, bool)
    if kind is bool:
        valid = is_bool
    elif kind is int:
        valid = isinstance(value, int) and not is_bool
    elif kind is float:
        valid = isinstance(value, (int, float)) and not is_bool
    else:
        valid = isinstance(value, kind)
    if not valid:
        raise ValueError(f"invalid type for field `{key}`: {value!r}")
    if bounds is not None and not bounds[0] <= value <= bounds[1]:
        raise ValueError(f"field `{key}` out of range: {value}")
    return value


def _workspace(data: Any) -> MonitorWorkspace:
    return MonitorWorkspace(id=_field(data, "id", int, _I32), name=_field(data, "name", str))


def _reserved(data: Any) -> MonitorReserved:
    return MonitorReserved(
        top=_field(data, "top", int, _U32),
        left=_field(data, "left", int, _U32),
        bottom=_field(data, "bottom", int, _U32),
        right=_field(data, "right", int, _U32),
    )


def _transform(value: int) -> Transform:
    try:
        return Transform(value)
    except ValueError:
        raise ValueError(f"invalid transform: {value}") from None


def monitor_from_json(data: dict) -> Monitor:
    """Build a Monitor from one entry of Hyprland's `j/monitors` reply."""
    special = _workspace(_field(data, "specialWorkspace", dict))
    mirror_of = _field(data, "mirrorOf", str)
    _field(data, "solitary", str)
    modes = _field(data, "availableModes", list)
    for mode in modes:
        if not isinstance(mode, str):
            raise ValueError(f"invalid available mode: {mode!r}")
    return Monitor(
        id=_field(data, "id", int, _I32),
        name=_field(data, "name", str),
        description=_field(data, "description", str),
        make=_field(data, "make", str),
        model=_field(data, "model", str),
        serial=_field(data, "serial", str),
        width=_field(data, "width", int, _U32),
        height=_field(data, "height", int, _U32),
        active_workspace=_workspace(_field(data, "activeWorkspace", dict)),
        special_workspace=special if special.name else None,
        reserved=_reserved(_field(data, "reserved", dict)),
        scale=float(_field(data, "scale", float)),
        transform=_transform(_field(data, "transform", int)),
        focused=_field(data, "focused", bool),
        dpms_status=_field(data, "dpmsStatus", bool),
        variable_refresh_rate=_field(data, "vrr", bool),
        actively_tearing=_field(data, "activelyTearing", bool),
        direct_scanout_to=_field(data, "directScanoutTo", str),
        enabled=not _field(data, "disabled", bool),
        current_format=_field(data, "currentFormat", str),
        mirror_of=mirror_of or None,
        available_modes=list(modes),
    )


def parse_monitors(text: str) -> list[Monitor]:
    """Parse the JSON text of a `j/monitors` reply."""
    items = json.loads(text)
    if not isinstance(items, list):
        raise ValueError("expected a list of monitors")
    return [monitor_from_json(item) for item in items]


def monitors() -> list[Monitor]:
    """Fetch all monitors from Hyprland."""
    return parse_monitors(send_command(b"j/monitors"))