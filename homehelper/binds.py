"""Key bindings reported by Hyprland."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from homehelper.hyprctl import send_command

_U32_MAX = 2**32 - 1


class BindTrigger(Enum):
    """What kind of input fires a binding."""

    PRESS = "press"
    RELEASE = "release"
    LONG_PRESS = "long_press"
    CATCH_ALL = "catch_all"
    MOUSE = "mouse"


@dataclass(frozen=True)
class Bind:
    """One key binding."""

    locked: bool
    repeat: bool
    non_consuming: bool
    trigger: BindTrigger
    modmask: int
    submap: str | None
    key: str
    keycode: int
    description: str | None
    action: tuple[str, str]


def _field(data: dict, key: str, kind: type) -> Any:
    try:
        value = data[key]
    except KeyError:
        raise ValueError(f"missing field `{key}`") from None
    if kind is bool:
        valid = isinstance(value, bool)
    elif kind is int:
        valid = isinstance(value, int) and not isinstance(value, bool)
        if valid and not 0 <= value <= _U32_MAX:
            raise ValueError(f"field `{key}` out of range: {value}")
    else:
        valid = isinstance(value, kind)
    if not valid:
        raise ValueError(f"invalid type for field `{key}`: {value!r}")
    return value


def _trigger(data: dict) -> BindTrigger:
    mouse = _field(data, "mouse", bool)
    catch_all = _field(data, "catch_all", bool)
    long_press = _field(data, "longPress", bool)
    release = _field(data, "release", bool)
    if mouse:
        return BindTrigger.MOUSE
    if catch_all:
        return BindTrigger.CATCH_ALL
    if long_press:
        return BindTrigger.LONG_PRESS
    if release:
        return BindTrigger.RELEASE
    return BindTrigger.PRESS


def bind_from_json(data: dict) -> Bind:
    """Build a Bind from one entry of Hyprland's `j/binds` reply."""
    if not isinstance(data, dict):
        raise ValueError(f"expected a bind object, got {data!r}")
    submap = _field(data, "submap", str)
    description = _field(data, "description", str)
    has_description = _field(data, "has_description", bool)
    return Bind(
        locked=_field(data, "locked", bool),
        repeat=_field(data, "repeat", bool),
        non_consuming=_field(data, "non_consuming", bool),
        trigger=_trigger(data),
        modmask=_field(data, "modmask", int),
        submap=submap or None,
        key=_field(data, "key", str),
        keycode=_field(data, "keycode", int),
        description=description if has_description else None,
        action=(_field(data, "dispatcher", str), _field(data, "arg", str)),
    )


def parse_binds(text: str) -> list[Bind]:
    """Parse the JSON text of a `j/binds` reply."""
    items = json.loads(text)
    if not isinstance(items, list):
        raise ValueError("expected a list of binds")
    return [bind_from_json(item) for item in items]


def binds() -> list[Bind]:
    """Fetch all current key bindings from Hyprland."""
    return parse_binds(send_command(b"j/binds"))