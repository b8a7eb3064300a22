"""Events from Hyprland's event socket (socket2) and how to parse them."""

from __future__ import annotations

import re
import socket
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum

from homehelper.hyprctl import socket2_path

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_U64_MAX = 2**64 - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+")
_HEX = re.compile(r"\+?[0-9A-Fa-f]+")


class EventParseError(ValueError):
    """Raised when a line from the event socket cannot be parsed."""


class ScreenCastOwner(IntEnum):
    """What a screen cast is capturing."""

    MONITOR = 0
    WINDOW = 1


@dataclass(frozen=True)
class WindowInfo:
    """Class and title of the focused window."""

    window_class: str
    title: str


@dataclass(frozen=True)
class SpecialWorkspace:
    """A special workspace shown on a monitor."""

    id: int
    name: str


@dataclass(frozen=True)
class Event:
    """Base class of every Hyprland event."""


@dataclass(frozen=True)
class WorkspaceChanged(Event):
    name: str


@dataclass(frozen=True)
class WorkspaceChangedV2(Event):
    id: int
    name: str


@dataclass(frozen=True)
class FocusedMon(Event):
    workspace_name: str
    monitor_name: str


@dataclass(frozen=True)
class FocusedMonV2(Event):
    workspace_id: int
    monitor_name: str


@dataclass(frozen=True)
class ActiveWindowChanged(Event):
    window: WindowInfo | None


@dataclass(frozen=True)
class ActiveWindowChangedV2(Event):
    window_address: int | None


@dataclass(frozen=True)
class Fullscreen(Event):
    active: bool


@dataclass(frozen=True)
class MonitorRemoved(Event):
    name: str


@dataclass(frozen=True)
class MonitorRemovedV2(Event):
    id: int
    name: str
    description: str


@dataclass(frozen=True)
class MonitorAdded(Event):
    name: str


@dataclass(frozen=True)
class MonitorAddedV2(Event):
    id: int
    name: str
    description: str


@dataclass(frozen=True)
class CreateWorkspace(Event):
    name: str


@dataclass(frozen=True)
class CreateWorkspaceV2(Event):
    id: int
    name: str


@dataclass(frozen=True)
class DestroyWorkspace(Event):
    name: str


@dataclass(frozen=True)
class DestroyWorkspaceV2(Event):
    id: int
    name: str


@dataclass(frozen=True)
class MoveWorkspace(Event):
    workspace_name: str
    monitor_name: str


@dataclass(frozen=True)
class MoveWorkspaceV2(Event):
    workspace_id: int
    workspace_name: str
    monitor_name: str


@dataclass(frozen=True)
class RenameWorkspace(Event):
    id: int
    new_name: str


@dataclass(frozen=True)
class ActiveSpecialChanged(Event):
    workspace_name: str | None
    monitor_name: str


@dataclass(frozen=True)
class ActiveSpecialChangedV2(Event):
    workspace: SpecialWorkspace | None
    monitor_name: str


@dataclass(frozen=True)
class ActiveLayout(Event):
    keyboard_name: str
    layout_name: str


@dataclass(frozen=True)
class OpenWindow(Event):
    window_address: int
    workspace_name: str
    window_class: str
    window_title: str


@dataclass(frozen=True)
class CloseWindow(Event):
    window_address: int


@dataclass(frozen=True)
class MoveWindow(Event):
    window_address: int
    workspace_name: str


@dataclass(frozen=True)
class MoveWindowV2(Event):
    window_address: int
    workspace_id: int
    workspace_name: str


@dataclass(frozen=True)
class OpenLayer(Event):
    namespace: str


@dataclass(frozen=True)
class CloseLayer(Event):
    namespace: str


@dataclass(frozen=True)
class Submap(Event):
    name: str | None


@dataclass(frozen=True)
class ChangeFloatingMode(Event):
    window_address: int
    floating: bool


@dataclass(frozen=True)
class Urgent(Event):
    window_address: int


@dataclass(frozen=True)
class ScreenCast(Event):
    active: bool
    owner: ScreenCastOwner


@dataclass(frozen=True)
class WindowTitle(Event):
    window_address: int


@dataclass(frozen=True)
class WindowTitleV2(Event):
    window_address: int
    window_title: str


@dataclass(frozen=True)
class ToggleGroup(Event):
    exists: bool
    window_addresses: tuple[int, ...]


@dataclass(frozen=True)
class MoveIntoGroup(Event):
    window_address: int


@dataclass(frozen=True)
class MoveOutOfGroup(Event):
    window_address: int


@dataclass(frozen=True)
class IgnoreGroupLock(Event):
    active: bool


@dataclass(frozen=True)
class LockGroups(Event):
    locked: bool


@dataclass(frozen=True)
class ConfigReloaded(Event):
    pass


@dataclass(frozen=True)
class Pin(Event):
    window_address: int
    pinned: bool


@dataclass(frozen=True)
class Minimized(Event):
    window_address: int
    state: bool


@dataclass(frozen=True)
class Bell(Event):
    window_address: int


@dataclass(frozen=True)
class Custom(Event):
    name: str
    params: tuple[str, ...]


def _split(params: str, count: int) -> list[str]:
    parts = params.split(",", count - 1)
    if len(parts) < count:
        raise EventParseError("Not enough params")
    return parts


def _i32(text: str) -> int:
    if not _DECIMAL.fullmatch(text):
        raise EventParseError(f"invalid integer: {text!r}")
    value = int(text)
    if not _I32_MIN <= value <= _I32_MAX:
        raise EventParseError(f"integer out of range: {text!r}")
    return value


def _address(text: str) -> int:
    if not _HEX.fullmatch(text):
        raise EventParseError(f"invalid window address: {text!r}")
    value = int(text, 16)
    if value > _U64_MAX:
        raise EventParseError(f"window address out of range: {text!r}")
    return value


def _flag(text: str) -> bool:
    return text == "1"


def _workspace_v2(kind: Callable[[int, str], Event]) -> Callable[[str], Event]:
    def parse(params: str) -> Event:
        ident, name = _split(params, 2)
        return kind(_i32(ident), name)

    return parse


def _monitor_v2(kind: Callable[[int, str, str], Event]) -> Callable[[str], Event]:
    def parse(params: str) -> Event:
        ident, name, description = _split(params, 3)
        return kind(_i32(ident), name, description)

    return parse


def _address_only(kind: Callable[[int], Event]) -> Callable[[str], Event]:
    return lambda params: kind(_address(params))


def _address_flag(kind: Callable[[int, bool], Event]) -> Callable[[str], Event]:
    def parse(params: str) -> Event:
        address, state = _split(params, 2)
        return kind(_address(address), _flag(state))

    return parse


def _focused_mon(params: str) -> Event:
    monitor_name, workspace_name = _split(params, 2)
    return FocusedMon(workspace_name=workspace_name, monitor_name=monitor_name)


def _focused_mon_v2(params: str) -> Event:
    monitor_name, workspace_id = _split(params, 2)
    return FocusedMonV2(workspace_id=_i32(workspace_id), monitor_name=monitor_name)


def _active_window(params: str) -> Event:
    window_class, title = _split(params, 2)
    if not window_class:
        return ActiveWindowChanged(None)
    return ActiveWindowChanged(WindowInfo(window_class, title))


def _active_window_v2(params: str) -> Event:
    return ActiveWindowChangedV2(_address(params) if params else None)


def _move_workspace(params: str) -> Event:
    workspace_name, monitor_name = _split(params, 2)
    return MoveWorkspace(workspace_name, monitor_name)


def _move_workspace_v2(params: str) -> Event:
    workspace_id, workspace_name, monitor_name = _split(params, 3)
    return MoveWorkspaceV2(_i32(workspace_id), workspace_name, monitor_name)


def _rename_workspace(params: str) -> Event:
    ident, new_name = _split(params, 2)
    return RenameWorkspace(_i32(ident), new_name)


def _active_special(params: str) -> Event:
    workspace_name, monitor_name = _split(params, 2)
    return ActiveSpecialChanged(workspace_name or None, monitor_name)


def _active_special_v2(params: str) -> Event:
    workspace_id, workspace_name, monitor_name = _split(params, 3)
    if not workspace_id:
        return ActiveSpecialChangedV2(None, monitor_name)
    return ActiveSpecialChangedV2(
        SpecialWorkspace(_i32(workspace_id), workspace_name), monitor_name
    )


def _active_layout(params: str) -> Event:
    keyboard_name, layout_name = _split(params, 2)
    return ActiveLayout(keyboard_name, layout_name)


def _open_window(params: str) -> Event:
    address, workspace_name, window_class, window_title = _split(params, 4)
    return OpenWindow(_address(address), workspace_name, window_class, window_title)


def _move_window(params: str) -> Event:
    address, workspace_name = _split(params, 2)
    return MoveWindow(_address(address), workspace_name)


def _move_window_v2(params: str) -> Event:
    address, workspace_id, workspace_name = _split(params, 3)
    return MoveWindowV2(_address(address), _i32(workspace_id), workspace_name)


def _screen_cast(params: str) -> Event:
    state, owner = _split(params, 2)
    return ScreenCast(
        active=_flag(state),
        owner=ScreenCastOwner.WINDOW if owner == "1" else ScreenCastOwner.MONITOR,
    )


def _window_title_v2(params: str) -> Event:
    address, title = _split(params, 2)
    return WindowTitleV2(_address(address), title)


def _toggle_group(params: str) -> Event:
    state, addresses = _split(params, 2)
    return ToggleGroup(
        exists=_flag(state),
        window_addresses=tuple(_address(item) for item in addresses.split(",")),
    )


_PARSERS: dict[str, Callable[[str], Event]] = {
    "workspace": WorkspaceChanged,
    "workspacev2": _workspace_v2(WorkspaceChangedV2),
    "focusedmon": _focused_mon,
    "focusedmonv2": _focused_mon_v2,
    "activewindow": _active_window,
    "activewindowv2": _active_window_v2,
    "fullscreen": lambda params: Fullscreen(_flag(params)),
    "monitorremoved": MonitorRemoved,
    "monitorremovedv2": _monitor_v2(MonitorRemovedV2),
    "monitoradded": MonitorAdded,
    "monitoraddedv2": _monitor_v2(MonitorAddedV2),
    "createworkspace": CreateWorkspace,
    "createworkspacev2": _workspace_v2(CreateWorkspaceV2),
    "destroyworkspace": DestroyWorkspace,
    "destroyworkspacev2": _workspace_v2(DestroyWorkspaceV2),
    "moveworkspace": _move_workspace,
    "moveworkspacev2": _move_workspace_v2,
    "renameworkspace": _rename_workspace,
    "activespecial": _active_special,
    "activespecialv2": _active_special_v2,
    "activelayout": _active_layout,
    "openwindow": _open_window,
    "closewindow": _address_only(CloseWindow),
    "movewindow": _move_window,
    "movewindowv2": _move_window_v2,
    "openlayer": OpenLayer,
    "closelayer": CloseLayer,
    "submap": lambda params: Submap(params or None),
    "changefloatingmode": _address_flag(ChangeFloatingMode),
    "urgent": _address_only(Urgent),
    "screencast": _screen_cast,
    "windowtitle": _address_only(WindowTitle),
    "windowtitlev2": _window_title_v2,
    "togglegroup": _toggle_group,
    "moveintogroup": _address_only(MoveIntoGroup),
    "moveoutofgroup": _address_only(MoveOutOfGroup),
    "ignoregrouplock": lambda params: IgnoreGroupLock(_flag(params)),
    "lockgroups": lambda params: LockGroups(_flag(params)),
    "configreloaded": lambda params: ConfigReloaded(),
    "pin": _address_flag(Pin),
    "minimized": _address_flag(Minimized),
    "bell": _address_only(Bell),
}


def read_event(line: str) -> Event:
    """Parse one `name>>params` line from the event socket."""
    name, separator, params = line.partition(">>")
    if not separator:
        raise EventParseError(f"Could not find separator in {line}")
    parser = _PARSERS.get(name)
    if parser is None:
        return Custom(name=name, params=tuple(params.split(",")))
    return parser(params)


class EventSocket:
    """Non-blocking reader of Hyprland's event socket."""

    def __init__(self, path: str | None = None) -> None:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(socket2_path() if path is None else path)
            sock.setblocking(False)
        except BaseException:
            sock.close()
            raise
        self._sock: socket.socket | None = sock
        self._buffer = bytearray()

    def __enter__(self) -> EventSocket:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _line(self, raw: bytes) -> Event | Exception:
        try:
            return read_event(raw.decode("utf-8").strip())
        except (UnicodeDecodeError, EventParseError) as error:
            return error

    def poll(self) -> list[Event | Exception]:
        """Return every event available now, without waiting.

        Lines that fail to parse, and read errors, appear in the list as
        exception instances in the place they occurred. Raises
        ConnectionError once the socket has been closed by Hyprland and
        nothing is left to deliver.
        """
        if self._sock is None:
            raise ValueError("event socket is closed")
        results: list[Event | Exception] = []
        at_eof = False
        read_error: OSError | None = None
        while True:
            try:
                chunk = self._sock.recv(65536)
            except BlockingIOError:
                break
            except OSError as error:
                read_error = error
                break
            if not chunk:
                at_eof = True
                break
            self._buffer.extend(chunk)

        while (end := self._buffer.find(b"\n")) >= 0:
            raw = bytes(self._buffer[: end + 1])
            del self._buffer[: end + 1]
            results.append(self._line(raw))

        if at_eof and self._buffer:
            raw = bytes(self._buffer)
            self._buffer.clear()
            results.append(self._line(raw))
        if read_error is not None:
            results.append(read_error)
        if at_eof and not results:
            raise ConnectionError("event socket closed")
        return results

    def close(self) -> None:
        """Close the connection; further polls raise ValueError."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None