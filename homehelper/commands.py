"""Requests a remote client can send to the daemon, and their handlers."""

from __future__ import annotations

import json
import socket
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

import cbor2

from homehelper import monitors as _monitors
from homehelper import workspaces as _workspaces
from homehelper.events import (
    ActiveSpecialChanged,
    CreateWorkspace,
    DestroyWorkspace,
    Event,
    FocusedMon,
    RenameWorkspace,
    WorkspaceChanged,
)
from homehelper.monitors import Monitor
from homehelper.steps import MainLoopStep, StepState
from homehelper.workspaces import Workspace, workspace_from_json


def send(sock: socket.socket, data: Any) -> None:
    """Write one CBOR-encoded value to the socket."""
    sock.sendall(cbor2.dumps(data))


def _read_exact(sock: socket.socket, size: int) -> bytes:
    data = bytearray()
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            raise EOFError("connection closed")
        data += chunk
    return bytes(data)


def _read_item(sock: socket.socket) -> bytes:
    """Read the raw bytes of exactly one CBOR data item."""
    head = _read_exact(sock, 1)
    major, info = head[0] >> 5, head[0] & 0x1F
    out = bytearray(head)
    if info == 31:
        if major == 7:
            return bytes(out)
        if major not in (2, 3, 4, 5):
            raise ValueError("invalid indefinite-length CBOR item")
        while True:
            item = _read_item(sock)
            out += item
            if item == b"\xff":
                return bytes(out)
    if info < 24:
        argument = info
    elif info <= 27:
        extra = _read_exact(sock, 1 << (info - 24))
        out += extra
        argument = int.from_bytes(extra, "big")
    else:
        raise ValueError(f"invalid CBOR additional information: {info}")
    if major in (2, 3):
        out += _read_exact(sock, argument)
    elif major in (4, 5):
        count = argument if major == 4 else 2 * argument
        for _ in range(count):
            out += _read_item(sock)
    elif major == 6:
        out += _read_item(sock)
    return bytes(out)


def recv(sock: socket.socket) -> Any:
    """Read one CBOR-encoded value from the socket; EOFError if it closes first."""
    return cbor2.loads(_read_item(sock))


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, separators=(",", ":")), flush=True)


_SPECIAL_ICONS = {
    "special:guide": "󰈹",
    "special:term": "",
    "special:other": "",
    "special:music": "",
    "special:notes": "",
    "special:testing": "",
}


@dataclass(frozen=True)
class EwwWorkspace:
    """A workspace as shown by the eww bar."""

    index: str | None
    name: str | None
    icon: str | None
    active_on: str | None
    is_special: bool
    special_name: str
    id: int

    def to_json(self) -> dict[str, Any]:
        """Plain JSON-ready form."""
        return {
            "index": self.index,
            "name": self.name,
            "icon": self.icon,
            "active_on": self.active_on,
            "is_special": self.is_special,
            "special_name": self.special_name,
            "id": self.id,
        }


def _triple(name: str) -> list[str] | None:
    try:
        parts = json.loads(name)
    except ValueError:
        return None
    if isinstance(parts, list) and len(parts) == 3 and all(isinstance(p, str) for p in parts):
        return parts
    return None


def eww_workspace(monitors: Sequence[Monitor], workspace: Workspace) -> EwwWorkspace:
    """Describe a workspace for eww, noting the monitor it is shown on."""
    active_on = next(
        (
            m.name
            for m in monitors
            if m.active_workspace.id == workspace.id
            or (m.special_workspace is not None and m.special_workspace.id == workspace.id)
        ),
        None,
    )
    if workspace.id < 0:
        _, colon, right = workspace.name.partition(":")
        return EwwWorkspace(
            index=None,
            name=None,
            icon=_SPECIAL_ICONS.get(workspace.name, workspace.name),
            active_on=active_on,
            is_special=True,
            special_name=right if colon else workspace.name,
            id=workspace.id,
        )
    parts = _triple(workspace.name)
    if parts is None:
        return EwwWorkspace(
            index=workspace.name,
            name=None,
            icon=None,
            active_on=active_on,
            is_special=False,
            special_name=workspace.name,
            id=workspace.id,
        )
    index, icon, name = parts
    if index == "#":
        index = str(workspace.id)
    return EwwWorkspace(
        index=index or None,
        name=name or None,
        icon=icon or None,
        active_on=active_on,
        is_special=False,
        special_name=workspace.name,
        id=workspace.id,
    )


_UPDATE_EVENTS = (
    FocusedMon,
    WorkspaceChanged,
    CreateWorkspace,
    DestroyWorkspace,
    RenameWorkspace,
    ActiveSpecialChanged,
)


class ListenEwwStep(MainLoopStep):
    """Pushes the workspace list to a client whenever it may have changed."""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock

    def send_update(self) -> None:
        """Send the current workspaces to the client."""
        current = _monitors.monitors()
        update = [eww_workspace(current, w).to_json() for w in _workspaces.workspaces()]
        send(self.sock, {"Ok": update})

    def on_event(self, event: Event) -> StepState:
        if isinstance(event, _UPDATE_EVENTS):
            try:
                self.send_update()
            except BrokenPipeError:
                self.sock.close()
                return StepState.DONE
            except Exception:
                # Transient failures are ignored; the next event retries.
                pass
        return StepState.KEEP_ACTIVE

    def on_error(self, error: Exception) -> StepState:
        try:
            send(self.sock, {"Err": str(error)})
        finally:
            self.sock.close()
        return StepState.DONE


def _workspaces_daemon(daemon: Any, sock: socket.socket) -> None:
    with sock:
        send(sock, [w.to_json() for w in _workspaces.workspaces()])


def _monitors_daemon(daemon: Any, sock: socket.socket) -> None:
    with sock:
        send(sock, [m.to_json() for m in _monitors.monitors()])


def _listen_eww_daemon(daemon: Any, sock: socket.socket) -> None:
    daemon.steps.append(ListenEwwStep(sock))


def _workspaces_remote(sock: socket.socket) -> None:
    data = recv(sock)
    if not isinstance(data, list):
        raise ValueError("expected a list of workspaces")
    _print_json([workspace_from_json(item).to_json() for item in data])


def _monitors_remote(sock: socket.socket) -> None:
    data = recv(sock)
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError("expected a list of monitors")
    _print_json(data)


def _listen_eww_remote(sock: socket.socket) -> None:
    while True:
        message = recv(sock)
        if isinstance(message, dict) and "Ok" in message:
            _print_json(message["Ok"])
        elif isinstance(message, dict) and "Err" in message:
            raise RuntimeError(message["Err"])
        else:
            raise ValueError(f"unexpected message: {message!r}")


class Command(Enum):
    """A request from a remote client; the value is its wire name."""

    WORKSPACES = "Workspaces"
    MONITORS = "Monitors"
    LISTEN_EWW = "ListenEww"

    def dispatch_remote(self, sock: socket.socket) -> None:
        """Handle the client side after the request was sent."""
        _REMOTE[self](sock)

    def dispatch_daemon(self, daemon: Any, sock: socket.socket) -> None:
        """Serve the request on the daemon side; takes ownership of `sock`."""
        _DAEMON[self](daemon, sock)


_REMOTE: dict[Command, Callable[[socket.socket], None]] = {
    Command.WORKSPACES: _workspaces_remote,
    Command.MONITORS: _monitors_remote,
    Command.LISTEN_EWW: _listen_eww_remote,
}

_DAEMON: dict[Command, Callable[[Any, socket.socket], None]] = {
    Command.WORKSPACES: _workspaces_daemon,
    Command.MONITORS: _monitors_daemon,
    Command.LISTEN_EWW: _listen_eww_daemon,
}