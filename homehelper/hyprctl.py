"""Client for the Hyprland control socket (socket1) and its notify command."""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass
from datetime import timedelta
from enum import IntEnum


class HyprctlError(Exception):
    """Raised when Hyprland cannot be located or rejects a command."""


class NotifyIcon(IntEnum):
    """Icons accepted by Hyprland's notify command."""

    NONE = -1
    WARNING = 0
    INFO = 1
    HINT = 2
    ERROR = 3
    CONFUSED = 4
    OK = 5


@dataclass(frozen=True)
class Color:
    """An RGB colour, optionally with an alpha channel."""

    r: int
    g: int
    b: int
    a: int | None = None

    def __post_init__(self) -> None:
        channels = [self.r, self.g, self.b]
        if self.a is not None:
            channels.append(self.a)
        for channel in channels:
            if isinstance(channel, bool) or not isinstance(channel, int):
                raise ValueError(f"colour channel must be an integer, got {channel!r}")
            if not 0 <= channel <= 255:
                raise ValueError(f"colour channel out of range: {channel}")

    def __str__(self) -> str:
        if self.a is None:
            return f"rgb({self.r},{self.g},{self.b})"
        return f"rgba({self.r},{self.g},{self.b},{self.a})"


def _env(name: str) -> str:
    value = os.environ.get(name)
    if value is None:
        raise HyprctlError(f"environment variable {name} is not set")
    return value


def _instance_dir() -> str:
    runtime = _env("XDG_RUNTIME_DIR")
    signature = _env("HYPRLAND_INSTANCE_SIGNATURE")
    return f"{runtime}/hypr/{signature}"


def socket1_path() -> str:
    """Path of the Hyprland command socket."""
    return f"{_instance_dir()}/.socket.sock"


def socket2_path() -> str:
    """Path of the Hyprland event socket."""
    return f"{_instance_dir()}/.socket2.sock"


def send_command(command: bytes | str) -> str:
    """Send one raw command to Hyprland and return its whole reply."""
    if isinstance(command, str):
        command = command.encode("utf-8")
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
        sock.connect(socket1_path())
        sock.sendall(command)
        chunks = []
        while chunk := sock.recv(65536):
            chunks.append(chunk)
    return b"".join(chunks).decode("utf-8")


def expect_ok(result: str) -> None:
    """Raise HyprctlError unless the reply is exactly "ok"."""
    if result != "ok":
        raise HyprctlError(f"Command returned: {result}")


def reload() -> None:
    """Ask Hyprland to reload its configuration."""
    expect_ok(send_command(b"/reload"))


def notify(
    icon: NotifyIcon,
    time: timedelta | float,
    color: Color,
    message: str,
) -> None:
    """Show a Hyprland notification for the given duration."""
    if not isinstance(time, timedelta):
        time = timedelta(seconds=time)
    if time < timedelta(0):
        raise ValueError("notification duration must not be negative")
    millis = time // timedelta(milliseconds=1)
    expect_ok(send_command(f"/notify {int(icon)} {millis} {color} {message}"))