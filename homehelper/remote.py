"""Client side: send one request to the running daemon and handle its reply."""

from __future__ import annotations

import socket

from homehelper.commands import Command, send
from homehelper.daemon import daemon_socket_path


def connect(path: str | None = None) -> socket.socket:
    """Connect to the daemon's socket."""
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.connect(daemon_socket_path() if path is None else path)
    except FileNotFoundError:
        sock.close()
        raise ConnectionError("Socket file not found. Is the daemon running?") from None
    except BaseException:
        sock.close()
        raise
    return sock


def launch(command: Command | str) -> None:
    """Send `command` to the daemon and run its client-side handler."""
    if not isinstance(command, Command):
        command = Command(command)
    with connect() as sock:
        send(sock, command.value)
        command.dispatch_remote(sock)