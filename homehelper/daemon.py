"""The long-running daemon: Hyprland events, client requests and main-loop steps."""

from __future__ import annotations

import os
import signal
import socket
import sys
import threading
import time
from collections.abc import Callable
from contextlib import suppress
from datetime import timedelta
from typing import Any

from homehelper.commands import Command, ListenEwwStep, recv
from homehelper.events import Event, EventSocket
from homehelper.hyprctl import Color, NotifyIcon, notify
from homehelper.steps import MainLoopStep, StepState
from homehelper.submap import SubmapStep

_TICK = 0.025


def daemon_socket_path() -> str:
    """Path of the socket the daemon listens on."""
    runtime = os.environ.get("XDG_RUNTIME_DIR")
    if runtime is None:
        raise RuntimeError("environment variable XDG_RUNTIME_DIR is not set")
    return f"{runtime}/homehelper.sock"


def log_error(error: BaseException) -> None:
    """Report an error on stderr and, if possible, as a Hyprland notification."""
    text = str(error) or type(error).__name__
    print(text, file=sys.stderr, flush=True)
    with suppress(Exception):
        notify(
            NotifyIcon.ERROR,
            timedelta(seconds=5),
            Color(255, 0, 0),
            f"HomeHelper Error: {text}",
        )


class Daemon:
    """Serves client requests and drives main-loop steps from Hyprland events."""

    def __init__(
        self,
        submap: bool = True,
        socket_path: str | None = None,
        event_source: Any = None,
    ) -> None:
        self.submap = submap
        self.socket_path = daemon_socket_path() if socket_path is None else socket_path
        self.steps: list[MainLoopStep] = []
        self._closed = False

        print(f"Opening socket at {self.socket_path}", flush=True)
        listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            listener.bind(self.socket_path)
        except BaseException:
            listener.close()
            raise
        try:
            listener.listen()
            listener.setblocking(False)
            self.events = EventSocket() if event_source is None else event_source
        except BaseException:
            listener.close()
            with suppress(FileNotFoundError):
                os.remove(self.socket_path)
            raise
        self._listener = listener

        if submap:
            self.steps.append(SubmapStep())

    def __enter__(self) -> Daemon:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _drive(self, hook: Callable[[MainLoopStep], StepState]) -> None:
        for entry in list(self.steps):
            try:
                state = hook(entry)
            except Exception as error:
                try:
                    state = entry.on_error(error)
                except Exception:
                    self.steps.remove(entry)
                    raise
            if state is StepState.DONE:
                self.steps.remove(entry)

    def handle_event(self, event: Event | Exception) -> None:
        """Pass one event to every step; an exception in place of an event is raised."""
        if isinstance(event, BaseException):
            raise event
        self._drive(lambda entry: entry.on_event(event))

    def _hyprctl_step(self) -> None:
        for event in self.events.poll():
            try:
                self.handle_event(event)
            except Exception as error:
                log_error(error)

    def _listener_step(self) -> None:
        try:
            conn, _ = self._listener.accept()
        except BlockingIOError:
            return
        try:
            conn.setblocking(True)
            command = Command(recv(conn))
            command.dispatch_daemon(self, conn)
        except Exception as error:
            conn.close()
            log_error(error)

    def step(self) -> None:
        """Run one iteration of the main loop."""
        self._hyprctl_step()
        self._listener_step()
        self._drive(lambda entry: entry.step())

    def run(self) -> None:
        """Loop until interrupted with SIGINT, pacing iterations to about 25 ms."""
        stop = threading.Event()
        previous = None
        installed = threading.current_thread() is threading.main_thread()
        if installed:
            previous = signal.signal(signal.SIGINT, lambda signum, frame: stop.set())
        try:
            last = time.monotonic()
            while True:
                self.step()
                if stop.is_set():
                    break
                now = time.monotonic()
                elapsed = now - last
                if elapsed < _TICK:
                    time.sleep(_TICK - elapsed)
                last = now
        finally:
            if installed and previous is not None:
                signal.signal(signal.SIGINT, previous)

    def close(self) -> None:
        """Release the listening socket, its file, the event source and the steps."""
        if self._closed:
            return
        self._closed = True
        print(f"Closing socket at {self.socket_path}", flush=True)
        self._listener.close()
        with suppress(FileNotFoundError):
            os.remove(self.socket_path)
        for entry in self.steps:
            if isinstance(entry, SubmapStep):
                entry.close()
            elif isinstance(entry, ListenEwwStep):
                entry.sock.close()
        self.steps.clear()
        self.events.close()


def launch(submap: bool = True) -> None:
    """Start the daemon and run it until interrupted."""
    with Daemon(submap) as daemon:
        daemon.run()