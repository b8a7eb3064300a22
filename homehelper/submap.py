"""Show the described binds of the active submap in a kitty panel."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from contextlib import suppress

from homehelper import binds as _binds
from homehelper.binds import Bind
from homehelper.events import Event, Submap
from homehelper.steps import MainLoopStep, StepState


def open_kitty(cmd: str, lines: int, longest_line: int) -> subprocess.Popen:
    """Start a centred kitty panel running `cmd` through sh."""
    args = [
        "kitty",
        "+kitten", "panel",
        "--edge", "center-sized",
        "--layer", "top",
        "--lines", str(lines),
        "--columns", str(longest_line),
        "--app-id", "homehelper-submap",
        "sh", "-c", cmd,
    ]
    return subprocess.Popen(args, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)


def _width(text: str) -> int:
    return len(text.encode("utf-8"))


def _bind_lines(binds: Sequence[Bind]) -> list[str]:
    widest = max((_width(bind.key) for bind in binds), default=0)
    lines = []
    for bind in binds:
        if bind.description is None:
            raise ValueError(f"bind {bind.key!r} has no description")
        padding = " " * (widest - _width(bind.key) + 1)
        lines.append(f"{bind.key}{padding}{bind.description}")
    return lines


def format_binds(binds: Sequence[Bind]) -> str:
    """One line per bind: the key, padded to a common column, then its description."""
    return "\n".join(_bind_lines(binds))


def show_binds(binds: Sequence[Bind]) -> subprocess.Popen:
    """Open a panel listing the given binds."""
    lines = _bind_lines(binds)
    longest = max((_width(line) for line in lines), default=0)
    text = "\n".join(lines)
    cmd = f"printf '\x1b[?25l{text}'; sleep infinity"
    return open_kitty(cmd, len(binds), longest)


def show_binds_in_submap(name: str) -> subprocess.Popen:
    """Open a panel listing the described binds of submap `name`."""
    selected = [
        b for b in _binds.binds() if b.submap == name and b.description is not None
    ]
    return show_binds(selected)


class SubmapStep(MainLoopStep):
    """Keeps a bind panel open while a submap is active."""

    def __init__(self) -> None:
        self.panel: subprocess.Popen | None = None

    def on_event(self, event: Event) -> StepState:
        if isinstance(event, Submap):
            self.close()
            if event.name is not None:
                self.panel = show_binds_in_submap(event.name)
        return StepState.KEEP_ACTIVE

    def close(self) -> None:
        """Kill the open panel, if any."""
        panel, self.panel = self.panel, None
        if panel is None:
            return
        with suppress(OSError, subprocess.TimeoutExpired):
            panel.kill()
            panel.wait(timeout=1)