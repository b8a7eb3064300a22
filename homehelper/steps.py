"""Temporary, non-blocking stages run by the daemon's main loop."""

from __future__ import annotations

from enum import Enum

from homehelper.events import Event


class StepState(Enum):
    """Whether a step stays in the main loop after it has run."""

    KEEP_ACTIVE = "keep_active"
    DONE = "done"


class MainLoopStep:
    """A stage of the main loop, often serving one client request.

    Subclasses override the hooks they need; the defaults keep the step active.
    """

    def step(self) -> StepState:
        """Run once per main-loop iteration."""
        return StepState.KEEP_ACTIVE

    def on_event(self, event: Event) -> StepState:
        """React to one Hyprland event."""
        return StepState.KEEP_ACTIVE

    def on_error(self, error: Exception) -> StepState:
        """Handle an error raised by step or on_event.

        Raising makes the main loop drop this step and abandon the current
        iteration; the default re-raises the error unchanged.
        """
        if not isinstance(error, BaseException):
            raise TypeError(
                f"{type(self).__name__}.on_error expects an exception, "
                f"got {type(error).__name__}"
            )
        raise error