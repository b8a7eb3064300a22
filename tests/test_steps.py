import pytest

from homehelper.events import ConfigReloaded, Submap
from homehelper.steps import MainLoopStep, StepState


def test_default_hooks_keep_step_active():
    step = MainLoopStep()
    assert step.step() is StepState.KEEP_ACTIVE
    assert step.on_event(ConfigReloaded()) is StepState.KEEP_ACTIVE
    assert step.on_event(Submap("resize")) is StepState.KEEP_ACTIVE


def test_default_on_error_reraises_same_error():
    error = ValueError("boom")
    with pytest.raises(ValueError, match="boom") as info:
        MainLoopStep().on_error(error)
    assert info.value is error


def test_subclass_keeps_default_hooks():
    class Countdown(MainLoopStep):
        def __init__(self):
            self.left = 2

        def step(self):
            self.left -= 1
            return StepState.DONE if self.left == 0 else StepState.KEEP_ACTIVE

    step = Countdown()
    assert MainLoopStep.on_event(step, Submap(None)) is StepState.KEEP_ACTIVE
    assert MainLoopStep.step(step) is StepState.KEEP_ACTIVE
    assert step.left == 2


def test_default_on_error_applies_to_subclass():
    class Quiet(MainLoopStep):
        pass

    error = RuntimeError("x")
    with pytest.raises(RuntimeError) as info:
        MainLoopStep.on_error(Quiet(), error)
    assert info.value is error