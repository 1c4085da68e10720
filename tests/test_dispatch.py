"""Tests for running an intent across several lamps."""

import threading
from unittest.mock import MagicMock, patch

import pytest

from lightkit.commands.base import Brightness, On
from lightkit.services.dispatch_service import (
    ApplySignal,
    LampStatus,
    ListScenes,
    PowerOff,
    RunGradient,
    dispatch,
    run_intent,
)
from lightkit.services.gradient_service import GradientSpec


def make_lamp(name, ok=True):
    lamp = MagicMock()
    lamp.name = name
    lamp.apply.return_value = ok
    return lamp


def test_power_off_sends_off():
    lamp = make_lamp("a")
    assert run_intent(PowerOff(), lamp) == LampStatus(name="a", ok=True)
    lamp.apply.assert_called_once_with(On(state=False))


def test_apply_signal():
    lamp = make_lamp("a")
    run_intent(ApplySignal(signal=Brightness(value=30)), lamp)
    lamp.apply.assert_called_once_with(Brightness(value=30))


def test_gradient_counts_failures():
    lamp = make_lamp("a", ok=False)
    spec = GradientSpec(total_time=0, n_steps=3)

    with patch("lightkit.services.gradient_service.time.sleep"):
        status = run_intent(RunGradient(spec=spec), lamp)

    assert status.ok is False
    assert status.failures == 3


def test_every_lamp_runs_in_its_own_thread():
    """All k tasks are running at the same time before any of them finishes."""
    lamps = [make_lamp(f"lamp{i}") for i in range(3)]
    barrier = threading.Barrier(len(lamps), timeout=5)
    threads = set()

    def apply(signal):
        threads.add(threading.current_thread().name)
        barrier.wait()
        return True

    for lamp in lamps:
        lamp.apply.side_effect = apply

    statuses = dispatch(ApplySignal(signal=On(state=True)), lamps)

    assert [s.name for s in statuses] == ["lamp0", "lamp1", "lamp2"]
    assert all(s.ok for s in statuses)
    assert len(threads) == 3


def test_one_failure_does_not_affect_the_others():
    lamps = [make_lamp("good"), make_lamp("bad", ok=False), make_lamp("boom")]
    lamps[2].apply.side_effect = RuntimeError("kaput")

    statuses = dispatch(PowerOff(), lamps)

    assert statuses[0] == LampStatus(name="good", ok=True)
    assert statuses[1] == LampStatus(name="bad", ok=False, error="request failed")
    assert statuses[2] == LampStatus(name="boom", ok=False, error="kaput")


def test_timeout_reports_stuck_lamp():
    release = threading.Event()
    slow = make_lamp("slow")
    slow.apply.side_effect = lambda signal: release.wait(5)
    fast = make_lamp("fast")

    statuses = dispatch(PowerOff(), [slow, fast], timeout=0.1)
    release.set()

    assert statuses[0] == LampStatus(name="slow", ok=False, error="timed out")
    assert statuses[1].ok is True


def test_no_lamps():
    assert dispatch(PowerOff(), []) == []


def test_scene_listing_is_not_dispatched():
    with pytest.raises(ValueError):
        dispatch(ListScenes(), [make_lamp("a")])


def test_every_lamp_is_closed_when_its_task_ends():
    lamps = [make_lamp("good"), make_lamp("boom")]
    lamps[1].apply.side_effect = RuntimeError("kaput")

    dispatch(PowerOff(), lamps)

    for lamp in lamps:
        lamp.close.assert_called_once_with()
