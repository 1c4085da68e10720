"""Run one resolved intent against several lamps at once.

Each lamp gets its own thread; lamps share the intent (immutable) and
nothing else. A lamp that fails is reported in its `LampStatus` and never
holds up the others.
"""
import logging
import threading
import time
from typing import Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict

from lightkit.commands.base import On, Signal
from lightkit.lamps.base import Lamp
from lightkit.services.gradient_service import GradientSpec, run_gradient

logger = logging.getLogger(__name__)


class PowerOff(BaseModel):
    model_config = ConfigDict(frozen=True)


class ApplySignal(BaseModel):
    model_config = ConfigDict(frozen=True)
    signal: Signal


class RunGradient(BaseModel):
    model_config = ConfigDict(frozen=True)
    spec: GradientSpec


class ListScenes(BaseModel):
    """Print the scene names; never dispatched to lamps."""
    model_config = ConfigDict(frozen=True)


Intent = Union[PowerOff, ApplySignal, RunGradient, ListScenes]


class LampStatus(BaseModel):
    name: str
    ok: bool
    error: Optional[str] = None
    # failed steps of a gradient run
    failures: int = 0


def run_intent(intent: Intent, lamp: Lamp) -> LampStatus:
    if isinstance(intent, PowerOff):
        return LampStatus(name=lamp.name, ok=lamp.apply(On(state=False)))
    if isinstance(intent, ApplySignal):
        return LampStatus(name=lamp.name, ok=lamp.apply(intent.signal))
    if isinstance(intent, RunGradient):
        result = run_gradient(lamp, intent.spec)
        return LampStatus(name=lamp.name, ok=result.failures == 0, failures=result.failures)
    raise ValueError(f"{type(intent).__name__} is not dispatched to lamps")


def dispatch(intent: Intent, lamps: Sequence[Lamp], timeout: Optional[float] = None) -> list[LampStatus]:
    """Run the intent on every lamp concurrently and wait for all of them.

    Statuses come back in the order of ``lamps``. With a ``timeout`` a lamp
    still busy after that many seconds is reported as timed out; its
    thread is left to finish in the background.
    """
    if isinstance(intent, ListScenes):
        raise ValueError("ListScenes is not dispatched to lamps")

    statuses: list[Optional[LampStatus]] = [None] * len(lamps)

    def task(i: int, lamp: Lamp) -> None:
        try:
            statuses[i] = run_intent(intent, lamp)
        except Exception as e:
            logger.exception("%s: unexpected error", lamp.name)
            statuses[i] = LampStatus(name=lamp.name, ok=False, error=str(e))
        finally:
            lamp.close()

    threads = [
        threading.Thread(target=task, args=(i, lamp), name=f"lamp-{lamp.name}", daemon=True)
        for i, lamp in enumerate(lamps)
    ]
    for t in threads:
        t.start()
    deadline = None if timeout is None else time.monotonic() + timeout
    for t in threads:
        t.join(None if deadline is None else max(0.0, deadline - time.monotonic()))

    results = []
    for lamp, status in zip(lamps, statuses):
        if status is None:
            status = LampStatus(name=lamp.name, ok=False, error="timed out")
        elif not status.ok and status.error is None:
            status = status.model_copy(update={"error": "request failed"})
        logger.info("%s: %s", status.name, "ok" if status.ok else status.error)
        results.append(status)
    return results
