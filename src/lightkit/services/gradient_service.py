import logging
import time
from typing import Callable, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field

from lightkit.commands.base import Palette
from lightkit.lamps.base import Lamp

logger = logging.getLogger(__name__)

DEFAULT_START = Palette(hue=30.0, saturation=1.0, value=0.8)
DEFAULT_END = Palette(hue=30.0, saturation=0.3, value=0.8)


class GradientSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: Palette = DEFAULT_START
    end: Palette = DEFAULT_END
    total_time: float = Field(..., ge=0.0)
    n_steps: int = Field(..., ge=1)

    @property
    def delay(self) -> float:
        return self.total_time / self.n_steps


class GradientResult(BaseModel):
    emissions: int = 0
    failures: int = 0


def interpolate(start: Palette, end: Palette, t: float) -> Palette:
    """Linear blend of two colours at ``t`` in [0, 1].

    Hue travels along the shorter way round the colour wheel, so 350 -> 10
    passes through 0 rather than 180.
    """
    dh = (end.hue - start.hue + 180.0) % 360.0 - 180.0
    return Palette.of(
        start.hue + dh * t,
        start.saturation + (end.saturation - start.saturation) * t,
        start.value + (end.value - start.value) * t,
    )


def steps(spec: GradientSpec) -> Iterator[Palette]:
    """The ``n_steps`` colours of the gradient, first = start, last = end."""
    last = spec.n_steps - 1
    for i in range(last):
        yield interpolate(spec.start, spec.end, i / last)
    yield spec.end


def run_gradient(lamp: Lamp, spec: GradientSpec, sleep: Optional[Callable[[float], None]] = None) -> GradientResult:
    """Walk the lamp through the gradient, one colour every ``spec.delay`` seconds.

    A failed step is logged by the lamp and counted; the run carries on.
    """
    sleep = sleep or time.sleep
    delay = spec.delay
    result = GradientResult()
    logger.info("%s: gradient of %d steps over %ss", lamp.name, spec.n_steps, spec.total_time)

    for i, colour in enumerate(steps(spec)):
        if not lamp.apply(colour):
            result.failures += 1
        result.emissions += 1
        if i < spec.n_steps - 1:
            sleep(delay)

    return result
