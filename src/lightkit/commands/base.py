import json
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SignalModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class On(SignalModel):
    """Switch the lamp on or off."""
    state: bool


class Brightness(SignalModel):
    """Set the brightness, in percent."""
    value: int = Field(..., ge=0, le=100)
    # Transition time in seconds, only honoured by lamps that support it
    duration: Optional[int] = Field(None, ge=0)


class Colour(SignalModel):
    """Set hue (degrees), saturation and brightness (percent) in one go."""
    hue: int = Field(..., ge=0, le=360)
    sat: int = Field(..., ge=0, le=100)
    bri: int = Field(..., ge=0, le=100)


class Palette(SignalModel):
    """A colour in HSV space, the form gradients are interpolated in."""
    hue: float = Field(..., ge=0.0, lt=360.0)
    saturation: float = Field(..., ge=0.0, le=1.0)
    value: float = Field(..., ge=0.0, le=1.0)

    @classmethod
    def of(cls, hue: float, saturation: float, value: float) -> "Palette":
        return cls(hue=hue % 360.0, saturation=saturation, value=value)


class Temperature(SignalModel):
    """Colour temperature in percent, 100 being the warmest."""
    percent: int = Field(..., ge=0, le=100)


class Scene(SignalModel):
    """Select a named scene stored on the lamp."""
    name: str = Field(..., min_length=1)


class Identify(SignalModel):
    """Flash the lamp so it can be found."""


Signal = Union[On, Brightness, Colour, Palette, Temperature, Scene, Identify]


class GetSignal(Enum):
    SCENES = "scenes"
    STATE = "state"


class DeviceCommand(BaseModel):
    """A signal encoded for one lamp: where to PUT it and what to send."""
    model_config = ConfigDict(frozen=True)

    endpoint: str
    body: str

    @classmethod
    def from_payload(cls, endpoint: str, payload: dict) -> "DeviceCommand":
        return cls(endpoint=endpoint, body=json.dumps(payload, separators=(",", ":")))

    @property
    def payload(self) -> dict:
        return json.loads(self.body)
