"""Philips Hue bulbs behind a bridge (v1 API).

Properties are sent as one flat object. Native ranges: hue [0, 65535],
sat and bri [0, 255], colour temperature ``ct`` [154, 500] in mired, so
the low end is the cold end. A bulb that is off stays off when only its
colour changes, so colour and temperature commands also send ``"on": true``::

    {"hue": 30000, "sat": 200, "bri": 255, "on": true}

Each bulb is addressed on its own through its ``lamp_id``.
"""
from typing import Optional

from lightkit.commands.base import (
    Brightness,
    Colour,
    DeviceCommand,
    GetSignal,
    Identify,
    On,
    Palette,
    Scene,
    Temperature,
)
from lightkit.commands.scaling import scale, scale_float
from lightkit.lamps.base import Lamp

HUE_MAX = 65535
SAT_MAX = 255
BRI_MAX = 255
CT_MIN = 154
CT_MAX = 500


def temp_mapping(percent: int) -> int:
    """100% (warmest) -> 154, 0% -> 500."""
    return scale(100 - percent, 100, CT_MAX - CT_MIN) + CT_MIN


def encode_power(signal: On) -> Optional[DeviceCommand]:
    return DeviceCommand.from_payload("state/on", {"on": signal.state})


def encode_brightness(signal: Brightness) -> Optional[DeviceCommand]:
    return DeviceCommand.from_payload("state", {"bri": scale(signal.value, 100, BRI_MAX)})


def encode_color(signal: Colour) -> Optional[DeviceCommand]:
    payload = {
        "hue": scale(signal.hue, 360, HUE_MAX),
        "sat": scale(signal.sat, 100, SAT_MAX),
        "bri": scale(signal.bri, 100, BRI_MAX),
        "on": True,
    }
    return DeviceCommand.from_payload("state", payload)


def encode_palette(signal: Palette) -> Optional[DeviceCommand]:
    payload = {
        "hue": scale_float(signal.hue, 360.0, HUE_MAX),
        "sat": scale_float(signal.saturation, 1.0, SAT_MAX),
        "bri": scale_float(signal.value, 1.0, BRI_MAX),
        "on": True,
    }
    return DeviceCommand.from_payload("state", payload)


def encode_temperature(signal: Temperature) -> Optional[DeviceCommand]:
    return DeviceCommand.from_payload("state", {"ct": temp_mapping(signal.percent), "on": True})


def encode_scene(signal: Scene) -> Optional[DeviceCommand]:
    # Scenes live on the bridge, not on the bulb
    return None


def encode_identify(signal: Identify) -> Optional[DeviceCommand]:
    return None


class Hue(Lamp):
    encoders = {
        On: encode_power,
        Brightness: encode_brightness,
        Colour: encode_color,
        Palette: encode_palette,
        Temperature: encode_temperature,
        Scene: encode_scene,
        Identify: encode_identify,
    }
    queries = {
        GetSignal.STATE: "",
    }

    def __init__(self, ip: str, api_key: str, lamp_id: int, *, name: Optional[str] = None, timeout: float = 5):
        super().__init__(name or f"hue{lamp_id}", timeout=timeout)
        self.ip = ip
        self.api_key = api_key
        self.lamp_id = lamp_id

    def address(self) -> str:
        return f"http://{self.ip}/api/{self.api_key}/lights/{self.lamp_id}"
