"""Nanoleaf panels.

Every property is sent as a nested object, ``{"<prop>": {"value": n}}``,
and properties changed together are merged into one body::

    {"hue": {"value": 120}, "sat": {"value": 20}, "brightness": {"value": 70}}

Native ranges: hue [0, 360], sat and brightness [0, 100], colour
temperature ``ct`` [1200, 6500] where the low end is the warm end. A
command changes all panels of the controller at once.
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
from lightkit.commands.scaling import scale_float
from lightkit.lamps.base import Lamp

PORT = 16021
CT_MIN = 1200
CT_MAX = 6500


def wrap(**values) -> dict:
    return {label: {"value": value} for label, value in values.items()}


def temp_mapping(percent: int) -> int:
    """100% (warmest) -> 1200, 0% -> 6500."""
    return scale_float(100 - percent, 100, CT_MAX - CT_MIN) + CT_MIN


def encode_power(signal: On) -> Optional[DeviceCommand]:
    return DeviceCommand.from_payload("state/on", wrap(on=signal.state))


def encode_brightness(signal: Brightness) -> Optional[DeviceCommand]:
    payload = wrap(brightness=signal.value)
    if signal.duration is not None:
        payload["brightness"]["duration"] = signal.duration
    return DeviceCommand.from_payload("state", payload)


def encode_color(signal: Colour) -> Optional[DeviceCommand]:
    return DeviceCommand.from_payload("state", wrap(hue=signal.hue, sat=signal.sat, brightness=signal.bri))


def encode_palette(signal: Palette) -> Optional[DeviceCommand]:
    payload = wrap(
        hue=scale_float(signal.hue, 360.0, 360),
        sat=scale_float(signal.saturation, 1.0, 100),
        brightness=scale_float(signal.value, 1.0, 100),
    )
    return DeviceCommand.from_payload("state", payload)


def encode_temperature(signal: Temperature) -> Optional[DeviceCommand]:
    return DeviceCommand.from_payload("state", wrap(ct=temp_mapping(signal.percent)))


def encode_scene(signal: Scene) -> Optional[DeviceCommand]:
    return DeviceCommand.from_payload("effects", {"select": signal.name})


def encode_identify(signal: Identify) -> Optional[DeviceCommand]:
    return DeviceCommand.from_payload("identify", {})


class Nanoleaf(Lamp):
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
        GetSignal.SCENES: "effects/effectsList",
        GetSignal.STATE: "state",
    }

    def __init__(self, ip: str, api_key: str, *, name: str = "nanoleaf", timeout: float = 5):
        super().__init__(name, timeout=timeout)
        self.ip = ip
        self.api_key = api_key

    def address(self) -> str:
        return f"http://{self.ip}:{PORT}/api/v1/{self.api_key}"
