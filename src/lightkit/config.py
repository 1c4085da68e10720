"""Lamp settings from the ini file, with environment overrides.

    [nanoleaf]
    ip = 192.168.1.20
    api = <auth token>

    [hue]
    ip = 192.168.1.2
    api = <username>
    lamps = 1, 2

    [lightkit]
    timeout = 5

``NANOLEAF_IP``, ``NANOLEAF_API_KEY``, ``HUE_BRIDGE_IP`` and ``HUE_APP_KEY``
take precedence over the file; a ``.env`` file is honoured by the CLI.
"""
import configparser
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lightkit.errors import ConfigError
from lightkit.lamps.base import Lamp
from lightkit.lamps.hue import Hue
from lightkit.lamps.nanoleaf import Nanoleaf

APP_NAME = "lightkit"

ENV_OVERRIDES = {
    "nanoleaf": {"ip": "NANOLEAF_IP", "api": "NANOLEAF_API_KEY"},
    "hue": {"ip": "HUE_BRIDGE_IP", "api": "HUE_APP_KEY"},
}


class NanoleafSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    ip: str = Field(..., min_length=1)
    api: str = Field(..., min_length=1)


class HueSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    ip: str = Field(..., min_length=1)
    api: str = Field(..., min_length=1)
    lamps: tuple[int, ...] = (1, 2)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    nanoleaf: Optional[NanoleafSettings] = None
    hue: Optional[HueSettings] = None
    timeout: float = 5


def _xdg_dir(var: str, fallback: str) -> Path:
    base = os.getenv(var) or str(Path.home() / fallback)
    return Path(base) / APP_NAME


def config_path(path: Optional[Union[str, Path]] = None) -> Path:
    if path:
        return Path(path)
    env = os.getenv("LIGHTKIT_CONFIG")
    if env:
        return Path(env)
    return _xdg_dir("XDG_CONFIG_HOME", ".config") / "conf.ini"


def scene_cache_path() -> Path:
    env = os.getenv("LIGHTKIT_SCENE_CACHE")
    if env:
        return Path(env)
    return _xdg_dir("XDG_CACHE_HOME", ".cache") / "scenes.json"


def _section(parser: configparser.ConfigParser, name: str) -> Optional[dict]:
    values = dict(parser[name]) if parser.has_section(name) else {}
    for key, var in ENV_OVERRIDES[name].items():
        if os.getenv(var):
            values[key] = os.environ[var]
    if not values:
        return None

    for key in ("ip", "api"):
        if not values.get(key):
            raise ConfigError(f"'{key}' not found in [{name}] section")
    return values


def _lamp_ids(raw: str) -> tuple[int, ...]:
    try:
        return tuple(int(part) for part in raw.replace(",", " ").split())
    except ValueError:
        raise ConfigError(f"[hue] lamps must be a list of numbers, got {raw!r}") from None


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Read the settings, raising `ConfigError` if no lamp is configured."""
    path = config_path(path)
    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read(path, encoding="utf-8")
    except configparser.Error as e:
        raise ConfigError(f"unable to parse {path}: {e}") from e

    nanoleaf = _section(parser, "nanoleaf")
    hue = _section(parser, "hue")
    if nanoleaf is None and hue is None:
        raise ConfigError(f"no [nanoleaf] or [hue] section found in {path}")

    if hue is not None and "lamps" in hue:
        hue["lamps"] = _lamp_ids(hue["lamps"])

    try:
        return Settings(
            nanoleaf=NanoleafSettings(**nanoleaf) if nanoleaf else None,
            hue=HueSettings(**hue) if hue else None,
            timeout=parser.get(APP_NAME, "timeout", fallback="5"),
        )
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def build_lamps(settings: Settings) -> list[Lamp]:
    """The configured lamps in index order: the Nanoleaf first, then each Hue bulb."""
    lamps: list[Lamp] = []
    if settings.nanoleaf:
        lamps.append(Nanoleaf(settings.nanoleaf.ip, settings.nanoleaf.api, timeout=settings.timeout))
    if settings.hue:
        for lamp_id in settings.hue.lamps:
            lamps.append(Hue(settings.hue.ip, settings.hue.api, lamp_id, timeout=settings.timeout))
    return lamps


def select_lamps(lamps: list[Lamp], keys: list[str]) -> list[Lamp]:
    """Pick lamps by index or by name, keeping registry order and dropping repeats."""
    chosen = set()
    for key in keys:
        if key.isdigit():
            index = int(key)
            if index >= len(lamps):
                raise ConfigError(f"no lamp with index {index}, {len(lamps)} configured")
            chosen.add(index)
        else:
            matches = [i for i, lamp in enumerate(lamps) if lamp.name == key]
            if not matches:
                raise ConfigError(f"no lamp named {key!r}")
            chosen.update(matches)
    return [lamp for i, lamp in enumerate(lamps) if i in chosen]
