"""Command-line entry point: ``lightkit {on,off,gradient,scene,identify,lamps} [LAMP ...]``."""

import argparse
import logging
import sys
from typing import Optional, Sequence

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from lightkit.commands.base import (
    Brightness,
    Colour,
    GetSignal,
    Identify,
    On,
    Palette,
    Scene,
    Temperature,
)
from lightkit.config import build_lamps, load_settings, scene_cache_path, select_lamps
from lightkit.errors import LightkitError
from lightkit.repo.scene_repository import SceneRepository
from lightkit.services.dispatch_service import (
    ApplySignal,
    Intent,
    ListScenes,
    PowerOff,
    RunGradient,
    dispatch,
)
from lightkit.services.gradient_service import DEFAULT_END, DEFAULT_START, GradientSpec

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lightkit", description="Control Nanoleaf and Hue lamps.")
    parser.add_argument("-c", "--config", help="Path to the lamp ini file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests and payloads")
    parser.add_argument("--timeout", type=float, help="Give up waiting on the lamps after this many seconds")

    targets = argparse.ArgumentParser(add_help=False)
    targets.add_argument("lamp", nargs="+", help="Lamps to control, by index or name (see 'lightkit lamps')")

    sub = parser.add_subparsers(dest="command", required=True)

    on = sub.add_parser("on", parents=[targets], help="Turn the lamps on, optionally with a colour")
    group = on.add_mutually_exclusive_group()
    group.add_argument("-b", "--brightness", type=int, metavar="N", help="Brightness in percent")
    group.add_argument("--colour", type=int, nargs=3, metavar=("H", "S", "B"), help="Hue [0, 360], saturation and brightness [0, 100]")
    group.add_argument("--palette", type=float, nargs=3, metavar=("H", "S", "V"), help="Hue [0, 360), saturation and value [0, 1]")
    group.add_argument("-t", "--temperature", type=int, metavar="N", help="Colour temperature in percent, 100 is warmest")
    on.add_argument("-d", "--duration", type=int, metavar="SECONDS", help="Fade time for --brightness (Nanoleaf only)")

    sub.add_parser("off", parents=[targets], help="Turn the lamps off")

    gradient = sub.add_parser("gradient", parents=[targets], help="Fade between two colours")
    gradient.add_argument("--time", type=float, required=True, metavar="SECONDS", help="Total duration")
    gradient.add_argument("--steps", type=int, required=True, metavar="N", help="Number of colours sent")
    gradient.add_argument("--start", type=float, nargs=3, metavar=("H", "S", "V"), help="First colour")
    gradient.add_argument("--end", type=float, nargs=3, metavar=("H", "S", "V"), help="Last colour")

    scene = sub.add_parser("scene", help="Select a scene or list the known scenes")
    scene.add_argument("lamp", nargs="*", help="Lamps to control, by index or name")
    group = scene.add_mutually_exclusive_group(required=True)
    group.add_argument("-n", "--name", help="Scene to select")
    group.add_argument("--list", action="store_true", help="Print the scene names")

    sub.add_parser("identify", parents=[targets], help="Flash the lamps")
    sub.add_parser("lamps", help="List the configured lamps")
    return parser


def _palette(values: Optional[Sequence[float]], default: Palette) -> Palette:
    if values is None:
        return default
    return Palette.of(*values)


def resolve_intent(args: argparse.Namespace) -> Intent:
    """Turn parsed arguments into an intent. Bad values raise `ValidationError`."""
    if args.command == "off":
        return PowerOff()
    if args.command == "identify":
        return ApplySignal(signal=Identify())
    if args.command == "gradient":
        spec = GradientSpec(
            start=_palette(args.start, DEFAULT_START),
            end=_palette(args.end, DEFAULT_END),
            total_time=args.time,
            n_steps=args.steps,
        )
        return RunGradient(spec=spec)
    if args.command == "scene":
        if args.list:
            return ListScenes()
        return ApplySignal(signal=Scene(name=args.name))

    if args.brightness is not None:
        signal = Brightness(value=args.brightness, duration=args.duration)
    elif args.colour is not None:
        signal = Colour(hue=args.colour[0], sat=args.colour[1], bri=args.colour[2])
    elif args.palette is not None:
        signal = Palette.of(*args.palette)
    elif args.temperature is not None:
        signal = Temperature(percent=args.temperature)
    else:
        signal = On(state=True)
    return ApplySignal(signal=signal)


def list_scenes(lamps) -> int:
    # Any lamp able to answer a scene query will do on a cache miss
    source = next((lamp for lamp in lamps if GetSignal.SCENES in lamp.queries), None)
    try:
        scenes = SceneRepository(scene_cache_path()).load(source)
    finally:
        if source is not None:
            source.close()
    for name in scenes.names:
        print(name)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    load_dotenv(find_dotenv(usecwd=True))

    if args.command == "on" and args.duration is not None and args.brightness is None:
        parser.error("--duration only applies together with --brightness")

    intent = None
    if args.command != "lamps":
        try:
            intent = resolve_intent(args)
        except ValidationError as e:
            parser.error(str(e))

    try:
        lamps = build_lamps(load_settings(args.config))
        if intent is None:
            for i, lamp in enumerate(lamps):
                print(f"{i}\t{lamp.name}\t{lamp.address()}")
            return 0

        if isinstance(intent, ListScenes):
            return list_scenes(select_lamps(lamps, args.lamp) if args.lamp else lamps)

        if not args.lamp:
            parser.error("no lamp selected")
        selected = select_lamps(lamps, args.lamp)
    except LightkitError as e:
        logger.error("%s", e)
        return 1

    statuses = dispatch(intent, selected, timeout=args.timeout)
    failed = [s.name for s in statuses if not s.ok]
    if failed:
        logger.warning("No answer from: %s", ", ".join(failed))
    return 0


if __name__ == "__main__":
    sys.exit(main())
