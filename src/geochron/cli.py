"""Command-line front end.

    geochron list
    geochron add Asia/Tokyo
    geochron set 2 Europe/Paris
    geochron remove 2
    geochron show --at 2024-06-21T12:00:00Z
    geochron map --format svg --out map.svg
    geochron run --seconds 10
"""

import argparse
import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from geochron.app import GeochronApp
from geochron.cities import compute_city_labels
from geochron.config import Settings, configure_logging, load_settings
from geochron.errors import InvalidTimezone
from geochron.i18n import t
from geochron.models import CityLabel, ClockReading
from geochron.solar import compute_day_night, to_utc
from geochron.timers import AsyncioTimer, VirtualTimer


def _parse_instant(value: str) -> datetime:
    try:
        return to_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not an ISO 8601 instant: {value!r}") from e


def _format_reading(reading: ClockReading) -> str:
    return (
        f"#{reading.clock_id:<3} {reading.timezone:<24} {reading.formatted_time}"
        f"  {reading.formatted_weekday}, {reading.formatted_date}"
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="geochron", description="World clocks and day/night map")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List configured clocks")

    add = sub.add_parser("add", help="Add a clock")
    add.add_argument("timezone", nargs="?", help="IANA zone (default: host zone)")

    remove = sub.add_parser("remove", help="Remove a clock")
    remove.add_argument("id", type=int)

    set_tz = sub.add_parser("set", help="Change a clock's timezone")
    set_tz.add_argument("id", type=int)
    set_tz.add_argument("timezone")

    show = sub.add_parser("show", help="Print clock readings and city times")
    show.add_argument("--at", type=_parse_instant, default=None, help="ISO 8601 instant")

    map_cmd = sub.add_parser("map", help="Render the day/night map")
    map_cmd.add_argument("--at", type=_parse_instant, default=None, help="ISO 8601 instant")
    map_cmd.add_argument("--format", choices=("png", "svg"), default="png")
    map_cmd.add_argument("--out", type=Path, default=None, help="Output file")

    run = sub.add_parser("run", help="Run the live clocks")
    run.add_argument("--seconds", type=float, default=None, help="Stop after N seconds")

    return parser


def _show(app: GeochronApp, lang: str) -> None:
    frame = app.scheduler.tick()
    if not frame.readings:
        print(t("no_clocks", lang))
    for reading in frame.readings:
        print(_format_reading(reading))
    if frame.day_night is not None:
        sun = frame.day_night.subsolar
        print(f"{t('label_subsolar', lang)}: {sun.latitude:+.2f}, {sun.longitude:+.2f}")
        print(f"{t('label_side', lang)}: {frame.day_night.daylight_side.value}")
    for label in app.scheduler.refresh_labels():
        print(f"  {label.city.name:<12} {label.time}")


def _render_map(
    app: GeochronApp, instant: datetime, fmt: str, out: Path | None
) -> Path:
    settings = app.settings
    state = compute_day_night(instant, settings.curve_step)
    labels = compute_city_labels(instant, app.engine)
    if out is None:
        out = settings.output_dir / f"geochron__{state.instant:%Y_%m_%d_%H_%M}.{fmt}"
    if fmt == "svg":
        from geochron.renderers.svg_2d import render_svg

        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(render_svg(state, labels), encoding="utf-8")
        return out

    from geochron.renderers.static import save_static_map

    return save_static_map(state, labels, out)


async def _run(settings: Settings, seconds: float | None) -> None:
    last_shown: dict[int, int] = {}

    def print_clocks(instant: datetime, readings: tuple[ClockReading, ...]) -> None:
        for reading in readings:
            if last_shown.get(reading.clock_id) != reading.second:
                last_shown[reading.clock_id] = reading.second
                print(_format_reading(reading))

    def print_labels(labels: tuple[CityLabel, ...]) -> None:
        print("  ".join(f"{label.city.name} {label.time}" for label in labels))

    app = GeochronApp(
        settings, AsyncioTimer(), on_clock_readings=print_clocks, on_city_labels=print_labels
    )
    app.start()
    try:
        if seconds is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(seconds)
    finally:
        app.stop()


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    settings = load_settings()
    configure_logging(settings.log_level)
    args = _build_parser().parse_args(argv)
    lang = settings.lang

    if args.command == "run":
        try:
            asyncio.run(_run(settings, args.seconds))
        except KeyboardInterrupt:
            pass
        return 0

    at = getattr(args, "at", None) or datetime.now(timezone.utc)
    app = GeochronApp(settings, VirtualTimer(at))

    try:
        if args.command == "list":
            if len(app.registry) == 0:
                print(t("no_clocks", lang))
            for clock in app.registry:
                print(f"#{clock.id:<3} {clock.timezone}")
        elif args.command == "add":
            clock = app.add_clock(args.timezone)
            print(t("clock_added", lang).format(id=clock.id, timezone=clock.timezone))
        elif args.command == "remove":
            app.remove_clock(args.id)
            print(t("clock_removed", lang).format(id=args.id))
        elif args.command == "set":
            app.set_timezone(args.id, args.timezone)
            print(t("clock_updated", lang).format(id=args.id, timezone=args.timezone))
        elif args.command == "show":
            _show(app, lang)
        elif args.command == "map":
            path = _render_map(app, at, args.format, args.out)
            print(t("map_saved", lang).format(path=path))
    except InvalidTimezone as e:
        logger.debug("[cli] {}", e)
        print(t("error_timezone", lang).format(timezone=e.timezone), file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
