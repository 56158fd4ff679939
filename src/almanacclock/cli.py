"""CLI entry point for the almanac clock.

Examples:
    almanacclock --lat 45 --lng -93 --when "2024-06-21 12:00"
    almanacclock --address "Minneapolis, MN" --events events.json --png clock.png
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from almanacclock.angles import format_clock_time
from almanacclock.compute import compute_clock_state
from almanacclock.config import load_settings
from almanacclock.errors import AlmanacClockError
from almanacclock.events import load_events
from almanacclock.location import geocode_address, observer_context
from almanacclock.logging_setup import setup_logging
from almanacclock.models import ClockState, GeoLocation
from almanacclock.solar import format_day_length


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="almanacclock",
        description="Compute the solar, lunar and annual rings for a place and time.",
    )
    parser.add_argument("--lat", type=float, help="Latitude in decimal degrees")
    parser.add_argument("--lng", type=float, help="Longitude in decimal degrees")
    parser.add_argument("--address", help="Free-form place name, geocoded with Nominatim")
    parser.add_argument(
        "--when",
        default=datetime.now().strftime("%Y-%m-%d %H:%M"),
        help='Local wall-clock time, "YYYY-MM-DD HH:MM" (default: now)',
    )
    parser.add_argument("--events", type=Path, help="JSON list of annual events")
    parser.add_argument("--png", type=Path, help="Write a PNG rendering to this path")
    parser.add_argument("--svg", type=Path, help="Write an SVG rendering to this path")
    return parser


def format_summary(state: ClockState) -> str:
    """Plain-text summary of the three rings."""
    lng = state.context.location.lng
    solar, lunar, annual = state.solar, state.lunar, state.annual
    lines = [
        f"Location: {state.context.location.label}",
        f"Local apparent time: {format_clock_time(state.context.utc_dt, lng)}",
        "",
        f"Sun: {solar.period} (ring {solar.rotation_deg:.1f} deg)",
    ]
    for name, dt in solar.events.instants().items():
        lines.append(f"  {name.replace('_', ' '):<14} {format_clock_time(dt, lng)}")
    lines.append(f"  day length     {format_day_length(solar.day_length)}")
    lines += [
        "",
        f"Moon: {lunar.phase_name}, {lunar.illumination_percent}% lit (ring {lunar.rotation_deg:.1f} deg)",
        f"  {lunar.traditional_moon.name}: {lunar.traditional_moon.description}",
    ]
    if lunar.is_blue_moon_month:
        lines.append("  Blue Moon month")
    lines += [
        "",
        f"Year: day {annual.day_of_year} of {annual.days_in_year}, {annual.sign.name}"
        f" (ring {annual.rotation_deg:.1f} deg)",
    ]
    for p in annual.events:
        mark = "*" if p.is_today else " "
        lines.append(f" {mark} {p.event.name} ({p.event.month}/{p.event.day}) at {p.arc.start_angle:.1f} deg")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    settings = load_settings()
    setup_logging(settings.log_level)

    parser = build_parser()
    args = parser.parse_args(argv)
    if args.address is None and (args.lat is None or args.lng is None):
        parser.error("give either --address or both --lat and --lng")

    try:
        if args.address is not None:
            location = geocode_address(args.address)
        else:
            location = GeoLocation(lat=args.lat, lng=args.lng)
        events = load_events(args.events) if args.events else ()
        state = compute_clock_state(observer_context(location, args.when), events)
    except AlmanacClockError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(format_summary(state))

    if args.svg is not None:
        from almanacclock.renderers.svg_clock import render_svg

        args.svg.parent.mkdir(parents=True, exist_ok=True)
        args.svg.write_text(render_svg(state), encoding="utf-8")
        print(f"Saved: {args.svg}")
    if args.png is not None:
        from almanacclock.renderers.static import save_static_chart

        print(f"Saved: {save_static_chart(state, args.png)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
