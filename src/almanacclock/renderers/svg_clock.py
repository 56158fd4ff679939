"""SVG renderer for the three-ring clock.

Produces a standalone SVG string, or a self-contained HTML page for
embedding via st.components.v1.html(). The SVG uses viewBox="-1 -1 2 2"
with CSS width/height 100% so the browser handles all scaling.

Coordinate system:
  angle 0 at the top of the disc, increasing clockwise (degrees)
  radius 1 = outer edge of the annual ring
"""

from __future__ import annotations

import math
from html import escape

from almanacclock.angles import format_clock_time
from almanacclock.models import ClockState, GradientStop, ProjectedEvent
from almanacclock.solar import format_day_length

_BG = "#0a1628"
_TEXT = "#e2e8f0"
_MUTED = "#94a3b8"
_MARKER = "#c9a96e"

# (inner, outer) radii of each ring
_ANNUAL = (0.74, 0.98)
_LUNAR = (0.50, 0.72)
_SOLAR = (0.22, 0.48)

# Conic gradients are drawn as thin sectors; SVG has no native conic fill
_GRADIENT_SLICES = 180

_SUN_LABELS = {
    "night_end": "Night ends",
    "dawn": "Dawn",
    "sunrise": "Sunrise",
    "solar_noon": "Solar noon",
    "sunset": "Sunset",
    "dusk": "Dusk",
    "night": "Night",
}


def _polar(angle: float, r: float) -> tuple[float, float]:
    rad = math.radians(angle)
    return r * math.sin(rad), -r * math.cos(rad)


def _sector_path(start: float, span: float, r_in: float, r_out: float) -> str:
    """Annular sector from `start` running `span` degrees clockwise."""
    end = start + span
    large = 1 if span > 180 else 0
    x0, y0 = _polar(start, r_out)
    x1, y1 = _polar(end, r_out)
    x2, y2 = _polar(end, r_in)
    x3, y3 = _polar(start, r_in)
    return (
        f"M {x0:.4f},{y0:.4f} A {r_out},{r_out} 0 {large} 1 {x1:.4f},{y1:.4f} "
        f"L {x2:.4f},{y2:.4f} A {r_in},{r_in} 0 {large} 0 {x3:.4f},{y3:.4f} Z"
    )


def _hex_to_rgb(color: str) -> tuple[int, int, int]:
    c = color.lstrip("#")
    return int(c[0:2], 16), int(c[2:4], 16), int(c[4:6], 16)


def color_at(stops: tuple[GradientStop, ...], angle: float) -> str:
    """Linear interpolation of a sorted stop list at `angle`."""
    if angle <= stops[0].angle:
        return stops[0].color
    for a, b in zip(stops, stops[1:]):
        if a.angle <= angle <= b.angle:
            width = b.angle - a.angle
            t = 0.0 if width == 0 else (angle - a.angle) / width
            ca, cb = _hex_to_rgb(a.color), _hex_to_rgb(b.color)
            r, g, bl = (round(x + (y - x) * t) for x, y in zip(ca, cb))
            return f"#{r:02x}{g:02x}{bl:02x}"
    return stops[-1].color


def _conic_ring(stops: tuple[GradientStop, ...], radii: tuple[float, float], mirrored: bool) -> list[str]:
    step = 360.0 / _GRADIENT_SLICES
    parts: list[str] = []
    for i in range(_GRADIENT_SLICES):
        disc_angle = i * step
        color = color_at(stops, disc_angle + step / 2)
        start = -(disc_angle + step) if mirrored else disc_angle
        # Slight overlap hides anti-aliasing seams between slices
        parts.append(
            f'<path d="{_sector_path(start, step + 0.3, *radii)}" fill="{color}"/>'
        )
    return parts


def _event_marker(p: ProjectedEvent, r: float) -> str:
    x, y = _polar(p.arc.start_angle, r)
    size = 0.028 if p.is_today else 0.018
    color = p.event.color
    title = f"<title>{escape(p.event.name)}</title>"
    if p.marker == "diamond":
        return (
            f'<rect x="{x - size:.4f}" y="{y - size:.4f}" width="{2 * size:.4f}" height="{2 * size:.4f}"'
            f' transform="rotate(45 {x:.4f} {y:.4f})" fill="{color}" stroke="#fff"'
            f' stroke-width="0.004">{title}</rect>'
        )
    if p.marker == "crescent":
        return (
            f'<g>{title}<circle cx="{x:.4f}" cy="{y:.4f}" r="{size:.4f}" fill="{color}"'
            f' stroke="#fff" stroke-width="0.004"/>'
            f'<circle cx="{x + size * 0.5:.4f}" cy="{y:.4f}" r="{size:.4f}" fill="{_BG}" opacity="0.8"/></g>'
        )
    if p.marker == "starburst":
        rays = []
        for k in range(8):
            x1, y1 = _polar(k * 45, size * 1.6)
            rays.append(
                f'<line x1="{x:.4f}" y1="{y:.4f}" x2="{x + x1:.4f}" y2="{y + y1:.4f}"'
                f' stroke="{color}" stroke-width="0.004" stroke-linecap="round"/>'
            )
        return (
            f'<g>{title}{"".join(rays)}<circle cx="{x:.4f}" cy="{y:.4f}" r="{size * 0.7:.4f}"'
            f' fill="{color}" stroke="#fff" stroke-width="0.003"/></g>'
        )
    return (
        f'<circle cx="{x:.4f}" cy="{y:.4f}" r="{size:.4f}" fill="{color}"'
        f' stroke="#fff" stroke-width="0.004">{title}</circle>'
    )


def _event_arc(p: ProjectedEvent, r: float) -> str | None:
    if p.arc.arc_degrees <= 0:
        return None
    # Arc runs from the end angle clockwise up to the start angle
    x0, y0 = _polar(p.arc.end_angle, r)
    x1, y1 = _polar(p.arc.end_angle + p.arc.arc_degrees, r)
    large = 1 if p.arc.arc_degrees > 180 else 0
    width = 0.014 if p.is_today else 0.009
    return (
        f'<path d="M {x0:.4f},{y0:.4f} A {r},{r} 0 {large} 1 {x1:.4f},{y1:.4f}"'
        f' fill="none" stroke="{p.event.color}" stroke-width="{width}"'
        f' stroke-linecap="round" stroke-opacity="0.7"/>'
    )


def _event_label(p: ProjectedEvent, r: float) -> str:
    x, y = _polar(p.arc.start_angle, r)
    dy = 0.05 if p.label.needs_flip else -0.05
    return (
        f'<g transform="translate({x:.4f} {y:.4f}) rotate({p.label.rotation_degrees:.2f})">'
        f'<text x="0" y="{dy}" text-anchor="middle" fill="#ffffff" font-size="0.04"'
        f' font-weight="700">{escape(p.event.name)}</text></g>'
    )


def _annual_ring(state: ClockState) -> str:
    ring = state.annual
    parts: list[str] = []
    r_in, r_out = _ANNUAL
    band = r_out - 0.1
    for w in ring.wedges:
        # Wedge runs counter-clockwise from its start; draw it clockwise from its end
        parts.append(
            f'<path d="{_sector_path(w.end_angle, w.arc_degrees, band, r_out)}"'
            f' fill="{w.sign.color}" fill-opacity="0.22" stroke="{w.sign.color}"'
            f' stroke-opacity="0.5" stroke-width="0.003">'
            f"<title>{escape(w.sign.name)}</title></path>"
        )
        x, y = _polar(w.midpoint_angle, band + 0.05)
        parts.append(
            f'<text x="{x:.4f}" y="{y:.4f}" transform="rotate({w.midpoint_angle:.2f} {x:.4f} {y:.4f})"'
            f' text-anchor="middle" dominant-baseline="middle" fill="{w.sign.color}"'
            f' font-size="0.035">{escape(w.sign.name)}</text>'
        )
    parts.append(
        f'<circle r="{(r_in + band) / 2:.4f}" fill="none" stroke="#1e293b" stroke-width="{band - r_in:.4f}"/>'
    )
    marker_r = (r_in + band) / 2
    for p in ring.events:
        arc = _event_arc(p, marker_r)
        if arc is not None:
            parts.append(arc)
    for p in ring.events:
        parts.append(_event_marker(p, marker_r))
        if p.is_today:
            parts.append(_event_label(p, marker_r))
    return f'<g transform="rotate({ring.rotation_deg:.3f})">{"".join(parts)}</g>'


def _lunar_ring(state: ClockState) -> str:
    ring = state.lunar
    parts = _conic_ring(ring.gradient, _LUNAR, mirrored=False)
    r_mid = (_LUNAR[0] + _LUNAR[1]) / 2
    for anchor in ring.anchors:
        x, y = _polar(anchor.angle, r_mid)
        fill = "#f8fafc" if anchor.phase == 0.5 else ("#0f172a" if anchor.phase == 0 else "#cbd5e1")
        parts.append(
            f'<circle cx="{x:.4f}" cy="{y:.4f}" r="0.03" fill="{fill}" stroke="{_MUTED}"'
            f' stroke-width="0.004"><title>{escape(anchor.name)}</title></circle>'
        )
    return f'<g transform="rotate({ring.rotation_deg:.3f})">{"".join(parts)}</g>'


def _solar_ring(state: ClockState) -> str:
    ring = state.solar
    lng = state.context.location.lng
    # Sun-event angles grow clockwise like the rotation itself, so they are
    # drawn mirrored: an event reaches the top marker when it happens.
    parts = _conic_ring(ring.gradient, _SOLAR, mirrored=True)
    r_mid = (_SOLAR[0] + _SOLAR[1]) / 2
    instants = ring.events.instants()
    for name, angle in ring.event_angles.items():
        label = _SUN_LABELS.get(name)
        if label is None:
            continue
        x, y = _polar(-angle, r_mid)
        when = format_clock_time(instants[name], lng)
        parts.append(
            f'<circle cx="{x:.4f}" cy="{y:.4f}" r="0.012" fill="#fff" fill-opacity="0.8">'
            f"<title>{label} {when}</title></circle>"
        )
    return f'<g transform="rotate({ring.rotation_deg:.3f})">{"".join(parts)}</g>'


def _centre(state: ClockState) -> str:
    lines = [
        (state.solar.period, 0.05, _TEXT),
        (f"Day length {format_day_length(state.solar.day_length)}", 0.032, _MUTED),
        (f"{state.lunar.phase_name} · {state.lunar.illumination_percent}%", 0.032, _MUTED),
        (f"Day {state.annual.day_of_year} of {state.annual.days_in_year}", 0.032, _MUTED),
        (state.annual.sign.name, 0.032, _MUTED),
    ]
    if state.lunar.is_blue_moon_month:
        lines.append(("Blue Moon month", 0.03, "#60a5fa"))
    y = -0.05 * (len(lines) - 1) / 2 - 0.02
    out = []
    for text, size, color in lines:
        out.append(
            f'<text x="0" y="{y:.4f}" text-anchor="middle" fill="{color}"'
            f' font-size="{size}">{escape(text)}</text>'
        )
        y += 0.05
    return "".join(out)


def render_svg(state: ClockState) -> str:
    """Return the clock as a standalone SVG document string.

    Each ring is a group rotated clockwise by its ring rotation, so the
    present position on every ring sits under the marker at the top.
    """
    top = "M 0,-0.995 L -0.025,-1.04 L 0.025,-1.04 Z"
    return (
        '<svg id="clock" viewBox="-1.05 -1.05 2.1 2.1" xmlns="http://www.w3.org/2000/svg"'
        ' font-family="Inter, Helvetica, Arial, sans-serif">'
        f'<rect x="-1.05" y="-1.05" width="2.1" height="2.1" fill="{_BG}"/>'
        f"{_annual_ring(state)}"
        f"{_lunar_ring(state)}"
        f"{_solar_ring(state)}"
        f'<circle r="{_SOLAR[0]:.3f}" fill="{_BG}" fill-opacity="0.85"/>'
        f"{_centre(state)}"
        f'<path d="{top}" fill="{_MARKER}"/>'
        "</svg>"
    )


def render_svg_html(state: ClockState, lang: str = "en") -> str:
    """Return a self-contained HTML page with the SVG clock.

    Args:
        state: Fully computed clock.
        lang: Language code ('ko' or 'en') for the caption.

    Returns:
        HTML string suitable for st.components.v1.html().
    """
    caption = escape(state.context.location.label)
    when = format_clock_time(state.context.utc_dt, state.context.location.lng)
    return f"""<!DOCTYPE html>
<html lang="{lang}">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<style>
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
html, body {{
    width: 100%;
    height: 100%;
    background: {_BG};
    overflow: hidden;
    color: {_TEXT};
    font-family: Inter, Helvetica, Arial, sans-serif;
}}
svg#clock {{
    display: block;
    width: 100%;
    height: calc(100% - 2rem);
}}
#caption {{
    height: 2rem;
    line-height: 2rem;
    text-align: center;
    font-size: 0.85rem;
    color: {_MUTED};
}}
</style>
</head>
<body>
{render_svg(state)}
<div id="caption">{caption} · {when}</div>
</body>
</html>"""
