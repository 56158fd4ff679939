"""Matplotlib static PNG renderer."""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402
from matplotlib.patches import Circle, Wedge  # noqa: E402

from almanacclock.models import ClockState, GradientStop  # noqa: E402
from almanacclock.renderers.svg_clock import color_at  # noqa: E402

_ROOT = Path(__file__).parent.parent.parent.parent
_BG = "#0a1628"


def _theta(screen_angle: float) -> float:
    """Clock angle (0 at top, clockwise) to matplotlib's (0 at +x, counter-clockwise)."""
    return 90.0 - screen_angle


def _sector(ax, start: float, span: float, r_in: float, r_out: float, **kwargs) -> None:
    ax.add_patch(
        Wedge(
            (0, 0),
            r_out,
            _theta(start + span),
            _theta(start),
            width=r_out - r_in,
            **kwargs,
        )
    )


def _conic(ax, stops: tuple[GradientStop, ...], rotation: float, r_in: float, r_out: float, mirrored: bool) -> None:
    for a in np.arange(0.0, 360.0, 2.0):
        color = color_at(stops, a + 1.0)
        start = rotation - a - 2.0 if mirrored else rotation + a
        _sector(ax, start, 2.2, r_in, r_out, color=color, linewidth=0)


def _point(angle: float, r: float) -> tuple[float, float]:
    rad = np.radians(angle)
    return r * np.sin(rad), r * np.cos(rad)


def render_static_chart(state: ClockState, chart_size: int = 10) -> Figure:
    """Render a ClockState as a static matplotlib image.

    Args:
        state: Fully computed clock.
        chart_size: Output image size in inches.

    Returns:
        matplotlib Figure object.
    """
    fig, ax = plt.subplots(figsize=(chart_size, chart_size))
    fig.patch.set_facecolor(_BG)
    ax.set_facecolor(_BG)

    annual = state.annual
    for w in annual.wedges:
        _sector(
            ax,
            annual.rotation_deg + w.end_angle,
            w.arc_degrees,
            0.88,
            0.98,
            facecolor=w.sign.color,
            alpha=0.3,
            edgecolor=w.sign.color,
            linewidth=0.6,
        )
        x, y = _point(annual.rotation_deg + w.midpoint_angle, 0.93)
        ax.text(x, y, w.sign.name, color=w.sign.color, fontsize=7, ha="center", va="center")

    ax.add_patch(Circle((0, 0), 0.88, color="#1e293b"))
    for p in annual.events:
        x, y = _point(annual.rotation_deg + p.arc.start_angle, 0.81)
        marker = {"diamond": "D", "starburst": "*", "crescent": "o"}.get(p.marker, "o")
        ax.scatter(
            [x], [y], s=90 if p.is_today else 40, color=p.event.color, marker=marker,
            edgecolors="white", linewidths=0.8, zorder=3,
        )

    lunar = state.lunar
    _conic(ax, lunar.gradient, lunar.rotation_deg, 0.50, 0.72, mirrored=False)
    for anchor in lunar.anchors:
        x, y = _point(lunar.rotation_deg + anchor.angle, 0.61)
        ax.scatter([x], [y], s=60, color="#cbd5e1", edgecolors="#94a3b8", zorder=3)

    solar = state.solar
    _conic(ax, solar.gradient, solar.rotation_deg, 0.22, 0.48, mirrored=True)
    ax.add_patch(Circle((0, 0), 0.22, color=_BG))

    ax.text(0, 0.05, solar.period, color="#e2e8f0", fontsize=14, ha="center", va="center")
    ax.text(0, -0.03, lunar.phase_name, color="#94a3b8", fontsize=9, ha="center", va="center")
    ax.text(0, -0.09, annual.sign.name, color="#94a3b8", fontsize=9, ha="center", va="center")

    ax.plot([0, -0.03, 0.03, 0], [1.0, 1.05, 1.05, 1.0], color="#c9a96e")
    ax.set_xlim(-1.08, 1.08)
    ax.set_ylim(-1.08, 1.08)
    ax.set_aspect("equal")
    ax.axis("off")

    return fig


def save_static_chart(state: ClockState, output_path: Path | None = None) -> Path:
    """Save a ClockState as a PNG file.

    Args:
        state: Fully computed clock.
        output_path: Destination path. Auto-generated under results/ if None.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        ctx = state.context
        when_str = ctx.utc_dt.strftime("%Y_%m_%d_%H_%M")
        filename = f"{ctx.location.label}__{when_str}.png".replace(" ", "_").replace(",", "")
        output_path = _ROOT / "results" / filename

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_chart(state)
    fig.savefig(output_path, facecolor=_BG)
    plt.close(fig)
    return output_path
