"""Matplotlib static PNG renderer for the day/night world map."""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure
from matplotlib.patches import PathPatch
from matplotlib.path import Path as MplPath

from geochron.models import CityLabel, DayNightState
from geochron.renderers.palette import (
    LABEL_COLOR,
    LAYER_COLORS,
    SUN_COLOR,
    SUN_EDGE_COLOR,
    TERMINATOR_COLOR,
)
from geochron.shading import NIGHT, Ring, shading_layers, shifted_copies
from geochron.solar import close_curve, unroll_curve

_ROOT = Path(__file__).parent.parent.parent.parent


def _rings_to_path(rings: tuple[Ring, ...]) -> MplPath | None:
    """One compound path holding every ring, each drawn one turn west, in place, and east."""
    vertices: list[np.ndarray] = []
    codes: list[np.ndarray] = []
    for ring in rings:
        for copy in shifted_copies(ring):
            xy = np.array([(lon, lat) for lat, lon in copy] + [copy[0][::-1]], dtype=float)
            ring_codes = np.full(len(xy), MplPath.LINETO, dtype=np.uint8)
            ring_codes[0] = MplPath.MOVETO
            ring_codes[-1] = MplPath.CLOSEPOLY
            vertices.append(xy)
            codes.append(ring_codes)
    if not vertices:
        return None
    return MplPath(np.concatenate(vertices), np.concatenate(codes))


def render_static_map(
    state: DayNightState,
    labels: tuple[CityLabel, ...] = (),
    chart_width: float = 12,
) -> Figure:
    """Render a DayNightState as an equirectangular world map.

    Shading layers are painted from night to day, then the terminator line,
    the subsolar point, and any city labels on top.

    Args:
        state: Fully computed solar geometry.
        labels: World-city time labels to annotate.
        chart_width: Output image width in inches (height is half).

    Returns:
        matplotlib Figure object.
    """
    fig, ax = plt.subplots(figsize=(chart_width, chart_width / 2))
    fig.patch.set_facecolor(LAYER_COLORS[NIGHT])
    ax.set_facecolor(LAYER_COLORS[NIGHT])

    for layer in shading_layers(state):
        path = _rings_to_path(layer.rings)
        if path is None:
            continue
        ax.add_patch(
            PathPatch(path, facecolor=LAYER_COLORS[layer.name], edgecolor="none", zorder=1)
        )

    terminator = unroll_curve(close_curve(state.zones.terminator, state.step))
    for copy in shifted_copies(terminator):
        lats = np.array([lat for lat, _ in copy])
        lons = np.array([lon for _, lon in copy])
        ax.plot(
            lons, lats, color=TERMINATOR_COLOR, linewidth=1.0, linestyle="--", alpha=0.8, zorder=2
        )

    for label in labels:
        ax.scatter(
            [label.city.lon], [label.city.lat], s=8, color=LABEL_COLOR, linewidths=0, zorder=3
        )
        ax.annotate(
            f"{label.time}\n{label.city.name}",
            (label.city.lon, label.city.lat),
            xytext=(0, 6),
            textcoords="offset points",
            ha="center",
            fontsize=7,
            color=LABEL_COLOR,
            zorder=3,
        )

    sun = state.subsolar
    ax.scatter(
        [sun.longitude],
        [sun.latitude],
        s=90,
        color=SUN_COLOR,
        edgecolors=SUN_EDGE_COLOR,
        linewidths=1.0,
        zorder=4,
    )

    ax.set_xlim(-180, 180)
    ax.set_ylim(-90, 90)
    ax.set_aspect("equal")
    ax.axis("off")
    fig.subplots_adjust(left=0, right=1, top=1, bottom=0)

    return fig


def save_static_map(
    state: DayNightState,
    labels: tuple[CityLabel, ...] = (),
    output_path: Path | None = None,
) -> Path:
    """Save a DayNightState as a PNG file.

    Args:
        state: Fully computed solar geometry.
        labels: World-city time labels to annotate.
        output_path: Destination path. Auto-generated under results/ if None.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        when_str = state.instant.strftime("%Y_%m_%d_%H_%M")
        output_path = _ROOT / "results" / f"geochron__{when_str}.png"

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_map(state, labels)
    fig.savefig(output_path, facecolor=LAYER_COLORS[NIGHT])
    plt.close(fig)
    return output_path
