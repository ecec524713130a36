"""SVG day/night world map renderer.

Produces a self-contained SVG string. Uses viewBox="-180 -90 360 180" so
SVG user units are degrees and the browser handles all scaling.

Coordinate system:
  x = longitude ∈ [-180, 180]  (east positive)
  y = -latitude ∈ [-90, 90]    (SVG y-axis is top-down, so north is negative)
"""

from __future__ import annotations

import html

from geochron.models import CityLabel, DayNightState
from geochron.renderers.palette import (
    LABEL_COLOR,
    LAYER_COLORS,
    SUN_COLOR,
    SUN_EDGE_COLOR,
    TERMINATOR_COLOR,
)
from geochron.shading import Ring, shading_layers, shifted_copies
from geochron.solar import close_curve, unroll_curve


def _ring_path(ring: Ring) -> str:
    """SVG path data for one closed ring."""
    head, *rest = ring
    parts = [f"M{head[1]:.3f} {-head[0]:.3f}"]
    parts.extend(f"L{lon:.3f} {-lat:.3f}" for lat, lon in rest)
    parts.append("Z")
    return " ".join(parts)


def _polyline_points(points: Ring) -> str:
    return " ".join(f"{lon:.3f},{-lat:.3f}" for lat, lon in points)


def render_svg(
    state: DayNightState,
    labels: tuple[CityLabel, ...] = (),
    width: int = 1440,
) -> str:
    """Return an SVG document of the shaded world map.

    Layers are painted night to day with the nonzero fill rule (holes in
    the shading rings run opposite to their outer ring). The terminator is
    drawn dashed and the subsolar point as a filled circle.

    Args:
        state: Fully computed solar geometry.
        labels: World-city time labels to annotate.
        width: Pixel width attribute; height is half of it.

    Returns:
        SVG markup as a string.
    """
    layer_parts: list[str] = []
    for layer in shading_layers(state):
        if not layer.rings:
            continue
        d = " ".join(
            _ring_path(copy) for ring in layer.rings for copy in shifted_copies(ring)
        )
        layer_parts.append(
            f'<path class="{layer.name}" d="{d}" fill="{LAYER_COLORS[layer.name]}"'
            ' fill-rule="nonzero" stroke="none"/>'
        )

    terminator = unroll_curve(close_curve(state.zones.terminator, state.step))
    line_parts = [
        f'<polyline points="{_polyline_points(copy)}" fill="none"'
        f' stroke="{TERMINATOR_COLOR}" stroke-width="0.4" stroke-dasharray="2 1.2"'
        ' stroke-opacity="0.8"/>'
        for copy in shifted_copies(terminator)
    ]

    label_parts: list[str] = []
    for label in labels:
        x, y = label.city.lon, -label.city.lat
        name = html.escape(label.city.name)
        label_parts.append(
            f'<g class="city"><circle cx="{x:.3f}" cy="{y:.3f}" r="0.6" fill="{LABEL_COLOR}"/>'
            f'<text x="{x:.3f}" y="{y - 4:.3f}" font-size="3" text-anchor="middle"'
            f' fill="{LABEL_COLOR}">{html.escape(label.time)}</text>'
            f'<text x="{x:.3f}" y="{y - 1.2:.3f}" font-size="2.2" text-anchor="middle"'
            f' fill="{LABEL_COLOR}">{name}</text></g>'
        )

    sun = state.subsolar
    sun_part = (
        f'<circle class="sun" cx="{sun.longitude:.3f}" cy="{-sun.latitude:.3f}" r="2"'
        f' fill="{SUN_COLOR}" stroke="{SUN_EDGE_COLOR}" stroke-width="0.4"/>'
    )

    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="-180 -90 360 180"'
        f' width="{width}" height="{width // 2}">'
        '<defs><clipPath id="world"><rect x="-180" y="-90" width="360" height="180"/>'
        "</clipPath></defs>"
        '<g clip-path="url(#world)">'
        + "".join(layer_parts)
        + "".join(line_parts)
        + "</g>"
        + "".join(label_parts)
        + sun_part
        + "</svg>"
    )
