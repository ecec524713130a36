"""Shading polygons for map renderers, derived from boundary curves.

Rings are lists of (lat, lon) in unrolled longitude: they may extend past
±180°, and renderers draw :func:`shifted_copies` of each ring clipped to the
map. Outer rings run counter-clockwise and holes clockwise in the (lon, lat)
plane, and curves are cut back to one turn of bearing so no ring overlaps
itself. Nonzero and even-odd fill rules therefore give the same result.
"""

from dataclasses import dataclass

from geochron.models import BoundaryCurve, DaylightSide, DayNightState, LatLon, SubsolarPoint
from geochron.solar import (
    DEFAULT_STEP,
    classify_daylight_side,
    close_curve,
    curve_wraps,
    unroll_curve,
)

Ring = list[LatLon]

# Layer names, painted back to front
NIGHT = "night"
ASTRONOMICAL = "astronomical"
ASTRONOMICAL_NAUTICAL = "astronomical_nautical"
NAUTICAL = "nautical"
NAUTICAL_CIVIL = "nautical_civil"
CIVIL = "civil"
CIVIL_DAY = "civil_day"
DAY = "day"

_WORLD: Ring = [(-90.0, -180.0), (-90.0, 180.0), (90.0, 180.0), (90.0, -180.0)]


@dataclass(frozen=True)
class ShadingLayer:
    """Area on the lit side of one boundary curve."""

    name: str
    rings: tuple[Ring, ...]


def _signed_area(ring: Ring) -> float:
    """Shoelace area in the (lon, lat) plane; positive when counter-clockwise."""
    area = 0.0
    for i in range(len(ring)):
        lat0, lon0 = ring[i - 1]
        lat1, lon1 = ring[i]
        area += lon0 * lat1 - lon1 * lat0
    return area / 2


def _oriented(ring: Ring, counter_clockwise: bool) -> Ring:
    if (_signed_area(ring) > 0) != counter_clockwise:
        return ring[::-1]
    return ring


def lit_region(
    curve: BoundaryCurve, subsolar: SubsolarPoint, step: float = DEFAULT_STEP
) -> tuple[Ring, ...]:
    """Rings covering the side of ``curve`` that contains the subsolar point.

    A curve that wraps the globe is closed through the lit pole, the same way
    a terminator polyline is closed against the map edge. A curve that closes
    on itself is either the lit area (sun inside) or a hole in a 360°-wide
    window centred on it (sun outside).

    Args:
        curve: Any boundary or transition curve.
        subsolar: Subsolar point of the same instant.
        step: Bearing step the curve was traced with. Points past bearing
            360° are dropped so the ring never overlaps itself.

    Returns:
        One ring, or an outer ring followed by its hole. Empty for curves
        with fewer than three points.
    """
    unrolled = unroll_curve(close_curve(curve, step))
    if len(unrolled) < 3:
        return ()
    side = classify_daylight_side(subsolar, curve, step)

    if curve_wraps(unrolled):
        pole = 90.0 if side is DaylightSide.WEST else -90.0
        ring = unrolled + [(pole, unrolled[-1][1]), (pole, unrolled[0][1])]
        return (_oriented(ring, counter_clockwise=True),)

    if side is DaylightSide.WEST:
        return (_oriented(unrolled, counter_clockwise=True),)

    lons = [lon for _, lon in unrolled]
    centre = (min(lons) + max(lons)) / 2
    window = [
        (-90.0, centre - 180),
        (-90.0, centre + 180),
        (90.0, centre + 180),
        (90.0, centre - 180),
    ]
    return (window, _oriented(unrolled, counter_clockwise=False))


def shifted_copies(ring: Ring) -> tuple[Ring, ...]:
    """The ring one turn west, in place, and one turn east."""
    return tuple(
        [(lat, lon + turns * 360) for lat, lon in ring] for turns in (-1, 0, 1)
    )


def shading_layers(state: DayNightState) -> tuple[ShadingLayer, ...]:
    """Ordered layers from full night to full day.

    Each layer covers the lit side of its curve, so painting them in order
    leaves every band visible between its outer and inner curves.
    """
    zones = state.zones

    def region(curve: BoundaryCurve) -> tuple[Ring, ...]:
        return lit_region(curve, state.subsolar, state.step)

    return (
        ShadingLayer(NIGHT, (list(_WORLD),)),
        ShadingLayer(ASTRONOMICAL, region(zones.astronomical)),
        ShadingLayer(ASTRONOMICAL_NAUTICAL, region(state.astronomical_nautical)),
        ShadingLayer(NAUTICAL, region(zones.nautical)),
        ShadingLayer(NAUTICAL_CIVIL, region(state.nautical_civil)),
        ShadingLayer(CIVIL, region(zones.civil)),
        ShadingLayer(CIVIL_DAY, region(state.civil_day)),
        ShadingLayer(DAY, region(zones.terminator)),
    )
