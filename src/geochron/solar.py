"""Solar geometry layer — subsolar point, twilight boundary curves, and day-side classification.

The solar model is a deliberately lightweight single-harmonic approximation
(declination and equation of time accurate to roughly a degree), suited to a
day/night map rather than an ephemeris.
"""

import math
from datetime import datetime, timezone

from loguru import logger

from geochron.models import (
    BoundaryCurve,
    DaylightSide,
    DayNightState,
    LatLon,
    SubsolarPoint,
    TwilightZones,
)

MAX_DECLINATION = 23.45  # Degrees
DEFAULT_STEP = 5.0  # Bearing step between curve points (degrees)

TERMINATOR = 0.0  # Solar depression angles (degrees below the horizon)
CIVIL_TWILIGHT = 6.0
NAUTICAL_TWILIGHT = 12.0
ASTRONOMICAL_TWILIGHT = 18.0

TRANSITION_FRACTION = 0.3  # Blend position of the in-between curves


def to_utc(instant: datetime) -> datetime:
    """Return ``instant`` as an aware UTC datetime. Naive datetimes are taken as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def normalize_longitude(lon: float) -> float:
    """Wrap a longitude into (-180, 180]. Values already in range are returned as-is."""
    if lon > 180 or lon <= -180:
        lon = (lon + 180) % 360 - 180
        if lon == -180:
            lon = 180.0
    return lon


def compute_subsolar_point(instant: datetime) -> SubsolarPoint:
    """Compute the point where the sun is directly overhead.

    Args:
        instant: Absolute time. Naive values are interpreted as UTC.

    Returns:
        SubsolarPoint with latitude = solar declination and longitude
        corrected by the equation of time.
    """
    utc = to_utc(instant)
    day_of_year = utc.timetuple().tm_yday
    b = 2 * math.pi / 365 * (day_of_year - 81)

    declination = MAX_DECLINATION * math.sin(b)
    eot = 9.87 * math.sin(2 * b) - 7.53 * math.cos(b) - 1.5 * math.sin(b)  # Minutes

    hours = utc.hour + utc.minute / 60 + utc.second / 3600
    longitude = 15 * (12 - hours) - eot / 4

    return SubsolarPoint(latitude=declination, longitude=normalize_longitude(longitude))


def compute_boundary_curve(
    subsolar: SubsolarPoint,
    depression_degrees: float,
    step: float = DEFAULT_STEP,
) -> BoundaryCurve:
    """Trace the circle where the sun sits ``depression_degrees`` below the horizon.

    The circle has angular radius ``90 + depression_degrees`` around the
    subsolar point and is walked by bearing from 0° in ``step`` increments,
    giving ``ceil(360 / step) + 1`` points. First and last points coincide
    only when ``step`` divides 360.

    Depression angles outside [0, 90] yield degenerate curves; callers must
    not pass them.

    Args:
        subsolar: Centre of the illuminated hemisphere.
        depression_degrees: 0 for the terminator, 6/12/18 for the twilight limits.
        step: Bearing increment in degrees. Must be positive.

    Returns:
        Ordered (lat, lon) points, longitudes in (-180, 180].
    """
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")

    sun_lat = math.radians(subsolar.latitude)
    sun_lon = math.radians(subsolar.longitude)
    radius = math.radians(90 + depression_degrees)

    sin_sun_lat = math.sin(sun_lat)
    cos_sun_lat = math.cos(sun_lat)
    sin_r = math.sin(radius)
    cos_r = math.cos(radius)

    points: list[LatLon] = []
    for i in range(math.ceil(360 / step) + 1):
        bearing = math.radians(i * step)
        sin_lat = sin_sun_lat * cos_r + cos_sun_lat * sin_r * math.cos(bearing)
        lat = math.asin(max(-1.0, min(1.0, sin_lat)))
        lon = sun_lon + math.atan2(
            math.sin(bearing) * sin_r * cos_sun_lat,
            cos_r - sin_sun_lat * math.sin(lat),
        )
        points.append((math.degrees(lat), normalize_longitude(math.degrees(lon))))

    return tuple(points)


def compute_twilight_zones(
    subsolar: SubsolarPoint, step: float = DEFAULT_STEP
) -> TwilightZones:
    """Compute the terminator and the three twilight limits."""
    return TwilightZones(
        terminator=compute_boundary_curve(subsolar, TERMINATOR, step),
        civil=compute_boundary_curve(subsolar, CIVIL_TWILIGHT, step),
        nautical=compute_boundary_curve(subsolar, NAUTICAL_TWILIGHT, step),
        astronomical=compute_boundary_curve(subsolar, ASTRONOMICAL_TWILIGHT, step),
    )


def unroll_curve(curve: BoundaryCurve) -> list[LatLon]:
    """Remove antimeridian jumps so consecutive longitudes differ by at most 180°.

    The first point keeps its longitude; later points may leave (-180, 180].
    """
    if not curve:
        return []
    unrolled = [curve[0]]
    offset = 0.0
    prev_lon = curve[0][1]
    for lat, lon in curve[1:]:
        delta = lon - prev_lon
        if delta > 180:
            offset -= 360
        elif delta < -180:
            offset += 360
        prev_lon = lon
        unrolled.append((lat, lon + offset))
    return unrolled


def curve_wraps(unrolled: list[LatLon]) -> bool:
    """True when an unrolled curve runs once around the globe instead of closing on itself."""
    return len(unrolled) > 1 and abs(unrolled[-1][1] - unrolled[0][1]) > 180


def close_curve(curve: BoundaryCurve, step: float = DEFAULT_STEP) -> BoundaryCurve:
    """Cut a curve traced at ``step`` back to bearing 360° and end it on its first point.

    When ``step`` does not divide 360 the last point lies past the start,
    on top of the first segment.
    """
    count = math.ceil(360 / step)
    if len(curve) <= count:
        return curve
    return curve[:count] + (curve[0],)


def curve_ring(curve: BoundaryCurve, step: float = DEFAULT_STEP) -> list[LatLon]:
    """Polygon ring traced by a boundary curve in unrolled longitude.

    A curve that closes on itself is its own ring. A curve that wraps the
    globe (one pole inside the circle) is closed through the north pole.
    ``step`` is the bearing step the curve was traced with.
    """
    unrolled = unroll_curve(close_curve(curve, step))
    if curve_wraps(unrolled):
        unrolled += [(90.0, unrolled[-1][1]), (90.0, unrolled[0][1])]
    return unrolled


def point_in_polygon(point: LatLon, ring: list[LatLon]) -> bool:
    """Even-odd ray casting test in the (lon, lat) plane.

    Args:
        point: (lat, lon) to test.
        ring: Polygon vertices as (lat, lon); closure is implied.

    Returns:
        True if the point lies inside the ring.
    """
    lat, lon = point
    inside = False
    j = len(ring) - 1
    for i in range(len(ring)):
        lat_i, lon_i = ring[i]
        lat_j, lon_j = ring[j]
        if (lat_i > lat) != (lat_j > lat):
            lon_cross = lon_i + (lat - lat_i) * (lon_j - lon_i) / (lat_j - lat_i)
            if lon < lon_cross:
                inside = not inside
        j = i
    return inside


def classify_daylight_side(
    subsolar: SubsolarPoint,
    curve: BoundaryCurve | None = None,
    step: float = DEFAULT_STEP,
) -> DaylightSide:
    """Decide which side of a boundary curve is lit.

    The subsolar point is always lit, so the side is found by testing it
    (and its copies one and two turns either way, to match the unrolled
    longitude range) against the ring from :func:`curve_ring`.

    Args:
        subsolar: Current subsolar point.
        curve: Boundary curve to classify against. Defaults to the terminator.
        step: Bearing step of ``curve``, also used when the terminator has
            to be computed.

    Returns:
        WEST if the sun lies inside the curve's ring, EAST otherwise.
    """
    if curve is None:
        curve = compute_boundary_curve(subsolar, TERMINATOR, step)
    ring = curve_ring(curve, step)
    inside = any(
        point_in_polygon((subsolar.latitude, subsolar.longitude + turns * 360), ring)
        for turns in (-2, -1, 0, 1, 2)
    )
    return DaylightSide.WEST if inside else DaylightSide.EAST


def classify_daylight_side_heuristic(subsolar: SubsolarPoint) -> DaylightSide:
    """Longitude-range shortcut: WEST when the sun is within 90° of Greenwich.

    Wrong near the dateline and for most of the year at high declination.
    Kept only as a reference for :func:`classify_daylight_side`.
    """
    if -90 < subsolar.longitude < 90:
        return DaylightSide.WEST
    return DaylightSide.EAST


def build_transition_curve(
    outer: BoundaryCurve, inner: BoundaryCurve, fraction: float
) -> BoundaryCurve:
    """Blend two boundary curves point by point.

    This is a cheap visual blend, not a geodesic interpolation. Curves of
    unequal length are truncated to the shorter one; nothing is padded or
    wrapped around. Longitudes move the short way across the antimeridian.

    Args:
        outer: Curve returned at ``fraction`` 0.
        inner: Curve returned at ``fraction`` 1.
        fraction: Blend position in [0, 1].

    Returns:
        ``min(len(outer), len(inner))`` interpolated points.
    """
    points: list[LatLon] = []
    for (outer_lat, outer_lon), (inner_lat, inner_lon) in zip(outer, inner):
        lat = outer_lat + (inner_lat - outer_lat) * fraction
        lon_delta = normalize_longitude(inner_lon - outer_lon)
        points.append((lat, normalize_longitude(outer_lon + lon_delta * fraction)))
    return tuple(points)


def compute_day_night(instant: datetime, step: float = DEFAULT_STEP) -> DayNightState:
    """Top-level entry point: one full solar geometry pass for ``instant``.

    Args:
        instant: Absolute time. Naive values are interpreted as UTC.
        step: Bearing step for every boundary curve.

    Returns:
        DayNightState with the subsolar point, four boundary curves, three
        transition curves, and the lit side of the terminator.
    """
    utc = to_utc(instant)
    subsolar = compute_subsolar_point(utc)
    zones = compute_twilight_zones(subsolar, step)
    side = classify_daylight_side(subsolar, zones.terminator, step)
    logger.trace(
        "[solar] {} subsolar=({:.2f}, {:.2f}) side={}",
        utc.isoformat(),
        subsolar.latitude,
        subsolar.longitude,
        side.value,
    )
    return DayNightState(
        instant=utc,
        subsolar=subsolar,
        zones=zones,
        astronomical_nautical=build_transition_curve(
            zones.astronomical, zones.nautical, TRANSITION_FRACTION
        ),
        nautical_civil=build_transition_curve(
            zones.nautical, zones.civil, TRANSITION_FRACTION
        ),
        civil_day=build_transition_curve(
            zones.civil, zones.terminator, TRANSITION_FRACTION
        ),
        daylight_side=side,
        step=step,
    )
