"""World-city time labels shown on the map, refreshed by the slow tick."""

from datetime import datetime

from geochron.clock import ClockTimeEngine
from geochron.models import CityLabel, WorldCity

WORLD_CITIES: tuple[WorldCity, ...] = (
    WorldCity("London", 51.5074, -0.1278, "Europe/London"),
    WorldCity("New York", 40.7128, -74.0060, "America/New_York"),
    WorldCity("Los Angeles", 34.0522, -118.2437, "America/Los_Angeles"),
    WorldCity("Tokyo", 35.6762, 139.6503, "Asia/Tokyo"),
    WorldCity("Sydney", -33.8688, 151.2093, "Australia/Sydney"),
    WorldCity("Dubai", 25.2048, 55.2708, "Asia/Dubai"),
    WorldCity("Paris", 48.8566, 2.3522, "Europe/Paris"),
    WorldCity("Moscow", 55.7558, 37.6173, "Europe/Moscow"),
    WorldCity("Beijing", 39.9042, 116.4074, "Asia/Shanghai"),
    WorldCity("Rio", -22.9068, -43.1729, "America/Sao_Paulo"),
    WorldCity("Delhi", 28.6139, 77.2090, "Asia/Kolkata"),
    WorldCity("Cairo", 30.0444, 31.2357, "Africa/Cairo"),
)


def compute_city_labels(
    instant: datetime,
    engine: ClockTimeEngine,
    cities: tuple[WorldCity, ...] = WORLD_CITIES,
) -> tuple[CityLabel, ...]:
    """Zone-local ``HH:MM`` for every city at ``instant``.

    Raises:
        InvalidTimezone: If a city names a zone the engine's database lacks.
    """
    return tuple(
        CityLabel(
            city=city,
            time=engine.formatter.format_short_time(
                engine.compute_local_fields(instant, city.timezone)
            ),
        )
        for city in cities
    )
