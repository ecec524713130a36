"""Script entry point for day/night map generation.

Edit the WHEN variable at the top, then run:
    uv run python src/geochron/worldmap.py
"""

from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from geochron.cities import compute_city_labels
from geochron.clock import ClockTimeEngine
from geochron.renderers.static import save_static_map
from geochron.solar import compute_day_night, to_utc

WHEN = "2024-06-21 12:00"  # UTC


def main(when: str = WHEN, output_path: Path | None = None) -> Path:
    instant = to_utc(datetime.strptime(when, "%Y-%m-%d %H:%M"))
    state = compute_day_night(instant)
    return save_static_map(state, compute_city_labels(instant, ClockTimeEngine()), output_path)


if __name__ == "__main__":
    load_dotenv()
    print(f"Saved: {main()}")
