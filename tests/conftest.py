"""Shared test fixtures for the geochron test suite.

FixedZoneDatabase pins the host timezone so registry fallbacks are
deterministic; VirtualTimer drives the scheduler without wall-clock waits.
"""

from datetime import datetime, timezone

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402
from loguru import logger  # noqa: E402

from geochron.clock import ClockTimeEngine, PytzTimezoneDatabase  # noqa: E402
from geochron.config import Settings  # noqa: E402
from geochron.registry import ClockRegistry  # noqa: E402
from geochron.timers import VirtualTimer  # noqa: E402

SOLSTICE_NOON = datetime(2024, 6, 21, 12, 0, 0, tzinfo=timezone.utc)


class FixedZoneDatabase(PytzTimezoneDatabase):
    """pytz-backed database with a pinned host zone."""

    def __init__(self, local: str = "Asia/Tokyo") -> None:
        self.local = local

    def local_zone_name(self) -> str:
        return self.local


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def tzdb() -> FixedZoneDatabase:
    return FixedZoneDatabase()


@pytest.fixture
def engine(tzdb) -> ClockTimeEngine:
    return ClockTimeEngine(tzdb)


@pytest.fixture
def registry(tzdb) -> ClockRegistry:
    return ClockRegistry(tzdb)


@pytest.fixture
def timer() -> VirtualTimer:
    return VirtualTimer(SOLSTICE_NOON)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        state_path=tmp_path / "state" / "clocks.json",
        lang="en",
        curve_step=5.0,
        fps=4.0,
        label_interval=30.0,
        output_dir=tmp_path / "results",
        log_level="DEBUG",
    )


@pytest.fixture
def log_messages():
    """Collect loguru records emitted during the test."""
    messages: list[str] = []
    sink_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(sink_id)
