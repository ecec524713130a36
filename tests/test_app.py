"""Tests for the application wiring: persistence on every mutation and map visibility."""

import json

import pytest

from geochron.app import GeochronApp
from geochron.errors import InvalidTimezone
from geochron.models import ClockConfig
from geochron.scheduler import Activity, ActivityState


@pytest.fixture
def make_app(settings, timer, tzdb):
    def make(**sinks):
        return GeochronApp(settings, timer, tzdb=tzdb, **sinks)

    return make


def saved(settings):
    return json.loads(settings.state_path.read_text(encoding="utf-8"))


def test_first_run_starts_with_local_clock(make_app, settings):
    app = make_app()
    assert app.registry.clocks == (ClockConfig(1, "Asia/Tokyo"),)
    assert saved(settings) == {"nextId": 2, "clocks": [{"id": 1, "timezone": "Asia/Tokyo"}]}


def test_mutations_are_persisted(make_app, settings):
    app = make_app()
    paris = app.add_clock("Europe/Paris")
    app.add_clock("UTC")
    app.set_timezone(paris.id, "Europe/Madrid")
    app.remove_clock(1)

    reopened = make_app()
    assert reopened.registry.clocks == (ClockConfig(2, "Europe/Madrid"), ClockConfig(3, "UTC"))
    assert reopened.registry.next_id == 4


def test_add_clock_defaults_to_local_zone(make_app):
    app = make_app()
    assert app.add_clock().timezone == "Asia/Tokyo"


def test_invalid_timezone_not_saved(make_app, settings):
    app = make_app()
    with pytest.raises(InvalidTimezone):
        app.add_clock("Nowhere/Land")
    assert saved(settings)["nextId"] == 2


def test_corrupt_state_file_is_replaced(make_app, settings, log_messages):
    settings.state_path.parent.mkdir(parents=True)
    settings.state_path.write_text("{oops", encoding="utf-8")
    app = make_app()
    assert app.registry.clocks == (ClockConfig(1, "Asia/Tokyo"),)
    assert saved(settings)["clocks"] == [{"id": 1, "timezone": "Asia/Tokyo"}]
    assert any("unreadable" in m for m in log_messages)


def test_state_path_that_is_a_directory_falls_back(make_app, settings, log_messages):
    settings.state_path.mkdir(parents=True)
    app = make_app()
    assert app.registry.clocks == (ClockConfig(1, "Asia/Tokyo"),)
    assert any("unreadable" in m for m in log_messages)
    assert any("Could not save clocks" in m for m in log_messages)
    assert settings.state_path.is_dir()


def test_hide_and_show_map(make_app, timer):
    maps, labels, readings = [], [], []
    app = make_app(
        on_day_night=maps.append,
        on_city_labels=labels.append,
        on_clock_readings=lambda instant, r: readings.append(r),
    )
    app.start()
    timer.advance(0.5)
    assert (len(readings), len(maps), len(labels)) == (2, 2, 1)

    app.hide_map()
    assert not app.map_visible
    assert app.scheduler.state(Activity.SLOW) is ActivityState.STOPPED
    timer.advance(60.0)
    assert len(readings) == 242
    assert (len(maps), len(labels)) == (2, 1)

    app.show_map()
    assert len(labels) == 2
    timer.advance(0.25)
    assert len(maps) == 3

    app.stop()
    assert timer.pending == 0


def test_start_with_hidden_map_only_runs_clocks(make_app, timer):
    app = make_app()
    app.scheduler.map_visible = False
    app.start()
    assert app.scheduler.state(Activity.CONTINUOUS) is ActivityState.RUNNING
    assert app.scheduler.state(Activity.SLOW) is ActivityState.STOPPED
