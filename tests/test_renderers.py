"""Smoke tests for the map renderers."""

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from geochron.cities import compute_city_labels
from geochron.models import CityLabel, WorldCity
from geochron.renderers.static import render_static_map, save_static_map
from geochron.renderers.svg_2d import render_svg
from geochron.shading import shading_layers
from geochron.solar import compute_day_night
from geochron.worldmap import main as worldmap_main
from tests.conftest import SOLSTICE_NOON, utc


def test_svg_document(engine):
    state = compute_day_night(SOLSTICE_NOON)
    labels = compute_city_labels(SOLSTICE_NOON, engine)
    svg = render_svg(state, labels, width=720)

    assert svg.startswith("<svg")
    assert svg.endswith("</svg>")
    assert 'viewBox="-180 -90 360 180"' in svg
    assert 'width="720" height="360"' in svg
    for layer in shading_layers(state):
        assert f'class="{layer.name}"' in svg
    assert svg.count('class="city"') == len(labels)
    assert 'class="sun"' in svg


def test_svg_escapes_city_names():
    state = compute_day_night(SOLSTICE_NOON, step=30)
    label = CityLabel(WorldCity("<Nowhere & Co>", 0.0, 0.0, "UTC"), "12:00")
    svg = render_svg(state, (label,))
    assert "&lt;Nowhere &amp; Co&gt;" in svg
    assert "<Nowhere" not in svg


def test_static_figure():
    fig = render_static_map(compute_day_night(utc(2024, 12, 21, 6)))
    try:
        assert isinstance(fig, Figure)
        (ax,) = fig.axes
        assert ax.get_xlim() == (-180, 180)
        assert ax.get_ylim() == (-90, 90)
    finally:
        plt.close(fig)


def test_save_png(tmp_path, engine):
    state = compute_day_night(utc(2024, 3, 21, 0), step=10)
    labels = compute_city_labels(state.instant, engine)
    path = save_static_map(state, labels, tmp_path / "maps" / "map.png")
    assert path == tmp_path / "maps" / "map.png"
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_worldmap_script(tmp_path):
    path = worldmap_main("2024-09-22 18:00", tmp_path / "worldmap.png")
    assert path.exists()
