"""Colours shared by the map renderers."""

from geochron.shading import (
    ASTRONOMICAL,
    ASTRONOMICAL_NAUTICAL,
    CIVIL,
    CIVIL_DAY,
    DAY,
    NAUTICAL,
    NAUTICAL_CIVIL,
    NIGHT,
)

LAYER_COLORS: dict[str, str] = {
    NIGHT: "#05070f",
    ASTRONOMICAL: "#0f172a",
    ASTRONOMICAL_NAUTICAL: "#1e3a8a",
    NAUTICAL: "#1e40af",
    NAUTICAL_CIVIL: "#2f63d6",
    CIVIL: "#3b82f6",
    CIVIL_DAY: "#93c5fd",
    DAY: "#e0ecff",
}
TERMINATOR_COLOR = "#ffffff"
SUN_COLOR = "#fde047"
SUN_EDGE_COLOR = "#f59e0b"
LABEL_COLOR = "#f8fafc"
