"""Runtime settings read from the environment (and a .env file at entry points)."""

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from geochron.i18n import LANGUAGES


@dataclass(frozen=True)
class Settings:
    """Resolved configuration. Built once by load_settings()."""

    state_path: Path  # Registry snapshot JSON file
    lang: str  # Formatter language ("en" or "ko")
    curve_step: float  # Boundary curve bearing step (degrees)
    fps: float  # Continuous tick rate
    label_interval: float  # Slow tick period (seconds)
    output_dir: Path  # Default directory for saved maps
    log_level: str

    @property
    def frame_interval(self) -> float:
        return 1 / self.fps


def _positive_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        env: Variable mapping. Defaults to ``os.environ``.

    Returns:
        Settings with defaults filled in for unset variables.

    Raises:
        ValueError: If a numeric variable is not a positive number.
    """
    env = os.environ if env is None else env
    lang = env.get("GEOCHRON_LANG", "en").lower()
    if lang not in LANGUAGES:
        logger.warning("[config] Unsupported GEOCHRON_LANG {!r}, using en", lang)
        lang = "en"
    state_path = env.get("GEOCHRON_STATE_FILE") or str(Path.home() / ".geochron" / "clocks.json")
    return Settings(
        state_path=Path(state_path).expanduser(),
        lang=lang,
        curve_step=_positive_float(env, "GEOCHRON_CURVE_STEP", 5.0),
        fps=_positive_float(env, "GEOCHRON_FPS", 60.0),
        label_interval=_positive_float(env, "GEOCHRON_LABEL_INTERVAL", 30.0),
        output_dir=Path(env.get("GEOCHRON_OUTPUT_DIR") or "results"),
        log_level=env.get("GEOCHRON_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a single stderr sink at ``level``."""
    logger.remove()
    logger.add(sys.stderr, level=level)
