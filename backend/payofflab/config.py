from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_DISPLAY_RANGE = 0.15
DEFAULT_ZOOM_PRESETS: tuple[float, ...] = (0.05, 0.10, 0.15, 0.25, 0.50)

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _parse_presets(raw: str | None) -> tuple[float, ...]:
    if not raw:
        return DEFAULT_ZOOM_PRESETS
    values = tuple(float(x) for x in raw.split(",") if x.strip())
    if not values or any(v <= 0 for v in values):
        raise ValueError("PAYOFFLAB_ZOOM_PRESETS must be positive fractions, e.g. 0.05,0.15")
    return values


@dataclass(frozen=True)
class Settings:
    log_level: str = DEFAULT_LOG_LEVEL
    display_range: float = DEFAULT_DISPLAY_RANGE
    zoom_presets: tuple[float, ...] = DEFAULT_ZOOM_PRESETS

    @classmethod
    def from_env(cls) -> "Settings":
        display_range = float(os.getenv("PAYOFFLAB_DISPLAY_RANGE", DEFAULT_DISPLAY_RANGE))
        if display_range <= 0:
            raise ValueError("PAYOFFLAB_DISPLAY_RANGE must be > 0")
        return cls(
            log_level=os.getenv("PAYOFFLAB_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            display_range=display_range,
            zoom_presets=_parse_presets(os.getenv("PAYOFFLAB_ZOOM_PRESETS")),
        )


def setup_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Send `payofflab` logs to stderr. Safe to call more than once."""
    logger = logging.getLogger("payofflab")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
