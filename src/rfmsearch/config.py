"""Application configuration helpers."""

import logging
import math
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_KM = 25.0
_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class Settings:
    experts_db: Path
    postal_db: Path
    default_radius_km: float = DEFAULT_RADIUS_KM
    log_level: str = "WARNING"


def _parse_radius(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value) or value < 0:
        logger.warning(
            "RFM_DEFAULT_RADIUS_KM=%r is not a valid radius; using %s km",
            raw, DEFAULT_RADIUS_KM,
        )
        return DEFAULT_RADIUS_KM
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables (and a .env file, if present)."""
    cwd = Path.cwd()
    load_dotenv(cwd / ".env")

    experts_db = Path(os.getenv("RFM_EXPERTS_DB", str(cwd / "experts.db")))
    postal_db = Path(os.getenv("RFM_POSTAL_DB", str(cwd / "postal_codes.db")))
    default_radius_km = _parse_radius(os.getenv("RFM_DEFAULT_RADIUS_KM", str(DEFAULT_RADIUS_KM)))
    log_level = os.getenv("RFM_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"

    if log_level not in _LEVELS:
        logger.warning("RFM_LOG_LEVEL=%r is not a logging level; using WARNING", log_level)
        log_level = "WARNING"

    return Settings(
        experts_db=experts_db,
        postal_db=postal_db,
        default_radius_km=default_radius_km,
        log_level=log_level,
    )
