from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os


@dataclass(frozen=True)
class Settings:
    events_file: Path
    cache_ttl_seconds: int
    origin_hour: int
    hours_in_day: int
    pixels_per_hour: float
    allowed_origins: list[str]
    log_level: str


def _parse_origins(raw: str) -> list[str]:
    origins = [item.strip() for item in raw.split(",") if item.strip()]
    return origins or ["http://localhost:5173"]


def _int_env(name: str, default: int, lower: int, upper: int) -> int:
    try:
        value = int(os.getenv(name, str(default)))
    except ValueError:
        return default
    return min(max(value, lower), upper)


def _float_env(name: str, default: float) -> float:
    try:
        value = float(os.getenv(name, str(default)))
    except ValueError:
        return default
    return value if value > 0 else default


@lru_cache
def get_settings() -> Settings:
    default_events_file = Path(__file__).resolve().parents[2] / "data" / "sample_events.json"
    events_file = Path(os.getenv("DAYCAL_EVENTS_FILE", str(default_events_file))).resolve()

    return Settings(
        events_file=events_file,
        cache_ttl_seconds=_int_env("CACHE_TTL_SECONDS", 60, 1, 24 * 3600),
        origin_hour=_int_env("DAYCAL_ORIGIN_HOUR", 9, 0, 23),
        hours_in_day=_int_env("DAYCAL_HOURS_IN_DAY", 12, 1, 24),
        pixels_per_hour=_float_env("DAYCAL_PIXELS_PER_HOUR", 60.0),
        allowed_origins=_parse_origins(os.getenv("ALLOWED_ORIGINS", "http://localhost:5173")),
        log_level=os.getenv("DAYCAL_LOG_LEVEL", "INFO").upper(),
    )
