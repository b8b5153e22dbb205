from __future__ import annotations

import hashlib
import math
from typing import Any

import pandas as pd

from .models import CalendarEvent


def normalize_text(value: Any) -> str:
    if value is None or pd.isna(value):
        return ""
    return str(value).strip()


def optional_text(value: Any) -> str | None:
    return normalize_text(value) or None


def _twelve_hour(hour24: int) -> tuple[int, str]:
    suffix = "AM" if hour24 < 12 else "PM"
    return hour24 % 12 or 12, suffix


def hour_label(hour: int) -> str:
    """``9 -> "9 AM"``, ``12 -> "12 PM"``, ``0 -> "12 AM"``; hours wrap past midnight."""
    hour12, suffix = _twelve_hour(hour % 24)
    return f"{hour12} {suffix}"


def clock_label(minutes_from_origin: float, origin_hour: int) -> str:
    total = int(math.floor(origin_hour * 60 + minutes_from_origin + 0.5))
    hour12, suffix = _twelve_hour((total // 60) % 24)
    minutes = total % 60
    if minutes:
        return f"{hour12}:{minutes:02d} {suffix}"
    return f"{hour12} {suffix}"


def event_time_label(event: CalendarEvent, origin_hour: int) -> str:
    start = clock_label(event.starts_at, origin_hour)
    end = clock_label(event.end_at, origin_hour)
    return f"{start} - {end}"


def hue_for_title(title: str | None) -> int:
    normalized = (title or "").strip()
    if not normalized:
        return 210
    return int(hashlib.md5(normalized.encode("utf-8")).hexdigest(), 16) % 360


def title_color_hsl(title: str | None) -> str:
    hue = hue_for_title(title)
    return f"hsl({hue} 74% 44%)"
