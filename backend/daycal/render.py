from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Any

from .layout import compute_layout, compute_time_range, validate_events
from .models import DayView, HourMark, LayoutResult, PositionedEvent
from .utils import event_time_label, hour_label, title_color_hsl

DAY_CSS = """
<style>
  .cal-day { position:relative; margin-left:70px; border-left:2px solid #e2e8f0; }
  .cal-hour { position:absolute; left:-70px; right:0; border-top:1px dashed #e2e8f0; box-sizing:border-box; }
  .cal-hour-label { display:inline-block; width:60px; text-align:right; font-size:0.72rem; color:#94a3b8; transform:translateY(-50%); padding-right:4px; }
  .cal-events { position:absolute; inset:0; }
  .cal-event {
    position:absolute; box-sizing:border-box; padding:4px 8px;
    background:#fff; border:1px solid #d1d5db; border-left:4px solid var(--event-color, #4b6ec2);
    overflow:hidden; font-size:0.8rem;
  }
  .cal-event-label { display:flex; flex-direction:column; }
  .cal-event-title { font-weight:700; color:var(--event-color, #4b6ec2); }
  .cal-event-location { color:#334155; font-size:0.72rem; }
  .cal-event-time { color:#64748b; font-size:0.7rem; }
</style>
"""


@dataclass(frozen=True)
class RenderConfig:
    origin_hour: int = 9
    hours_in_day: int = 12
    pixels_per_hour: float = 60.0
    min_event_height_px: float = 0.0
    compact: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.origin_hour <= 23:
            raise ValueError(f"origin_hour must be within 0..23, got {self.origin_hour}")
        if not 1 <= self.hours_in_day <= 24:
            raise ValueError(f"hours_in_day must be within 1..24, got {self.hours_in_day}")
        if self.pixels_per_hour <= 0:
            raise ValueError(f"pixels_per_hour must be positive, got {self.pixels_per_hour}")
        if self.min_event_height_px < 0:
            raise ValueError("min_event_height_px cannot be negative")


def minutes_to_pixels(minutes: float, config: RenderConfig) -> float:
    return minutes * config.pixels_per_hour / 60


def horizontal_geometry(result: LayoutResult) -> tuple[float, float]:
    """``(left_pct, width_pct)`` for an event's column within its cluster."""
    width_pct = 100 / result.column_count
    return result.column * width_pct, width_pct


def hour_marks(config: RenderConfig, range_start_min: int = 0, range_end_min: int | None = None) -> list[HourMark]:
    if range_end_min is None:
        range_end_min = config.hours_in_day * 60

    marks: list[HourMark] = []
    for offset in range(range_start_min // 60, range_end_min // 60 + 1):
        marks.append(
            HourMark(
                hour=(config.origin_hour + offset) % 24,
                label=hour_label(config.origin_hour + offset),
                top_px=minutes_to_pixels(offset * 60 - range_start_min, config),
            )
        )
    return marks


def build_day_view(events: Any, config: RenderConfig | None = None) -> DayView:
    config = config or RenderConfig()
    validated = validate_events(events)
    range_start_min, range_end_min = compute_time_range(validated, config.hours_in_day, compact=config.compact)

    positioned: list[PositionedEvent] = []
    for result in compute_layout(validated):
        event = validated[result.index]
        left_pct, width_pct = horizontal_geometry(result)
        positioned.append(
            PositionedEvent(
                index=result.index,
                starts_at=event.starts_at,
                duration=event.duration,
                title=event.title,
                location=event.location,
                column=result.column,
                column_count=result.column_count,
                top_px=minutes_to_pixels(event.starts_at - range_start_min, config),
                height_px=max(config.min_event_height_px, minutes_to_pixels(event.duration, config)),
                left_pct=left_pct,
                width_pct=width_pct,
                time_label=event_time_label(event, config.origin_hour),
                color_hsl=title_color_hsl(event.title),
            )
        )

    return DayView(
        origin_hour=config.origin_hour,
        hours_in_day=config.hours_in_day,
        pixels_per_hour=config.pixels_per_hour,
        range_start_min=range_start_min,
        range_end_min=range_end_min,
        height_px=minutes_to_pixels(range_end_min - range_start_min, config),
        hours=hour_marks(config, range_start_min, range_end_min),
        events=positioned,
    )


def _event_html(event: PositionedEvent) -> str:
    title_el = f"<span class='cal-event-title'>{escape(event.title)}</span>" if event.title else ""
    location_el = f"<span class='cal-event-location'>{escape(event.location)}</span>" if event.location else ""
    label_el = f"<div class='cal-event-label'>{title_el}{location_el}</div>" if title_el or location_el else ""

    return (
        f"<div class='cal-event' style='top:{event.top_px:.2f}px;height:{event.height_px:.2f}px;"
        f"left:{event.left_pct:.4f}%;width:{event.width_pct:.4f}%;--event-color:{event.color_hsl};'>"
        f"{label_el}"
        f"<span class='cal-event-time'>{escape(event.time_label)}</span>"
        f"</div>"
    )


def render_day_html(view: DayView, include_styles: bool = False) -> str:
    hours_html = "".join(
        f"<div class='cal-hour' style='top:{mark.top_px:.2f}px;height:{view.pixels_per_hour:.2f}px;'>"
        f"<span class='cal-hour-label'>{mark.label}</span></div>"
        for mark in view.hours
    )
    events_html = "".join(_event_html(event) for event in view.events)

    markup = (
        f"<div class='cal-day' style='height:{view.height_px:.2f}px'>"
        f"{hours_html}"
        f"<div class='cal-events'>{events_html}</div>"
        f"</div>"
    )
    return DAY_CSS + markup if include_styles else markup
