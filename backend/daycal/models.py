from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class CalendarEvent(BaseModel):
    """A timed event, ``starts_at`` and ``duration`` in minutes from the calendar origin."""

    model_config = ConfigDict(frozen=True)

    starts_at: float = Field(
        strict=True,
        ge=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("starts_at", "startsAt"),
    )
    duration: float = Field(strict=True, gt=0, allow_inf_nan=False)
    title: str | None = None
    location: str | None = None

    @property
    def end_at(self) -> float:
        return self.starts_at + self.duration


class LayoutResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    column: int = Field(ge=0)
    column_count: int = Field(ge=1)

    @model_validator(mode="after")
    def _column_within_count(self) -> LayoutResult:
        if self.column >= self.column_count:
            raise ValueError(f"column {self.column} outside of {self.column_count} columns")
        return self


class PositionedEvent(BaseModel):
    index: int
    starts_at: float
    duration: float
    title: str | None = None
    location: str | None = None
    column: int
    column_count: int
    top_px: float
    height_px: float
    left_pct: float
    width_pct: float
    time_label: str
    color_hsl: str


class HourMark(BaseModel):
    hour: int
    label: str
    top_px: float


class DayView(BaseModel):
    origin_hour: int
    hours_in_day: int
    pixels_per_hour: float
    range_start_min: int
    range_end_min: int
    height_px: float
    hours: list[HourMark] = Field(default_factory=list)
    events: list[PositionedEvent] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    source: str
    last_reload_at: datetime | None = None
    cache_ttl_seconds: int
    events: int


class ErrorResponse(BaseModel):
    detail: str
    request_id: str | None = None
