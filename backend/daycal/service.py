from __future__ import annotations

from datetime import datetime, timezone
import threading
from typing import Any

from .config import Settings
from .data_loader import load_events
from .layout import compute_layout, validate_events
from .log import get_logger
from .models import CalendarEvent, DayView, HealthResponse, LayoutResult
from .render import RenderConfig, build_day_view

logger = get_logger(__name__)


class CalendarService:
    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._lock = threading.Lock()

        self._events: list[CalendarEvent] | None = None
        self._last_reload_at: datetime | None = None
        self._fingerprint: str | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def render_config(self) -> RenderConfig:
        return RenderConfig(
            origin_hour=self._settings.origin_hour,
            hours_in_day=self._settings.hours_in_day,
            pixels_per_hour=self._settings.pixels_per_hour,
        )

    def _build_fingerprint(self) -> str:
        path = self._settings.events_file
        if not path.exists():
            return f"{path.name}:missing"
        stat = path.stat()
        return f"{path.name}:{stat.st_size}:{stat.st_mtime_ns}"

    def _cache_expired(self, now: datetime) -> bool:
        if self._last_reload_at is None:
            return True
        return (now - self._last_reload_at).total_seconds() >= self._settings.cache_ttl_seconds

    def _needs_reload(self, now: datetime) -> bool:
        if self._events is None:
            return True

        if self._cache_expired(now):
            return True

        return self._build_fingerprint() != self._fingerprint

    def _reload_locked(self) -> None:
        records = load_events(self._settings.events_file)
        self._events = validate_events(records)
        self._last_reload_at = datetime.now(timezone.utc)
        self._fingerprint = self._build_fingerprint()
        logger.info("Reloaded %d events from %s", len(self._events), self._settings.events_file)

    def _ensure_loaded(self) -> list[CalendarEvent]:
        now = datetime.now(timezone.utc)
        if not self._needs_reload(now):
            return list(self._events or [])

        with self._lock:
            if self._needs_reload(now):
                self._reload_locked()

        return list(self._events or [])

    def health(self) -> HealthResponse:
        events = self._ensure_loaded()
        return HealthResponse(
            status="ok",
            source=self._settings.events_file.name,
            last_reload_at=self._last_reload_at,
            cache_ttl_seconds=self._settings.cache_ttl_seconds,
            events=len(events),
        )

    def layout(self, events: Any) -> list[LayoutResult]:
        return compute_layout(validate_events(events, allow_empty=False))

    def day_view(self, config: RenderConfig | None = None) -> DayView:
        return build_day_view(self._ensure_loaded(), config or self.render_config)

    def day_view_for(self, events: Any, config: RenderConfig | None = None) -> DayView:
        return build_day_view(validate_events(events, allow_empty=False), config or self.render_config)
