import json
from pathlib import Path

import pytest

from daycal.config import Settings


def _write_events(path: Path, events: list[dict]) -> Path:
    path.write_text(json.dumps(events), encoding="utf-8")
    return path


@pytest.fixture
def write_events():
    return _write_events


@pytest.fixture
def events_file(tmp_path: Path) -> Path:
    return _write_events(
        tmp_path / "events.json",
        [
            {"starts_at": 0, "duration": 60, "title": "Standup"},
            {"starts_at": 30, "duration": 60, "title": "Review", "location": "Room 4"},
            {"starts_at": 200, "duration": 30},
        ],
    )


@pytest.fixture
def make_settings():
    def factory(events_file: Path, **overrides) -> Settings:
        values = {
            "events_file": events_file,
            "cache_ttl_seconds": 3600,
            "origin_hour": 9,
            "hours_in_day": 12,
            "pixels_per_hour": 60.0,
            "allowed_origins": ["http://localhost:5173"],
            "log_level": "INFO",
        }
        values.update(overrides)
        return Settings(**values)

    return factory
