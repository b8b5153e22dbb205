from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from .errors import DataSourceUnavailable
from .log import get_logger
from .utils import optional_text

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("starts_at", "duration")
TEXT_COLUMNS = ("title", "location")
COLUMN_ALIASES = {
    "startsAt": "starts_at",
    "start": "starts_at",
    "name": "title",
    "place": "location",
}


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".json":
        return pd.read_json(path, orient="records", dtype=False, convert_dates=False)
    if suffix == ".csv":
        return pd.read_csv(path)
    raise DataSourceUnavailable(f"Unsupported events file type: {path.name}")


def _native_number(value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return value
    if pd.api.types.is_number(value):
        return value.item() if hasattr(value, "item") else value
    return value


def load_events(path: Path) -> list[dict[str, Any]]:
    """Read raw event records; values are checked later by ``validate_events``."""
    if not path.exists():
        raise DataSourceUnavailable(f"Events file not found: {path.name}")

    try:
        frame = _read_frame(path)
    except DataSourceUnavailable:
        raise
    except Exception as exc:
        raise DataSourceUnavailable(f"Could not read {path.name}: {exc}") from exc

    if frame.empty:
        return []

    for source_col, target_col in COLUMN_ALIASES.items():
        if source_col in frame.columns and target_col not in frame.columns:
            frame[target_col] = frame[source_col]

    missing = [column for column in REQUIRED_COLUMNS if column not in frame.columns]
    if missing:
        raise DataSourceUnavailable(f"Missing column(s) {', '.join(missing)} in {path.name}.")

    for column in TEXT_COLUMNS:
        if column not in frame.columns:
            frame[column] = None

    records: list[dict[str, Any]] = []
    for row in frame[list(REQUIRED_COLUMNS + TEXT_COLUMNS)].to_dict("records"):
        records.append(
            {
                "starts_at": _native_number(row["starts_at"]),
                "duration": _native_number(row["duration"]),
                "title": optional_text(row["title"]),
                "location": optional_text(row["location"]),
            }
        )

    logger.info("Loaded %d events from %s", len(records), path.name)
    return records
