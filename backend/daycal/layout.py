from __future__ import annotations

from collections.abc import Mapping, Sequence
import heapq
import math
from typing import Any

from pydantic import ValidationError

from .errors import InvalidEvent, InvalidInput
from .log import get_logger
from .models import CalendarEvent, LayoutResult

logger = get_logger(__name__)

COMPACT_MARGIN_MIN = 15


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "event"
    return f"{field}: {first.get('msg', 'invalid value')}"


def validate_events(events: Any, *, allow_empty: bool = True) -> list[CalendarEvent]:
    """Turn raw input into validated events, failing on the first bad one."""
    if events is None:
        raise InvalidInput("No events supplied.")
    if isinstance(events, (str, bytes, Mapping)) or not isinstance(events, Sequence):
        raise InvalidInput(f"Events must be a list, got {type(events).__name__}.")
    if not events and not allow_empty:
        raise InvalidInput("Please supply at least one event.")

    validated: list[CalendarEvent] = []
    for index, raw in enumerate(events):
        if isinstance(raw, CalendarEvent):
            validated.append(raw)
            continue
        if not isinstance(raw, Mapping):
            raise InvalidEvent(index, f"expected an object, got {type(raw).__name__}")
        try:
            validated.append(CalendarEvent.model_validate(raw))
        except ValidationError as exc:
            raise InvalidEvent(index, _describe_validation_error(exc)) from exc

    return validated


def sort_events(events: Sequence[CalendarEvent]) -> list[int]:
    """Positions of ``events`` ordered by start, then duration, then input order."""
    return sorted(range(len(events)), key=lambda idx: (events[idx].starts_at, events[idx].duration, idx))


def cluster(events: Sequence[CalendarEvent]) -> list[list[int]]:
    """Group time-sorted events into runs connected by overlap."""
    clusters: list[list[int]] = []
    current: list[int] = []
    active_end = -math.inf

    for idx, event in enumerate(events):
        if current and event.starts_at >= active_end:
            clusters.append(current)
            current = []
            active_end = -math.inf

        current.append(idx)
        active_end = max(active_end, event.end_at)

    if current:
        clusters.append(current)

    return clusters


def assign_columns(events: Sequence[CalendarEvent]) -> list[tuple[int, int]]:
    """
    Place the time-sorted events of one cluster into columns.

    Each event takes the lowest column whose previous occupant has ended by
    the event's start, opening a new column otherwise. Every event gets the
    cluster's final column count, including the ones placed before the
    cluster reached its widest point.
    """
    active: list[tuple[float, int]] = []
    free_cols: list[int] = []
    next_col = 0
    columns: list[int] = []

    for event in events:
        while active and active[0][0] <= event.starts_at:
            _, released_col = heapq.heappop(active)
            heapq.heappush(free_cols, released_col)

        if free_cols:
            col = heapq.heappop(free_cols)
        else:
            col = next_col
            next_col += 1

        heapq.heappush(active, (event.end_at, col))
        columns.append(col)

    column_count = max(next_col, 1)
    return [(col, column_count) for col in columns]


def compute_layout(events: Any) -> list[LayoutResult]:
    """
    Lay out a day of events.

    Results come back in start-time order; ``LayoutResult.index`` points at
    the event's position in ``events``. Raises ``InvalidInput`` or
    ``InvalidEvent`` before any layout work if the input is unusable.
    """
    validated = validate_events(events)
    if not validated:
        return []

    order = sort_events(validated)
    sorted_events = [validated[idx] for idx in order]
    clusters = cluster(sorted_events)

    results: list[LayoutResult] = []
    for members in clusters:
        placements = assign_columns([sorted_events[pos] for pos in members])
        for pos, (col, column_count) in zip(members, placements):
            results.append(LayoutResult(index=order[pos], column=col, column_count=column_count))

    logger.debug("Laid out %d events in %d clusters", len(results), len(clusters))
    return results


def compute_time_range(
    events: Sequence[CalendarEvent],
    hours_in_day: int,
    compact: bool = False,
) -> tuple[int, int]:
    """Visible window in minutes from the origin, snapped to whole hours."""
    default_end = hours_in_day * 60
    if not events:
        return 0, default_end

    min_start = min(event.starts_at for event in events)
    max_end = max(event.end_at for event in events)

    full_end = max(default_end, int(math.ceil(max_end / 60) * 60))

    if compact:
        range_start = max(0, int(math.floor((min_start - COMPACT_MARGIN_MIN) / 60) * 60))
        range_end = min(full_end, int(math.ceil((max_end + COMPACT_MARGIN_MIN) / 60) * 60))
    else:
        range_start = 0
        range_end = full_end

    if range_end - range_start < 60:
        range_end = range_start + 60

    return range_start, range_end
