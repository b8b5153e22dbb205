import random

import pytest

from daycal.errors import InvalidEvent, InvalidInput
from daycal.layout import assign_columns, cluster, compute_layout, compute_time_range, sort_events, validate_events
from daycal.models import CalendarEvent


def _events(*spans: tuple[float, float]) -> list[dict]:
    return [{"starts_at": start, "duration": duration} for start, duration in spans]


def _placements(events: list[dict]) -> dict[int, tuple[int, int]]:
    return {result.index: (result.column, result.column_count) for result in compute_layout(events)}


def _overlaps(first: CalendarEvent, second: CalendarEvent) -> bool:
    return first.starts_at < second.end_at and second.starts_at < first.end_at


def _peak_concurrency(events: list[CalendarEvent]) -> int:
    return max(sum(1 for other in events if other.starts_at <= event.starts_at < other.end_at) for event in events)


def _random_day(rng: random.Random, size: int) -> list[dict]:
    return [{"starts_at": rng.randrange(0, 600, 5), "duration": rng.randrange(5, 180, 5)} for _ in range(size)]


def test_overlapping_pair_shares_width() -> None:
    assert _placements(_events((0, 60), (30, 60))) == {0: (0, 2), 1: (1, 2)}


def test_disjoint_events_take_full_width() -> None:
    assert _placements(_events((0, 60), (100, 60))) == {0: (0, 1), 1: (0, 1)}


def test_sequential_events_reuse_column_beside_long_event() -> None:
    placements = _placements(_events((0, 180), (30, 30), (70, 30)))

    assert placements == {0: (0, 2), 1: (1, 2), 2: (1, 2)}


def test_equal_starts_get_one_column_each() -> None:
    placements = _placements(_events((60, 30), (60, 30), (60, 30)))

    assert sorted(col for col, _ in placements.values()) == [0, 1, 2]
    assert {count for _, count in placements.values()} == {3}


def test_touching_events_do_not_overlap() -> None:
    events = _events((0, 60), (60, 30))

    assert _placements(events) == {0: (0, 1), 1: (0, 1)}
    assert len(cluster(validate_events(events))) == 2


def test_column_count_widens_earlier_events_in_cluster() -> None:
    # grows to four columns, then shrinks back to two
    events = _events((0, 100), (10, 20), (15, 20), (20, 20), (50, 10))

    placements = _placements(events)

    assert placements[0] == (0, 4)
    assert placements[1] == (1, 4)
    assert placements[4] == (1, 4)
    assert {count for _, count in placements.values()} == {4}


def test_empty_input_gives_empty_layout() -> None:
    assert compute_layout([]) == []


def test_single_event() -> None:
    results = compute_layout(_events((45, 15)))

    assert len(results) == 1
    assert (results[0].index, results[0].column, results[0].column_count) == (0, 0, 1)


def test_results_follow_start_order_with_input_indices() -> None:
    events = _events((300, 30), (0, 60), (0, 30))

    results = compute_layout(events)

    # equal starts: shorter event first
    assert [result.index for result in results] == [2, 1, 0]


def test_sort_events_ties_by_duration_then_input_order() -> None:
    events = validate_events(_events((10, 60), (10, 30), (10, 30), (5, 90)))

    assert sort_events(events) == [3, 1, 2, 0]


def test_cluster_chains_transitive_overlaps() -> None:
    events = validate_events(_events((0, 30), (20, 30), (45, 30), (80, 10), (90, 5)))

    assert cluster(events) == [[0, 1, 2], [3], [4]]


def test_cluster_empty() -> None:
    assert cluster([]) == []


def test_assign_columns_prefers_lowest_free_column() -> None:
    events = validate_events(_events((0, 30), (0, 60), (0, 90), (40, 10)))

    assert assign_columns(events) == [(0, 3), (1, 3), (2, 3), (0, 3)]


def test_layout_does_not_mutate_caller_events() -> None:
    events = _events((30, 60), (0, 60))
    snapshot = [dict(event) for event in events]

    compute_layout(events)

    assert events == snapshot


def test_layout_properties_hold_for_random_days() -> None:
    rng = random.Random(20240611)

    for _ in range(200):
        raw = _random_day(rng, rng.randint(1, 25))
        events = validate_events(raw)
        results = compute_layout(raw)

        assert len(results) == len(raw)
        assert sorted(result.index for result in results) == list(range(len(raw)))
        assert compute_layout(raw) == results

        for result in results:
            assert result.column_count >= 1
            assert 0 <= result.column < result.column_count

        by_index = {result.index: result for result in results}
        for members in cluster([events[result.index] for result in results]):
            indices = [results[pos].index for pos in members]
            cluster_events = [events[idx] for idx in indices]
            assert {by_index[idx].column_count for idx in indices} == {_peak_concurrency(cluster_events)}

            for first in indices:
                for second in indices:
                    if first < second and by_index[first].column == by_index[second].column:
                        assert not _overlaps(events[first], events[second])

        for idx, event in enumerate(events):
            if not any(_overlaps(event, other) for pos, other in enumerate(events) if pos != idx):
                assert (by_index[idx].column, by_index[idx].column_count) == (0, 1)


def test_accepts_camel_case_start_and_event_models() -> None:
    events = [{"startsAt": 0, "duration": 60}, CalendarEvent(starts_at=30, duration=60, title="Sync")]

    assert _placements(events) == {0: (0, 2), 1: (1, 2)}


@pytest.mark.parametrize(
    "event",
    [
        {"starts_at": 0, "duration": 0},
        {"starts_at": 0, "duration": -15},
        {"starts_at": -5, "duration": 30},
        {"starts_at": "30", "duration": 30},
        {"starts_at": True, "duration": 30},
        {"starts_at": float("nan"), "duration": 30},
        {"starts_at": 0, "duration": float("inf")},
        {"starts_at": 0},
        {"duration": 30},
    ],
)
def test_invalid_event_fails_whole_call(event: dict) -> None:
    events = [{"starts_at": 0, "duration": 30}, event]

    with pytest.raises(InvalidEvent) as excinfo:
        compute_layout(events)

    assert excinfo.value.index == 1


def test_invalid_event_reason_names_field() -> None:
    with pytest.raises(InvalidEvent) as excinfo:
        compute_layout([{"starts_at": 0, "duration": 0}])

    assert excinfo.value.index == 0
    assert "duration" in excinfo.value.reason


def test_non_mapping_event_is_rejected() -> None:
    with pytest.raises(InvalidEvent):
        compute_layout([42])


@pytest.mark.parametrize("events", [None, "events", b"events", {"starts_at": 0, "duration": 30}, 7])
def test_invalid_input_is_rejected(events: object) -> None:
    with pytest.raises(InvalidInput):
        compute_layout(events)


def test_validate_events_can_require_events() -> None:
    with pytest.raises(InvalidInput):
        validate_events([], allow_empty=False)


def test_compute_time_range_default_window() -> None:
    assert compute_time_range([], hours_in_day=12) == (0, 720)
    assert compute_time_range(validate_events(_events((30, 60))), hours_in_day=12) == (0, 720)


def test_compute_time_range_grows_for_late_events() -> None:
    events = validate_events(_events((700, 45)))

    assert compute_time_range(events, hours_in_day=12) == (0, 780)


def test_compute_time_range_compact() -> None:
    events = validate_events(_events((130, 60)))

    assert compute_time_range(events, hours_in_day=12, compact=True) == (60, 240)
