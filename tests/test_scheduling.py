from datetime import datetime, time, timedelta, timezone
from itertools import combinations

import pytest

from schedule_engine.evaluator import validate
from schedule_engine.rules import DEFAULT_RULES
from schedule_engine.schema import CalendarEvent, PlacementPolicy, PlacementRequest
from schedule_engine.scheduling import place_all


def at(value):
    return datetime.fromisoformat(value)


def busy(event_id, start, end):
    return CalendarEvent(event_id, event_id.title(), at(start), at(end))


def policy(now="2025-03-03T08:00:00", **kwargs):
    return PlacementPolicy(now=at(now), **kwargs)


def test_places_after_existing_event_with_buffer():
    existing = [busy("standup", "2025-03-03T09:00:00", "2025-03-03T10:00:00")]
    [placement] = place_all(existing, [PlacementRequest("Write", 30)], policy(buffer_minutes=15))
    assert placement.start == at("2025-03-03T10:15:00")
    assert placement.end == at("2025-03-03T10:45:00")
    assert placement.skipped
    assert placement.skipped_past == ("Standup",)


def test_cursor_starts_at_day_start_or_now():
    [early] = place_all([], [PlacementRequest("A", 30)], policy("2025-03-03T07:00:00"))
    assert early.start == at("2025-03-03T09:00:00")
    assert not early.skipped

    [late] = place_all([], [PlacementRequest("A", 30)], policy("2025-03-03T13:07:00", day_start=time(8, 0)))
    assert late.start == at("2025-03-03T13:07:00")


def test_requests_are_placed_in_order_with_buffer_between():
    requests = [PlacementRequest("A", 45), PlacementRequest("B", 20)]
    first, second = place_all([], requests, policy(buffer_minutes=15))
    assert (first.start, first.end) == (at("2025-03-03T09:00:00"), at("2025-03-03T09:45:00"))
    assert second.start == at("2025-03-03T10:00:00")


def test_skips_chained_conflicts():
    existing = [
        busy("later", "2025-03-03T10:10:00", "2025-03-03T11:00:00"),
        busy("first", "2025-03-03T09:00:00", "2025-03-03T10:00:00"),
    ]
    [placement] = place_all(existing, [PlacementRequest("Deep work", 30)], policy())
    assert placement.start == at("2025-03-03T11:15:00")
    assert placement.skipped_past == ("First", "Later")


def test_earlier_gaps_stay_unfilled():
    existing = [busy("block", "2025-03-03T09:20:00", "2025-03-03T10:00:00")]
    requests = [PlacementRequest("Long", 60), PlacementRequest("Short", 10)]
    long_one, short_one = place_all(existing, requests, policy(buffer_minutes=0))
    assert long_one.start == at("2025-03-03T10:00:00")
    assert short_one.start == at("2025-03-03T11:00:00")


def test_earliest_start_hint_and_all_day_events():
    existing = [
        CalendarEvent("holiday", "Holiday", at("2025-03-03T00:00:00"), is_all_day=True),
    ]
    requests = [PlacementRequest("Lunch", 60, earliest_start=at("2025-03-03T12:00:00"))]
    [placement] = place_all(existing, requests, policy())
    assert placement.start == at("2025-03-03T12:00:00")
    assert not placement.skipped


def test_rolls_past_midnight():
    requests = [PlacementRequest("Night shift", 120), PlacementRequest("Follow up", 30)]
    first, second = place_all([], requests, policy("2025-03-03T23:00:00"))
    assert first.end == at("2025-03-04T01:00:00")
    assert second.start == at("2025-03-04T01:15:00")


def test_no_overlaps_and_deterministic():
    existing = [
        busy("a", "2025-03-03T09:00:00", "2025-03-03T09:30:00"),
        busy("b", "2025-03-03T09:40:00", "2025-03-03T10:40:00"),
        busy("c", "2025-03-03T11:00:00", "2025-03-03T12:30:00"),
        CalendarEvent("d", "D", at("2025-03-03T13:00:00")),
    ]
    requests = [PlacementRequest(f"R{i}", minutes) for i, minutes in enumerate([25, 50, 10, 90, 15])]
    for buffer_minutes in (0, 5, 15):
        placements = place_all(existing, requests, policy(buffer_minutes=buffer_minutes))
        assert placements == place_all(existing, requests, policy(buffer_minutes=buffer_minutes))

        intervals = [(p.start, p.end) for p in placements]
        intervals += [(e.start, e.effective_end()) for e in existing]
        for (s1, e1), (s2, e2) in combinations(intervals, 2):
            assert not (s1 < e2 and s2 < e1)

        events = existing + [p.to_event(f"new{i}") for i, p in enumerate(placements)]
        conflicts = validate(events, DEFAULT_RULES[:1])
        assert conflicts.is_valid


def test_invalid_requests_and_policy_fail_fast():
    with pytest.raises(ValueError):
        PlacementRequest("Nothing", 0)
    with pytest.raises(ValueError):
        PlacementPolicy(buffer_minutes=-5)


def test_aware_events_with_default_policy():
    now = datetime.now(timezone.utc)
    existing = [CalendarEvent("offsite", "Offsite", now - timedelta(hours=1), now + timedelta(hours=12))]
    [placement] = place_all(existing, [PlacementRequest("Write", 30)])
    assert placement.start == now + timedelta(hours=12, minutes=15)
    assert placement.start.tzinfo == timezone.utc
    assert placement.skipped_past == ("Offsite",)


def test_mixed_aware_and_naive_inputs_fail_fast():
    existing = [busy("standup", "2025-03-03T09:00:00", "2025-03-03T10:00:00")]
    requests = [PlacementRequest("Lunch", 60, earliest_start=at("2025-03-03T12:00:00+00:00"))]
    with pytest.raises(ValueError, match="timezone-aware and naive"):
        place_all(existing, requests)
    with pytest.raises(ValueError, match="timezone-aware and naive"):
        place_all(existing, [PlacementRequest("Write", 30)], policy("2025-03-03T08:00:00+00:00"))
