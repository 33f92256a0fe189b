"""Greedy first-fit placement of new events.

``place_all`` is a pure request/response computation: it reads the existing
events and returns start/end times, never moving or mutating anything. It holds
no lock. Two concurrent calls that share the same ``existing`` events may
return overlapping placements, so callers that accept placements into a shared
store must serialize those calls themselves.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Iterable, Optional

from schedule_engine.schema import CalendarEvent, PlacementPolicy, PlacementRequest, PlacementResult

logger = logging.getLogger(__name__)


def _first_overlap(start: datetime, end: datetime, busy: list[tuple[datetime, datetime, str]]):
    for busy_start, busy_end, title in busy:
        if start < busy_end and busy_start < end:
            return busy_start, busy_end, title
    return None


def _is_aware(stamp: datetime) -> bool:
    return stamp.tzinfo is not None and stamp.utcoffset() is not None


def _input_timezone(
    policy: PlacementPolicy,
    busy: list[tuple[datetime, datetime, str]],
    requests: list[PlacementRequest],
) -> Optional[tzinfo]:
    """Timezone shared by every placement input, or None when all are naive."""

    stamps = [start for start, _, _ in busy]
    stamps += [request.earliest_start for request in requests if request.earliest_start is not None]
    if policy.now is not None:
        stamps.append(policy.now)
    aware = [stamp for stamp in stamps if _is_aware(stamp)]
    if aware and len(aware) != len(stamps):
        raise ValueError("Cannot mix timezone-aware and naive datetimes in placement inputs")
    return aware[0].tzinfo if aware else None


def _initial_cursor(policy: PlacementPolicy, tz: Optional[tzinfo]) -> datetime:
    now = policy.now or datetime.now(tz)
    day_start = datetime.combine(now.date(), policy.day_start, tzinfo=now.tzinfo)
    return max(day_start, now)


def place_all(
    existing: Iterable[CalendarEvent],
    requests: Iterable[PlacementRequest],
    policy: Optional[PlacementPolicy] = None,
) -> list[PlacementResult]:
    """Place each request in order at the first free, buffered slot.

    The search never looks backwards past the cursor, so earlier gaps may stay
    unfilled. There is no end-of-day boundary; placements roll past midnight.
    Inputs must be uniformly timezone-aware or naive; mixing them raises ``ValueError``.
    """

    policy = policy or PlacementPolicy()
    buffer = timedelta(minutes=policy.buffer_minutes)

    busy = [
        (event.start, event.effective_end(policy.default_duration_minutes), event.title)
        for event in existing
        if not event.is_all_day
    ]

    requests = list(requests)
    cursor = _initial_cursor(policy, _input_timezone(policy, busy, requests))
    results: list[PlacementResult] = []
    for request in requests:
        duration = timedelta(minutes=request.duration_minutes)
        start = cursor
        if request.earliest_start is not None and request.earliest_start > start:
            start = request.earliest_start

        skipped_past: list[str] = []
        while True:
            end = start + duration
            conflict = _first_overlap(start, end, busy)
            if conflict is None:
                break
            _, conflict_end, title = conflict
            skipped_past.append(title)
            start = conflict_end + buffer

        if skipped_past:
            logger.debug("Placed %r at %s after skipping past %s", request.title, start.isoformat(), skipped_past)

        results.append(
            PlacementResult(
                request=request,
                start=start,
                end=end,
                skipped=bool(skipped_past),
                skipped_past=tuple(skipped_past),
            )
        )
        busy.append((start, end, request.title))
        cursor = end + buffer

    return results
