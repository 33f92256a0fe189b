"""Rule-kind algorithms evaluated by the rule engine.

Each check takes the full event snapshot, the rule being evaluated and the
evaluation timestamp, and returns violations in discovery order.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime

from schedule_engine.rules import Rule
from schedule_engine.schema import CalendarEvent, RuleViolation, minutes_between


def _fmt_minutes(value: float) -> str:
    rounded = round(value, 1)
    return str(int(rounded)) if rounded == int(rounded) else f"{rounded:.1f}"


def _timed_sorted(events: list[CalendarEvent]) -> list[CalendarEvent]:
    timed = [event for event in events if not event.is_all_day]
    return sorted(timed, key=lambda e: (e.start, e.effective_end(), e.id))


def _violation(rule: Rule, message: str, involved: list[CalendarEvent], now: datetime) -> RuleViolation:
    return RuleViolation(
        rule_id=rule.id,
        rule_name=rule.name,
        severity=rule.severity,
        message=message,
        event_titles=tuple(event.title for event in involved),
        event_ids=tuple(event.id for event in involved),
        suggestion_message=rule.suggestion_message,
        timestamp=now,
    )


def check_time_conflicts(events: list[CalendarEvent], rule: Rule, now: datetime) -> list[RuleViolation]:
    """One violation per overlapping pair of timed events."""

    ordered = _timed_sorted(events)
    violations = []
    for index, current in enumerate(ordered):
        current_end = current.effective_end()
        for other in ordered[index + 1 :]:
            if other.start >= current_end:
                break
            if other.effective_end() > current.start and current_end > other.start:
                violations.append(
                    _violation(rule, f'"{current.title}" overlaps with "{other.title}"', [current, other], now)
                )
    return violations


def check_meeting_buffer(events: list[CalendarEvent], rule: Rule, now: datetime) -> list[RuleViolation]:
    """Flag adjacent same-day events whose gap is positive but under the buffer."""

    buffer_minutes = rule.parameters.buffer_minutes
    ordered = _timed_sorted(events)
    violations = []
    for current, following in zip(ordered, ordered[1:]):
        if current.start.date() != following.start.date():
            continue
        gap = minutes_between(current.effective_end(), following.start)
        # gap <= 0 belongs to time_conflict
        if 0 < gap < buffer_minutes:
            message = (
                f'Only {_fmt_minutes(gap)} minutes between "{current.title}" and "{following.title}" '
                f"(requires {_fmt_minutes(buffer_minutes)})"
            )
            violations.append(_violation(rule, message, [current, following], now))
    return violations


def check_workload_limit(events: list[CalendarEvent], rule: Rule, now: datetime) -> list[RuleViolation]:
    """One violation per day that holds more events than allowed."""

    limit = rule.parameters.max_events_per_day
    by_day: dict = defaultdict(list)
    for event in sorted(events, key=lambda e: (e.start, e.id)):
        by_day[event.start.date()].append(event)

    violations = []
    for day in sorted(by_day):
        day_events = by_day[day]
        if len(day_events) > limit:
            message = f"{len(day_events)} events scheduled for {day.isoformat()} (limit: {limit})"
            violations.append(_violation(rule, message, day_events, now))
    return violations


def check_duration(events: list[CalendarEvent], rule: Rule, now: datetime) -> list[RuleViolation]:
    """Flag timed events shorter or longer than the configured bounds."""

    min_minutes = rule.parameters.min_duration_minutes
    max_minutes = rule.parameters.max_duration_minutes
    violations = []
    for event in events:
        if event.is_all_day:
            continue
        duration = event.resolved_duration_minutes
        if duration is None:
            continue
        if duration > max_minutes:
            message = (
                f'"{event.title}" duration ({_fmt_minutes(duration)} min) exceeds maximum '
                f"({_fmt_minutes(max_minutes)} min)"
            )
            violations.append(_violation(rule, message, [event], now))
        if duration < min_minutes:
            message = (
                f'"{event.title}" duration ({_fmt_minutes(duration)} min) below minimum '
                f"({_fmt_minutes(min_minutes)} min)"
            )
            violations.append(_violation(rule, message, [event], now))
    return violations


def check_location_grouping(events: list[CalendarEvent], rule: Rule, now: datetime) -> list[RuleViolation]:
    """Advise consolidating events at one location separated by long gaps."""

    max_gap = rule.parameters.max_gap_minutes
    by_location: dict[str, list[CalendarEvent]] = defaultdict(list)
    for event in _timed_sorted(events):
        if event.location and event.location.strip():
            by_location[event.location].append(event)

    violations = []
    for location, located in by_location.items():
        for before, after in zip(located, located[1:]):
            gap = minutes_between(before.effective_end(), after.start)
            if gap > max_gap:
                message = f"Large {_fmt_minutes(gap)}-minute gap between events at {location}"
                violations.append(_violation(rule, message, [before, after], now))
    return violations


def check_break_requirement(events: list[CalendarEvent], rule: Rule, now: datetime) -> list[RuleViolation]:
    """Require a break once continuous work exceeds the threshold."""

    threshold = rule.parameters.work_hours_threshold
    required_break = rule.parameters.required_break_minutes

    violations = []
    continuous = 0.0
    last_end = None
    for event in _timed_sorted(events):
        if last_end is not None:
            gap = minutes_between(last_end, event.start)
            if gap < required_break and continuous > threshold:
                message = (
                    f"Insufficient break ({_fmt_minutes(max(gap, 0.0))} min) after "
                    f'{_fmt_minutes(continuous / 60.0)} hours of work before "{event.title}"'
                )
                violations.append(_violation(rule, message, [event], now))
            if gap >= required_break:
                continuous = 0.0

        end = event.effective_end()
        continuous += minutes_between(event.start, end)
        last_end = end if last_end is None else max(last_end, end)
    return violations
