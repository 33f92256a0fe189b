"""Canned remediation suggestions per rule."""

from __future__ import annotations

from typing import Iterable

from schedule_engine.schema import RuleViolation

QUICK_FIXES: dict[str, tuple[str, ...]] = {
    "time_conflict": (
        "Move one event to a different time",
        "Shorten one or both events",
        "Consider making one event virtual if possible",
    ),
    "meeting_buffer": (
        "Add a buffer between the events",
        "End the first event a few minutes early",
        "Start the second event a few minutes later",
    ),
    "workload_limit": (
        "Move some events to the next day",
        "Combine related tasks into single blocks",
        "Delegate or reschedule non-critical items",
    ),
    "duration_validation": (
        "Adjust event duration to reasonable limits",
        "Break long events into multiple sessions",
        "Add breaks for extended work periods",
    ),
    "location_grouping": (
        "Group events at the same location together",
        "Schedule travel time between locations",
        "Consider remote alternatives when possible",
    ),
    "break_requirement": (
        "Schedule a 30-minute break",
        "Split long work sessions",
        "Add meal breaks between work blocks",
    ),
}


def suggestions_for(violation: RuleViolation) -> list[str]:
    """Return remediation hints for a violation."""

    fixes = QUICK_FIXES.get(violation.rule_id)
    if fixes is not None:
        return list(fixes)
    if violation.suggestion_message:
        return [violation.suggestion_message]
    return []


def quick_fixes(violations: Iterable[RuleViolation]) -> dict[str, list[str]]:
    fixes: dict[str, list[str]] = {}
    for violation in violations:
        if violation.rule_id not in fixes:
            fixes[violation.rule_id] = suggestions_for(violation)
    return fixes
