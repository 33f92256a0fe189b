"""Rule engine: evaluate a rule set against an event snapshot."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from schedule_engine.checks import (
    check_break_requirement,
    check_duration,
    check_location_grouping,
    check_meeting_buffer,
    check_time_conflicts,
    check_workload_limit,
)
from schedule_engine.rules import DEFAULT_RULES, Rule
from schedule_engine.schema import CalendarEvent, RuleViolation, ValidationResult

logger = logging.getLogger(__name__)

RULE_CHECKS = {
    "time_conflict": check_time_conflicts,
    "meeting_buffer": check_meeting_buffer,
    "workload_limit": check_workload_limit,
    "duration_validation": check_duration,
    "location_grouping": check_location_grouping,
    "break_requirement": check_break_requirement,
}


def _unique_suggestions(violations: list[RuleViolation]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for violation in violations:
        if violation.suggestion_message:
            seen.setdefault(violation.suggestion_message, None)
    return tuple(seen)


def validate(
    events: Iterable[CalendarEvent],
    rules: Optional[Iterable[Rule]] = None,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """Validate events against every enabled rule.

    Violations come back in rule order, then in the order each rule found
    them. Disabled rules are skipped entirely. Passing ``rules=None`` uses the
    default rule set.
    """

    snapshot = list(events)
    rule_list = list(DEFAULT_RULES if rules is None else rules)
    evaluated_at = now or datetime.now()

    violations: list[RuleViolation] = []
    enabled = [rule for rule in rule_list if rule.is_enabled]
    for rule in enabled:
        found = RULE_CHECKS[rule.id](snapshot, rule, evaluated_at)
        logger.debug("Rule %s produced %d violation(s) over %d event(s)", rule.id, len(found), len(snapshot))
        violations.extend(found)

    return ValidationResult(
        is_valid=not violations,
        violations=tuple(violations),
        suggestions=_unique_suggestions(violations),
        validated_at=evaluated_at,
        event_count=len(snapshot),
        rule_count=len(enabled),
    )


def validate_event_against_schedule(
    new_event: CalendarEvent,
    existing: Iterable[CalendarEvent],
    rules: Optional[Iterable[Rule]] = None,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """Validate the schedule as it would look with ``new_event`` added."""

    return validate([*existing, new_event], rules, now=now)


def has_schedule_conflicts(events: Iterable[CalendarEvent], rules: Optional[Iterable[Rule]] = None) -> bool:
    result = validate(events, rules)
    return any(violation.severity == "error" for violation in result.violations)


def cache_key(events: Iterable[CalendarEvent], rules: Optional[Iterable[Rule]] = None) -> tuple:
    """Hashable structural key for memoizing validation results.

    Two calls with equal events and equal enabled rules (including severity
    and parameters) produce equal keys; any other pair produces unequal keys.
    """

    rule_list = DEFAULT_RULES if rules is None else rules
    enabled = tuple(rule for rule in rule_list if rule.is_enabled)
    return tuple(events), enabled
