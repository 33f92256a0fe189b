"""Schedule health scoring."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional

from schedule_engine.evaluator import validate
from schedule_engine.rules import Rule
from schedule_engine.schema import CalendarEvent, RuleViolation, ScheduleHealth

SEVERITY_PENALTY = {"error": 20, "warning": 10, "info": 5}


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def _summary(errors: int, warnings: int, infos: int) -> str:
    if errors:
        return f"{_plural(errors, 'critical issue')} found"
    if warnings and infos:
        return f"{_plural(warnings, 'warning')}, {_plural(infos, 'suggestion')}"
    if warnings:
        return f"{_plural(warnings, 'warning')} detected"
    return f"{_plural(infos, 'suggestion')} available"


def score(violations: Iterable[RuleViolation]) -> ScheduleHealth:
    """Reduce violations to a 0-100 score and a status tier."""

    counts = Counter(violation.severity for violation in violations)
    errors, warnings, infos = counts["error"], counts["warning"], counts["info"]
    if not (errors or warnings or infos):
        return ScheduleHealth(status="healthy", score=100, summary="Schedule is valid with no issues")

    value = max(0, 100 - sum(SEVERITY_PENALTY[name] * counts[name] for name in SEVERITY_PENALTY))
    status = "critical" if errors else "warning"
    return ScheduleHealth(status=status, score=value, summary=_summary(errors, warnings, infos))


def schedule_health(events: Iterable[CalendarEvent], rules: Optional[Iterable[Rule]] = None) -> ScheduleHealth:
    return score(validate(events, rules).violations)
