"""Violation statistics for reporting."""

from __future__ import annotations

from collections import Counter, defaultdict
from typing import Optional

from schedule_engine.rules import DEFAULT_RULES
from schedule_engine.schema import RuleViolation, ValidationResult

SEVERITY_WEIGHT = {"error": 3, "warning": 2, "info": 1}

_CATEGORY_BY_RULE = {rule.id: rule.category for rule in DEFAULT_RULES}


def violation_category(violation: RuleViolation) -> str:
    return _CATEGORY_BY_RULE.get(violation.rule_id, "general")


def violations_by_category(violations: list[RuleViolation]) -> dict[str, list[RuleViolation]]:
    groups: dict[str, list[RuleViolation]] = defaultdict(list)
    for violation in violations:
        groups[violation_category(violation)].append(violation)
    return dict(groups)


def most_critical_violation(violations: list[RuleViolation]) -> Optional[RuleViolation]:
    """First violation carrying the highest severity, or None."""

    if not violations:
        return None
    return max(violations, key=lambda v: SEVERITY_WEIGHT.get(v.severity, 0))


def violation_stats(result: ValidationResult) -> dict:
    """Compute totals, severity and category counts for a validation result."""

    violations = list(result.violations)
    if not violations:
        return {
            "total_violations": 0,
            "error_count": 0,
            "warning_count": 0,
            "info_count": 0,
            "by_category": {},
            "most_common_rule": None,
            "affected_event_count": 0,
        }

    severities = Counter(v.severity for v in violations)
    categories = Counter(violation_category(v) for v in violations)
    rule_counts = Counter(v.rule_id for v in violations)
    affected = {event_id for v in violations for event_id in v.event_ids}

    return {
        "total_violations": len(violations),
        "error_count": severities["error"],
        "warning_count": severities["warning"],
        "info_count": severities["info"],
        "by_category": dict(categories),
        "most_common_rule": rule_counts.most_common(1)[0][0],
        "affected_event_count": len(affected),
    }
