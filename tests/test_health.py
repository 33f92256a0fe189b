from datetime import datetime

from schedule_engine.health import schedule_health, score
from schedule_engine.schema import CalendarEvent, RuleViolation


def violation(severity, rule_id="time_conflict"):
    return RuleViolation(rule_id, rule_id, severity, "msg", ("A",))


def test_empty_is_healthy():
    health = score([])
    assert health.status == "healthy"
    assert health.score == 100
    assert health.summary == "Schedule is valid with no issues"


def test_error_makes_schedule_critical():
    health = score([violation("error"), violation("warning")])
    assert health.status == "critical"
    assert health.score == 70
    assert health.summary == "1 critical issue found"


def test_mixed_warnings_and_suggestions():
    health = score([violation("warning"), violation("warning"), violation("info", "location_grouping")])
    assert health.status == "warning"
    assert health.score == 75
    assert health.summary == "2 warnings, 1 suggestion"


def test_info_only_is_warning_tier():
    health = score([violation("info")])
    assert health.status == "warning"
    assert health.score == 95
    assert health.summary == "1 suggestion available"


def test_score_is_monotonic_and_floored():
    violations = []
    previous = score(violations).score
    for severity in ["info", "warning", "error"] * 4:
        violations.append(violation(severity))
        current = score(violations).score
        assert 0 <= current <= previous
        previous = current
    assert score([violation("error")] * 6).score == 0


def test_schedule_health_validates_events():
    events = [
        CalendarEvent("a", "A", datetime(2025, 3, 3, 9), datetime(2025, 3, 3, 10)),
        CalendarEvent("b", "B", datetime(2025, 3, 3, 9, 30), datetime(2025, 3, 3, 10, 30)),
    ]
    health = schedule_health(events)
    assert health.status == "critical"
    assert health.score == 80
