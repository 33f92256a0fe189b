"""Validation rule definitions and their typed parameters."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional, Union

from schedule_engine.schema import CATEGORIES, SEVERITIES


@dataclass(frozen=True)
class TimeConflictParams:
    pass


@dataclass(frozen=True)
class MeetingBufferParams:
    buffer_minutes: float = 10


@dataclass(frozen=True)
class WorkloadLimitParams:
    max_events_per_day: int = 8


@dataclass(frozen=True)
class DurationParams:
    min_duration_minutes: float = 5
    max_duration_minutes: float = 480


@dataclass(frozen=True)
class LocationGroupingParams:
    max_gap_minutes: float = 180


@dataclass(frozen=True)
class BreakRequirementParams:
    work_hours_threshold: float = 240
    required_break_minutes: float = 30


RuleParams = Union[
    TimeConflictParams,
    MeetingBufferParams,
    WorkloadLimitParams,
    DurationParams,
    LocationGroupingParams,
    BreakRequirementParams,
]

PARAMS_BY_RULE: dict[str, type] = {
    "time_conflict": TimeConflictParams,
    "meeting_buffer": MeetingBufferParams,
    "workload_limit": WorkloadLimitParams,
    "duration_validation": DurationParams,
    "location_grouping": LocationGroupingParams,
    "break_requirement": BreakRequirementParams,
}

RULE_IDS = tuple(PARAMS_BY_RULE)

# Settings screens send camelCase keys.
_WIRE_NAMES = {
    "bufferMinutes": "buffer_minutes",
    "maxEventsPerDay": "max_events_per_day",
    "minDurationMinutes": "min_duration_minutes",
    "maxDurationMinutes": "max_duration_minutes",
    "maxGapMinutes": "max_gap_minutes",
    "workHoursThreshold": "work_hours_threshold",
    "requiredBreakMinutes": "required_break_minutes",
}


def build_parameters(rule_id: str, overrides: Optional[Mapping[str, Any]] = None, base: Optional[RuleParams] = None):
    """Return typed parameters for a rule kind, merged over defaults.

    Unknown keys are ignored and missing or ``None`` values keep the default.
    """

    params_type = PARAMS_BY_RULE.get(rule_id)
    if params_type is None:
        raise ValueError(f"Unknown rule id '{rule_id}'")

    params = base if base is not None else params_type()
    if not overrides:
        return params

    known = {f.name: f.type for f in fields(params_type)}
    values = {}
    for key, raw in overrides.items():
        name = _WIRE_NAMES.get(key, key)
        if name not in known or raw is None:
            continue
        try:
            value = float(raw)
            if known[name] == "int":
                if not value.is_integer():
                    raise ValueError("expected a whole number")
                value = int(value)
            values[name] = value
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Rule {rule_id}: invalid value {raw!r} for parameter '{key}'") from exc
    return replace(params, **values)


@dataclass(frozen=True)
class Rule:
    """A named, configurable validation policy."""

    id: str
    name: str
    category: str
    severity: str
    is_enabled: bool = True
    parameters: Any = None
    suggestion_message: Optional[str] = None
    description: str = ""

    def __post_init__(self) -> None:
        params_type = PARAMS_BY_RULE.get(self.id)
        if params_type is None:
            raise ValueError(f"Unknown rule id '{self.id}'")
        if self.severity not in SEVERITIES:
            raise ValueError(f"Rule {self.id}: invalid severity '{self.severity}'")
        if self.category not in CATEGORIES:
            raise ValueError(f"Rule {self.id}: invalid category '{self.category}'")
        if self.parameters is None:
            object.__setattr__(self, "parameters", params_type())
        elif isinstance(self.parameters, Mapping):
            object.__setattr__(self, "parameters", build_parameters(self.id, self.parameters))
        elif not isinstance(self.parameters, params_type):
            raise ValueError(f"Rule {self.id}: parameters must be {params_type.__name__}")


DEFAULT_RULES: tuple[Rule, ...] = (
    Rule(
        id="time_conflict",
        name="No Overlapping Events",
        category="conflicts",
        severity="error",
        suggestion_message="Reschedule one of the conflicting events",
        description="Events cannot overlap in time",
    ),
    Rule(
        id="meeting_buffer",
        name="Buffer Between Events",
        category="time",
        severity="warning",
        suggestion_message="Leave a short buffer between back-to-back events",
        description="Consecutive events need a minimum idle gap",
    ),
    Rule(
        id="workload_limit",
        name="Daily Workload Limit",
        category="workload",
        severity="warning",
        suggestion_message="Spread events across more days",
        description="Limit the number of events per day",
    ),
    Rule(
        id="duration_validation",
        name="Reasonable Duration",
        category="duration",
        severity="warning",
        suggestion_message="Adjust the event duration",
        description="Event durations must stay within sensible bounds",
    ),
    Rule(
        id="location_grouping",
        name="Group Events by Location",
        category="location",
        severity="info",
        is_enabled=False,
        suggestion_message="Consolidate events at the same location",
        description="Events at one location should be scheduled close together",
    ),
    Rule(
        id="break_requirement",
        name="Mandatory Breaks",
        category="breaks",
        severity="warning",
        is_enabled=False,
        suggestion_message="Schedule a break after long work sessions",
        description="Long stretches of work need a break",
    ),
)


def default_rules() -> list[Rule]:
    return list(DEFAULT_RULES)


def rule_by_id(rules, rule_id: str) -> Optional[Rule]:
    return next((rule for rule in rules if rule.id == rule_id), None)


def describe_parameters(rule: Rule) -> dict[str, float]:
    return {f.name: getattr(rule.parameters, f.name) for f in fields(rule.parameters)}
