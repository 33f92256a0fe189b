"""Core data schema for calendar events, violations and placements."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Optional

EVENT_TYPES = {"meeting", "task", "reminder", "appointment", "deadline", "personal", "work"}
SEVERITIES = ("info", "warning", "error")
CATEGORIES = {"time", "location", "workload", "breaks", "conflicts", "duration"}
HEALTH_STATUSES = ("healthy", "warning", "critical")

DEFAULT_DURATION_MINUTES = 50


def minutes_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 60.0


@dataclass(frozen=True)
class CalendarEvent:
    """Immutable snapshot of one scheduled item."""

    id: str
    title: str
    start: datetime
    end: Optional[datetime] = None
    duration_minutes: Optional[float] = None
    is_all_day: bool = False
    location: Optional[str] = None
    type: str = "task"

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Event id must be non-empty")
        if not self.title or not self.title.strip():
            raise ValueError(f"Event {self.id}: title must be non-empty")
        if self.end is not None and self.end < self.start:
            raise ValueError(f"Event {self.id}: end {self.end.isoformat()} is before start {self.start.isoformat()}")
        if self.duration_minutes is not None and self.duration_minutes < 0:
            raise ValueError(f"Event {self.id}: negative duration_minutes {self.duration_minutes}")
        if self.type not in EVENT_TYPES:
            raise ValueError(f"Event {self.id}: invalid type '{self.type}'")

    @property
    def resolved_duration_minutes(self) -> Optional[float]:
        """Duration when it can be derived from the event itself, else None."""

        if self.duration_minutes is not None:
            return float(self.duration_minutes)
        if self.end is not None:
            return minutes_between(self.start, self.end)
        return None

    def effective_end(self, default_duration_minutes: float = DEFAULT_DURATION_MINUTES) -> datetime:
        if self.end is not None:
            return self.end
        minutes = self.duration_minutes if self.duration_minutes is not None else default_duration_minutes
        return self.start + timedelta(minutes=minutes)


@dataclass(frozen=True)
class RuleViolation:
    """One reported problem produced by a rule."""

    rule_id: str
    rule_name: str
    severity: str
    message: str
    event_titles: tuple[str, ...]
    event_ids: tuple[str, ...] = ()
    suggestion_message: Optional[str] = None
    timestamp: Optional[datetime] = field(default=None, compare=False)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    violations: tuple[RuleViolation, ...]
    suggestions: tuple[str, ...] = ()
    validated_at: Optional[datetime] = field(default=None, compare=False)
    event_count: int = 0
    rule_count: int = 0


@dataclass(frozen=True)
class ScheduleHealth:
    status: str
    score: int
    summary: str


@dataclass(frozen=True)
class PlacementRequest:
    """A new event waiting for a start time."""

    title: str
    duration_minutes: float
    earliest_start: Optional[datetime] = None
    request_id: Optional[str] = None
    type: str = "task"

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("Placement request title must be non-empty")
        if self.duration_minutes <= 0:
            raise ValueError(f"Placement request '{self.title}': duration_minutes must be positive")
        if self.type not in EVENT_TYPES:
            raise ValueError(f"Placement request '{self.title}': invalid type '{self.type}'")


@dataclass(frozen=True)
class PlacementPolicy:
    day_start: time = time(9, 0)
    buffer_minutes: float = 15
    now: Optional[datetime] = None
    default_duration_minutes: float = DEFAULT_DURATION_MINUTES

    def __post_init__(self) -> None:
        if self.buffer_minutes < 0:
            raise ValueError(f"buffer_minutes must be >= 0, got {self.buffer_minutes}")
        if self.default_duration_minutes <= 0:
            raise ValueError(f"default_duration_minutes must be positive, got {self.default_duration_minutes}")

    @classmethod
    def from_settings(cls, settings, now: Optional[datetime] = None) -> "PlacementPolicy":
        return cls(
            day_start=settings.day_start,
            buffer_minutes=settings.buffer_minutes,
            now=now,
            default_duration_minutes=settings.default_duration_minutes,
        )


@dataclass(frozen=True)
class PlacementResult:
    request: PlacementRequest
    start: datetime
    end: datetime
    skipped: bool = False
    skipped_past: tuple[str, ...] = ()

    def to_event(self, event_id: str) -> CalendarEvent:
        """Build the calendar event a caller would store for this placement."""

        return CalendarEvent(
            id=event_id,
            title=self.request.title,
            start=self.start,
            end=self.end,
            duration_minutes=float(self.request.duration_minutes),
            type=self.request.type,
        )
