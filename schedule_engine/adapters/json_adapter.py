"""JSON adapter for event snapshots, placement requests and rule settings."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Optional

from schedule_engine.config import RuleConfiguration
from schedule_engine.schema import CalendarEvent, PlacementRequest

# snake_case name -> accepted keys, first match wins
_EVENT_KEYS = {
    "id": ("id",),
    "title": ("title",),
    "start": ("start", "startDate"),
    "end": ("end", "endDate"),
    "duration_minutes": ("duration_minutes", "durationMinutes"),
    "is_all_day": ("is_all_day", "isAllDay", "allDay"),
    "location": ("location",),
    "type": ("type",),
}

_TRUE_VALUES = {"1", "true", "yes", "y"}


def _pick(item: dict, name: str) -> Any:
    for key in _EVENT_KEYS.get(name, (name,)):
        if item.get(key) is not None:
            return item[key]
    return None


def _parse_flag(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in _TRUE_VALUES
    return bool(raw)


def _parse_timestamp(raw: Any, field: str, index: int) -> Optional[datetime]:
    if raw is None:
        return None
    try:
        return datetime.fromisoformat(str(raw))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Item {index}: malformed {field} timestamp") from exc


def _parse_number(raw: Any, field: str, index: int) -> Optional[float]:
    if raw is None:
        return None
    try:
        return float(raw)
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Item {index}: invalid {field}") from exc


def _load_list(file_path: str) -> list:
    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")
    return payload


def _parse_item(item: dict, index: int) -> CalendarEvent:
    if not isinstance(item, dict):
        raise ValueError(f"Item {index}: expected an object")
    missing = [name for name in ("id", "title", "start") if not _pick(item, name)]
    if missing:
        raise ValueError(f"Item {index}: missing required fields {missing}")

    location = _pick(item, "location")
    try:
        return CalendarEvent(
            id=str(_pick(item, "id")).strip(),
            title=str(_pick(item, "title")).strip(),
            start=_parse_timestamp(_pick(item, "start"), "start", index),
            end=_parse_timestamp(_pick(item, "end"), "end", index),
            duration_minutes=_parse_number(_pick(item, "duration_minutes"), "duration_minutes", index),
            is_all_day=_parse_flag(_pick(item, "is_all_day")),
            location=(str(location).strip() or None) if location else None,
            type=str(_pick(item, "type") or "task").strip(),
        )
    except ValueError as exc:
        if str(exc).startswith(f"Item {index}:"):
            raise
        raise ValueError(f"Item {index}: {exc}") from exc


def parse(file_path: str) -> list[CalendarEvent]:
    """Parse JSON file into calendar events."""

    return [_parse_item(item, i) for i, item in enumerate(_load_list(file_path), start=1)]


def _parse_request(item: dict, index: int) -> PlacementRequest:
    if not isinstance(item, dict):
        raise ValueError(f"Item {index}: expected an object")
    duration = _parse_number(item.get("duration_minutes", item.get("durationMinutes")), "duration_minutes", index)
    if duration is None:
        raise ValueError(f"Item {index}: missing required fields ['duration_minutes']")

    earliest = _parse_timestamp(item.get("earliest_start", item.get("earliestStart")), "earliest_start", index)
    try:
        return PlacementRequest(
            title=str(item.get("title") or "").strip(),
            duration_minutes=duration,
            earliest_start=earliest,
            request_id=item.get("id"),
            type=str(item.get("type") or "task").strip(),
        )
    except ValueError as exc:
        raise ValueError(f"Item {index}: {exc}") from exc


def parse_requests(file_path: str) -> list[PlacementRequest]:
    """Parse JSON file into placement requests, preserving order."""

    return [_parse_request(item, i) for i, item in enumerate(_load_list(file_path), start=1)]


def load_rule_configuration(file_path: str) -> RuleConfiguration:
    """Load a rule configuration object (camelCase or snake_case keys)."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, dict):
        raise ValueError("Rule configuration payload must be an object")
    return RuleConfiguration.model_validate(payload)
