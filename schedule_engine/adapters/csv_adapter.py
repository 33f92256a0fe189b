"""CSV adapter for calendar event snapshots."""

from __future__ import annotations

import csv
from datetime import datetime

from schedule_engine.schema import CalendarEvent

_REQUIRED_FIELDS = ("id", "title", "start")
_TRUE_VALUES = {"1", "true", "yes", "y"}


def _parse_timestamp(raw: str, field: str, row_number: int) -> datetime:
    try:
        return datetime.fromisoformat(raw.strip())
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Row {row_number}: malformed {field} timestamp") from exc


def _parse_row(row: dict, row_number: int) -> CalendarEvent:
    missing = [field for field in _REQUIRED_FIELDS if not (row.get(field) or "").strip()]
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    start = _parse_timestamp(row["start"], "start", row_number)
    end_raw = (row.get("end") or "").strip()
    end = _parse_timestamp(end_raw, "end", row_number) if end_raw else None

    duration_raw = (row.get("duration_minutes") or "").strip()
    duration_minutes = None
    if duration_raw:
        try:
            duration_minutes = float(duration_raw)
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Row {row_number}: invalid duration_minutes") from exc

    location_raw = row.get("location")
    location = location_raw.strip() if location_raw and location_raw.strip() else None

    try:
        return CalendarEvent(
            id=row["id"].strip(),
            title=row["title"].strip(),
            start=start,
            end=end,
            duration_minutes=duration_minutes,
            is_all_day=(row.get("is_all_day") or "").strip().lower() in _TRUE_VALUES,
            location=location,
            type=(row.get("type") or "").strip() or "task",
        )
    except ValueError as exc:
        raise ValueError(f"Row {row_number}: {exc}") from exc


def parse(file_path: str) -> list[CalendarEvent]:
    """Parse CSV file into a list of calendar events."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        events: list[CalendarEvent] = []
        for row_number, row in enumerate(reader, start=2):
            events.append(_parse_row(row, row_number))
        return events
