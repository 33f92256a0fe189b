"""Demo script for schedule-engine."""

import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from schedule_engine.adapters.csv_adapter import parse
from schedule_engine.evaluator import validate
from schedule_engine.health import score
from schedule_engine.quick_fix import suggestions_for
from schedule_engine.schema import PlacementPolicy, PlacementRequest
from schedule_engine.scheduling import place_all


def main() -> None:
    events = parse(str(Path(__file__).resolve().parent / "sample_events.csv"))
    result = validate(events)
    print("Health:", score(result.violations))
    for violation in result.violations:
        print(f"[{violation.severity}] {violation.message}")
        for fix in suggestions_for(violation):
            print("   -", fix)

    requests = [PlacementRequest("Write report", 45), PlacementRequest("Call supplier", 20)]
    policy = PlacementPolicy(now=datetime.fromisoformat("2025-03-03T08:00:00"))
    for placement in place_all(events, requests, policy):
        print("Placed:", placement.request.title, placement.start.isoformat(), "->", placement.end.isoformat())


if __name__ == "__main__":
    main()
