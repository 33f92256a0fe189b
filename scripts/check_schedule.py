"""Validate a CSV/JSON event snapshot and optionally place new requests."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from schedule_engine.adapters import csv_adapter, json_adapter
from schedule_engine.config import EngineSettings, RuleConfiguration
from schedule_engine.evaluator import validate
from schedule_engine.health import score
from schedule_engine.metrics import violation_stats
from schedule_engine.quick_fix import quick_fixes
from schedule_engine.schema import PlacementPolicy
from schedule_engine.scheduling import place_all


def _load_events(path: Path):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(str(path))
    if suffix == ".json":
        return json_adapter.parse(str(path))
    raise ValueError("Unsupported input format, expected .csv or .json")


def build_report(events, configuration: RuleConfiguration, requests=None, policy=None) -> dict:
    """Run validation, health scoring and placement into one JSON-ready dict."""

    rules = configuration.apply()
    result = validate(events, rules)
    health = score(result.violations)

    report = {
        "event_count": result.event_count,
        "rule_count": result.rule_count,
        "is_valid": result.is_valid,
        "health": asdict(health),
        "stats": violation_stats(result),
        "violations": [
            {
                "rule_id": v.rule_id,
                "severity": v.severity,
                "message": v.message,
                "event_titles": list(v.event_titles),
            }
            for v in result.violations
        ],
    }
    if configuration.show_suggestions:
        report["quick_fixes"] = quick_fixes(result.violations)

    if requests:
        report["placements"] = [
            {
                "title": placement.request.title,
                "start": placement.start.isoformat(),
                "end": placement.end.isoformat(),
                "skipped_past": list(placement.skipped_past),
            }
            for placement in place_all(events, requests, policy)
        ]
    return report


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Check a calendar snapshot against schedule rules")
    parser.add_argument("--events", required=True, help="Path to CSV/JSON events file")
    parser.add_argument("--rules", help="Path to JSON rule configuration")
    parser.add_argument("--requests", help="Path to JSON placement requests to auto-place")
    parser.add_argument("--out", default="outputs/schedule_report.json", help="Where to save the report")
    args = parser.parse_args(argv)

    settings = EngineSettings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    events = _load_events(Path(args.events))
    configuration = json_adapter.load_rule_configuration(args.rules) if args.rules else RuleConfiguration()
    requests = json_adapter.parse_requests(args.requests) if args.requests else None

    report = build_report(events, configuration, requests, PlacementPolicy.from_settings(settings))
    print(json.dumps(report, indent=2))

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    print(f"Saved schedule report to {out_path}")


if __name__ == "__main__":
    main()
