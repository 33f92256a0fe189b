import importlib.util
import json
from datetime import datetime
from pathlib import Path

from schedule_engine.config import RuleConfiguration
from schedule_engine.schema import PlacementPolicy, PlacementRequest

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "check_schedule.py"


def load_script():
    spec = importlib.util.spec_from_file_location("check_schedule", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def write_events(tmp_path):
    path = tmp_path / "events.csv"
    path.write_text(
        "id,title,start,end\n"
        "a,Standup,2025-03-03T09:00:00,2025-03-03T10:00:00\n"
        "b,Review,2025-03-03T09:30:00,2025-03-03T10:30:00\n",
        encoding="utf-8",
    )
    return path


def test_build_report(tmp_path):
    script = load_script()
    events = script._load_events(write_events(tmp_path))
    policy = PlacementPolicy(now=datetime(2025, 3, 3, 8, 0))
    report = script.build_report(events, RuleConfiguration(), [PlacementRequest("Write", 30)], policy)

    assert not report["is_valid"]
    assert report["health"]["status"] == "critical"
    assert report["violations"][0]["rule_id"] == "time_conflict"
    assert "time_conflict" in report["quick_fixes"]
    assert report["placements"][0]["start"] == "2025-03-03T10:45:00"


def test_main_writes_report(tmp_path, capsys):
    script = load_script()
    out_path = tmp_path / "report.json"
    script.main(["--events", str(write_events(tmp_path)), "--out", str(out_path)])

    saved = json.loads(out_path.read_text(encoding="utf-8"))
    assert saved["event_count"] == 2
    assert "placements" not in saved
    assert "Saved schedule report" in capsys.readouterr().out
