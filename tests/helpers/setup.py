"""Setup helpers for habitlog tests.

Scenarios describe an event log declaratively so tests can focus on
behavior rather than on building timestamps by hand.

YAML-based setup:
    result = load_scenario("tests/scenarios/scenario_habits.yaml")
    # Access: result.entries, result.today, result.habit_hashes["vitamins"]

In-code setup:
    log = make_log(
        ("retinol @habit[2d]", ["2025-03-01 21:00", "2025-03-03 21:00"]),
        ("plain note", "2025-03-02 10:00"),
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

import yaml

from habitlog.engines.parser_engine import SpecParser
from habitlog.helpers.log_helpers import LogEntry, sort_chronologically
from habitlog.specs import NotAHabit, Unparseable
from habitlog.utils.dt_utils import as_day, dt_parse
from habitlog.utils.text_utils import content_hash, extract_core_text


@dataclass
class ScenarioResult:
    """Result of loading a scenario.

    Attributes:
        entries: Log entries, oldest first
        today: Reference day of the scenario (None when not given)
        habit_hashes: Display name -> content hash for every habit entry
    """

    entries: list[LogEntry] = field(default_factory=list)
    today: date | None = None
    habit_hashes: dict[str, str] = field(default_factory=dict)


def _timestamps_of(item: dict[str, Any]) -> list[datetime]:
    """Return the timestamps of one YAML log item ("timestamp" or "timestamps")."""
    raw = item.get("timestamps", [item.get("timestamp")])
    timestamps = [dt_parse(value) for value in raw]
    if any(timestamp is None for timestamp in timestamps):
        raise ValueError(f"Invalid timestamp in scenario item: {item!r}")
    return timestamps


def at(day: str, clock: str = "08:00") -> datetime:
    """Build a naive local timestamp from "YYYY-MM-DD" and "HH:MM"."""
    return datetime.fromisoformat(f"{day}T{clock}")


def make_log(*items: tuple[str, str | list[str]]) -> list[LogEntry]:
    """Build log entries from (text, timestamp-or-timestamps) pairs, oldest first."""
    entries: list[LogEntry] = []
    for text, raw in items:
        values = raw if isinstance(raw, list) else [raw]
        for value in values:
            timestamp = dt_parse(value)
            if timestamp is None:
                raise ValueError(f"Invalid timestamp: {value!r}")
            entries.append(LogEntry(text=text, timestamp=timestamp))
    return sort_chronologically(entries)


def _transform_yaml_to_scenario(yaml_data: dict[str, Any]) -> ScenarioResult:
    """Transform YAML scenario data into a ScenarioResult."""
    entries: list[LogEntry] = []
    habit_hashes: dict[str, str] = {}

    for item in yaml_data.get("log", []):
        text = item["text"]
        for timestamp in _timestamps_of(item):
            entries.append(LogEntry(text=text, timestamp=timestamp))
        if not isinstance(SpecParser.parse_spec(text), (NotAHabit, Unparseable)):
            habit_hashes[extract_core_text(text)] = content_hash(text)

    today = yaml_data.get("today")
    return ScenarioResult(
        entries=sort_chronologically(entries),
        today=as_day(dt_parse(today)) if today is not None else None,
        habit_hashes=habit_hashes,
    )


def load_scenario(yaml_path: str | Path) -> ScenarioResult:
    """Load a log scenario from a YAML file.

    Args:
        yaml_path: Path to YAML scenario file (absolute or relative to the repo root)

    YAML format:
        today: "2025-03-10"
        log:
          - text: "retinol @habit[2d] #skincare"
            timestamps: ["2025-03-01 21:00", "2025-03-03 21:00"]
          - text: "plain note"
            timestamp: "2025-03-02 10:00"
    """
    path = Path(yaml_path)
    if not path.is_absolute():
        # Relative paths are resolved from the repository root
        repo_root = Path(__file__).parent.parent.parent
        path = repo_root / path

    if not path.exists():
        raise FileNotFoundError(f"Scenario YAML not found: {path}")

    with open(path, encoding="utf-8") as f:
        yaml_data = yaml.safe_load(f)

    return _transform_yaml_to_scenario(yaml_data)
