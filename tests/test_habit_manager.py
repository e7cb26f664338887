"""Tests for HabitManager query layer.

Uses the mixed habits scenario (today = Monday 2025-03-10):
- retinol #skincare (2d) and stretch (every 2 @run) are due today
- vitamins (1/d) was done this morning
- call mom / pay rent / bike tune-up are calendar-anchored
- old journaling was discontinued
"""

from __future__ import annotations

from datetime import date
import logging

from freezegun import freeze_time
import pytest
import voluptuous as vol

from habitlog import const
from habitlog.helpers.log_helpers import LogEntry
from habitlog.managers.habit_manager import HabitManager
from tests.helpers import ScenarioResult, at

TODAY = date(2025, 3, 10)


def names(streams: list) -> list[str]:
    return [stream.display_name for stream in streams]


# =============================================================================
# Listings
# =============================================================================


class TestActiveHabits:
    """Tests for get_active_habits."""

    def test_sorted_by_name(self, habits_scenario: ScenarioResult) -> None:
        manager = HabitManager(habits_scenario.entries)

        assert names(manager.get_active_habits(TODAY)) == [
            "bike tune-up",
            "call mom",
            "pay rent",
            "retinol #skincare",
            "stretch",
            "vitamins",
        ]

    def test_filter_due_only(self, habits_scenario: ScenarioResult) -> None:
        manager = HabitManager(
            habits_scenario.entries, {const.CONF_FILTER_DUE_ONLY: True}
        )
        assert names(manager.get_active_habits(TODAY)) == ["retinol #skincare", "stretch"]

    def test_sorted_by_next_due(self, habits_scenario: ScenarioResult) -> None:
        """Soonest first; habits due on the same day keep name order."""
        manager = HabitManager(
            habits_scenario.entries, {const.CONF_SORT_BY: const.SORT_BY_NEXT_DUE}
        )
        assert names(manager.get_active_habits(TODAY)) == [
            "retinol #skincare",
            "stretch",
            "vitamins",
            "call mom",
            "pay rent",
            "bike tune-up",
        ]

    @freeze_time("2025-03-10 12:00:00")
    def test_defaults_to_today(self, habits_scenario: ScenarioResult) -> None:
        manager = HabitManager(
            habits_scenario.entries, {const.CONF_FILTER_DUE_ONLY: True}
        )
        assert names(manager.get_active_habits()) == ["retinol #skincare", "stretch"]


class TestUpcomingHabits:
    """Tests for get_upcoming_habits."""

    def test_calendar_habits_soonest_first(self, habits_scenario: ScenarioResult) -> None:
        manager = HabitManager(habits_scenario.entries)

        upcoming = manager.get_upcoming_habits(TODAY)

        assert [(item["name"], item["label"], item["due_date"]) for item in upcoming] == [
            ("call mom", "every sunday", date(2025, 3, 16)),
            ("pay rent", "1st", date(2025, 4, 1)),
            ("bike tune-up", "every june", date(2025, 6, 1)),
        ]
        assert upcoming[0]["habit_hash"] == habits_scenario.habit_hashes["call mom"]


# =============================================================================
# Per-Habit Reports
# =============================================================================


class TestHabitReports:
    """Tests for get_habit, get_strength_report and get_day_grid."""

    def test_get_habit_includes_discontinued(self, habits_scenario: ScenarioResult) -> None:
        manager = HabitManager(habits_scenario.entries)
        journaling = manager.get_habit(habits_scenario.habit_hashes["old journaling"])

        assert journaling is not None
        assert journaling.is_discontinued
        assert manager.get_habit("zzzz") is None

    def test_strength_report(self, habits_scenario: ScenarioResult) -> None:
        manager = HabitManager(habits_scenario.entries)
        report = manager.get_strength_report(
            habits_scenario.habit_hashes["retinol #skincare"], TODAY
        )

        assert report is not None
        assert report["week"]["strength"] == 0.5
        assert report["all_time"]["level"] == const.STRENGTH_LEVEL_MODERATE

    def test_strength_report_custom_windows(self, habits_scenario: ScenarioResult) -> None:
        manager = HabitManager(
            habits_scenario.entries, {const.CONF_STRENGTH_WINDOWS: {"fortnight": 14}}
        )
        report = manager.get_strength_report(habits_scenario.habit_hashes["vitamins"], TODAY)

        assert report is not None
        assert list(report) == ["fortnight"]
        assert report["fortnight"]["strength"] == 1.0

    def test_strength_report_unknown_hash(self, habits_scenario: ScenarioResult) -> None:
        manager = HabitManager(habits_scenario.entries)
        assert manager.get_strength_report("zzzz", TODAY) is None

    def test_day_grid(self, habits_scenario: ScenarioResult) -> None:
        manager = HabitManager(habits_scenario.entries)
        grid = manager.get_day_grid(habits_scenario.habit_hashes["retinol #skincare"], TODAY)

        assert grid is not None
        assert [cell["day"] for cell in grid] == [date(2025, 3, day) for day in range(6, 11)]
        assert [cell["status"] for cell in grid] == [
            const.DAY_STATUS_COVERED,
            const.DAY_STATUS_COMPLETED,
            const.DAY_STATUS_COVERED,
            const.DAY_STATUS_MISSED,
            const.DAY_STATUS_DUE,
        ]
        assert [cell["completed"] for cell in grid] == [0, 1, 0, 0, 0]

    def test_day_grid_size_from_options(self, habits_scenario: ScenarioResult) -> None:
        manager = HabitManager(habits_scenario.entries, {const.CONF_GRID_DAYS: 3})
        grid = manager.get_day_grid(habits_scenario.habit_hashes["vitamins"], TODAY)

        assert grid is not None
        assert [cell["status"] for cell in grid] == [const.DAY_STATUS_COMPLETED] * 3


# =============================================================================
# Record / Undo
# =============================================================================


class TestRecordAndUndo:
    """Tests for get_completion_text and find_completion_to_undo."""

    def test_completion_text_reuses_latest_entry(self, habits_scenario: ScenarioResult) -> None:
        manager = HabitManager(habits_scenario.entries)

        assert (
            manager.get_completion_text(habits_scenario.habit_hashes["retinol #skincare"])
            == "retinol @habit[2d] #skincare"
        )
        assert manager.get_completion_text(habits_scenario.habit_hashes["old journaling"]) is None
        assert manager.get_completion_text("zzzz") is None

    def test_find_completion_to_undo(self, habits_scenario: ScenarioResult) -> None:
        manager = HabitManager(habits_scenario.entries)
        vitamins = habits_scenario.habit_hashes["vitamins"]

        entry = manager.find_completion_to_undo(vitamins, TODAY)

        assert entry == LogEntry("vitamins @habit[1/d]", at("2025-03-10", "08:00"))
        call_mom = habits_scenario.habit_hashes["call mom"]
        assert manager.find_completion_to_undo(call_mom, TODAY) is None

    @freeze_time("2025-03-09 21:00:00")
    def test_find_completion_to_undo_defaults_to_today(
        self, habits_scenario: ScenarioResult
    ) -> None:
        manager = HabitManager(habits_scenario.entries)
        entry = manager.find_completion_to_undo(habits_scenario.habit_hashes["vitamins"])

        assert entry is not None
        assert entry.timestamp == at("2025-03-09", "08:00")

    def test_undo_returns_the_stored_record(self) -> None:
        """Dict records come back as the same object so the store can remove them."""
        records = [
            {"text": "vitamins @habit[1/d]", "timestamp": "2025-03-09 08:00"},
            {"text": "vitamins @habit[1/d]", "timestamp": "2025-03-10 08:00"},
        ]
        manager = HabitManager(records)

        target = manager.find_completion_to_undo(manager.streams[0].habit_hash, TODAY)

        assert target is records[1]
        records.remove(target)
        assert len(records) == 1


# =============================================================================
# Snapshot
# =============================================================================


class TestSnapshot:
    """Tests for refresh and snapshot isolation."""

    def test_caller_mutation_does_not_leak(self, habits_scenario: ScenarioResult) -> None:
        """The manager keeps its own copy of the log."""
        log = list(habits_scenario.entries)
        manager = HabitManager(log, {const.CONF_FILTER_DUE_ONLY: True})

        log.append(LogEntry("retinol @habit[2d] #skincare", at("2025-03-10", "21:00")))

        assert names(manager.get_active_habits(TODAY)) == ["retinol #skincare", "stretch"]

    def test_refresh_picks_up_new_entries(self, habits_scenario: ScenarioResult) -> None:
        manager = HabitManager(habits_scenario.entries, {const.CONF_FILTER_DUE_ONLY: True})
        retinol = habits_scenario.habit_hashes["retinol #skincare"]
        text = manager.get_completion_text(retinol)
        assert text is not None

        manager.refresh([*habits_scenario.entries, LogEntry(text, at("2025-03-10", "21:00"))])

        assert names(manager.get_active_habits(TODAY)) == ["stretch"]
        assert len(manager.streams) == 7

    def test_unreadable_record_warns_once(self, caplog: pytest.LogCaptureFixture) -> None:
        """The log is read once per refresh, so each bad record is reported once."""
        log = [
            {"text": "jog @run", "timestamp": "2025-03-09 07:00"},
            {"text": "stretch @habit[every 2 @run]", "timestamp": "2025-03-09 08:00"},
            {"text": "stretch @habit[every 2 @run]"},
        ]

        with caplog.at_level(logging.WARNING, logger="habitlog"):
            manager = HabitManager(log)
            manager.find_completion_to_undo(manager.streams[0].habit_hash, TODAY)

        warnings = [r for r in caplog.records if "unreadable log record" in r.getMessage()]
        assert len(warnings) == 1

    def test_invalid_options_raise(self) -> None:
        with pytest.raises(vol.Invalid):
            HabitManager([], {const.CONF_SORT_BY: "priority"})
