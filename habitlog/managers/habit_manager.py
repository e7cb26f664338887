"""Habit Manager - Query layer over one consistent log snapshot.

The manager owns a copy of the event log and the streams and dependency
bindings derived from it. Every query reads that snapshot, so a single
listing never mixes two versions of the log. Call refresh() after the
external store appends or removes entries.

Recording and undoing completions are done by the log owner:
- get_completion_text() returns the text to append for a new completion
- find_completion_to_undo() returns the stored record to remove

ARCHITECTURE: Stateful manager, synchronous, no I/O. Computation is
delegated to the engines.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Any

from .. import const
from ..engines.dependency_engine import DependencyEngine
from ..engines.schedule_engine import ScheduleEngine
from ..engines.statistics_engine import StatisticsEngine
from ..engines.stream_engine import HabitStream, StreamEngine
from ..helpers.log_helpers import coerce_log_entries, sort_chronologically
from ..helpers.options_helpers import validate_options
from ..utils.dt_utils import as_day, dt_today_local

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..engines.dependency_engine import DependencyBindings
    from ..helpers.log_helpers import LogEntry
    from ..type_defs import (
        DayCell,
        HabitHash,
        HabitQueryOptions,
        StrengthEntry,
        UpcomingHabit,
    )


__all__ = ["HabitManager"]


class HabitManager:
    """Manager for habit queries over the event log.

    Responsibilities:
    - Snapshot the log and rebuild streams and bindings on refresh
    - Active listings with due filtering and sorting
    - Strength reports, recent-days grid and upcoming calendar habits
    - Look-ups for recording and undoing completions

    NOT responsible for:
    - Writing to the log (external store)
    - Parsing or evaluating specs (engines)
    """

    def __init__(
        self,
        log: Iterable[object] = (),
        options: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            log: Event log records (see helpers.log_helpers.coerce_log_entry)
            options: Raw query options, validated with HABIT_OPTIONS_SCHEMA

        Raises:
            vol.Invalid: When options fail validation.
        """
        self.options: HabitQueryOptions = validate_options(options)
        self.statistics = StatisticsEngine()
        self._log: list[object] = []
        self._entries: list[LogEntry] = []
        self._streams: list[HabitStream] = []
        self._bindings: DependencyBindings = {}
        self.refresh(log)

    # =========================================================================
    # SNAPSHOT
    # =========================================================================

    def refresh(self, log: Iterable[object]) -> None:
        """Replace the snapshot and rebuild streams and dependency bindings."""
        self._log = list(log)
        # Coerced once per snapshot; engines pass LogEntry values through
        self._entries = sort_chronologically(coerce_log_entries(self._log))
        self._streams = StreamEngine.build_streams(
            self._entries, include_discontinued=True
        )
        self._bindings = DependencyEngine.resolve_dependencies(
            self._streams, self._entries
        )
        const.LOGGER.debug(
            "HabitManager: Refreshed snapshot with %d records, %d streams, %d dependency targets",
            len(self._log),
            len(self._streams),
            len(self._bindings),
        )

    @property
    def streams(self) -> list[HabitStream]:
        """Return every stream, discontinued ones included."""
        return list(self._streams)

    @property
    def bindings(self) -> DependencyBindings:
        """Return the dependency bindings of the current snapshot."""
        return self._bindings

    def _resolve_today(self, today: date | datetime | None) -> date:
        if today is None:
            return dt_today_local()
        return as_day(today)

    # =========================================================================
    # LISTINGS
    # =========================================================================

    def get_habit(self, habit_hash: HabitHash) -> HabitStream | None:
        """Return a stream by hash, discontinued streams included."""
        return StreamEngine.find_stream(self._streams, habit_hash)

    def get_active_habits(
        self, today: date | datetime | None = None
    ) -> list[HabitStream]:
        """Return active habits according to the query options.

        With filter_due_only only habits due today are listed. Sorting is by
        display name, or by days until next due (name breaks ties).
        """
        day = self._resolve_today(today)
        active = [stream for stream in self._streams if not stream.is_discontinued]

        if self.options[const.CONF_FILTER_DUE_ONLY]:
            active = [
                stream
                for stream in active
                if ScheduleEngine.is_due_on_day(
                    stream.spec, day, stream.completions, stream.bindings
                )
            ]

        if self.options[const.CONF_SORT_BY] == const.SORT_BY_NEXT_DUE:
            offsets = {
                stream.habit_hash: self.statistics.next_due_offset(
                    stream.spec, stream.completions, day, stream.bindings
                )
                for stream in active
            }
            # Streams arrive sorted by name, so the stable sort keeps name order on ties
            active.sort(key=lambda stream: offsets[stream.habit_hash])

        return active

    def get_upcoming_habits(
        self, today: date | datetime | None = None
    ) -> list[UpcomingHabit]:
        """Return calendar-anchored habits with their next due date, soonest first.

        Habits not due within the next-due scan bound are left out.
        """
        day = self._resolve_today(today)
        upcoming: list[UpcomingHabit] = []

        for stream in self._streams:
            if stream.is_discontinued:
                continue
            if not ScheduleEngine.is_calendar_anchored(stream.spec):
                continue
            due_date = self.statistics.next_due_date(
                stream.spec, stream.completions, day, stream.bindings
            )
            if due_date is None:
                continue
            upcoming.append(
                {
                    "habit_hash": stream.habit_hash,
                    "name": stream.display_name,
                    "label": stream.spec.label,
                    "due_date": due_date,
                }
            )

        upcoming.sort(key=lambda item: item["due_date"])
        return upcoming

    # =========================================================================
    # PER-HABIT REPORTS
    # =========================================================================

    def get_strength_report(
        self, habit_hash: HabitHash, today: date | datetime | None = None
    ) -> dict[str, StrengthEntry] | None:
        """Return strength per configured window, or None for an unknown hash."""
        stream = self.get_habit(habit_hash)
        if stream is None:
            const.LOGGER.debug("HabitManager: No habit with hash %s", habit_hash)
            return None
        return self.statistics.strength_report(
            stream.spec,
            stream.completions,
            self.options[const.CONF_STRENGTH_WINDOWS],
            self._resolve_today(today),
            stream.bindings,
        )

    def get_day_grid(
        self, habit_hash: HabitHash, today: date | datetime | None = None
    ) -> list[DayCell] | None:
        """Return status cells for the last grid_days days, oldest first."""
        stream = self.get_habit(habit_hash)
        if stream is None:
            return None

        day = self._resolve_today(today)
        grid_days = self.options[const.CONF_GRID_DAYS]
        cells: list[DayCell] = []
        for offset in range(grid_days - 1, -1, -1):
            cell_day = day - timedelta(days=offset)
            cells.append(
                {
                    "day": cell_day,
                    "status": ScheduleEngine.day_status(
                        stream.spec,
                        cell_day,
                        stream.completions,
                        day,
                        stream.bindings,
                    ),
                    "completed": ScheduleEngine.completed_on_day(
                        stream.spec, cell_day, stream.completions, stream.bindings
                    ),
                }
            )
        return cells

    # =========================================================================
    # RECORD / UNDO LOOK-UPS
    # =========================================================================

    def get_completion_text(self, habit_hash: HabitHash) -> str | None:
        """Return the text to append to the log when recording a completion.

        This is the raw text of the habit's latest entry, so the new entry
        keeps both the identity and the current schedule.
        """
        stream = self.get_habit(habit_hash)
        if stream is None or stream.is_discontinued:
            return None
        return stream.raw_text

    def find_completion_to_undo(
        self, habit_hash: HabitHash, day: date | datetime | None = None
    ) -> Any | None:
        """Return the log record to remove when undoing, or None.

        The result is the caller's own record object (the same instance that
        was passed to refresh), so the store can remove it directly.
        """
        entry = StreamEngine.latest_entry_on_day(
            self._entries, habit_hash, self._resolve_today(day)
        )
        return None if entry is None else entry.record
