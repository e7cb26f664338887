"""Statistics Engine - Compliance scoring and next-due lookups for habits.

This engine centralizes the numbers shown for a habit:
- Strength: fraction of due days that were satisfied over a window
- Strength report: strength for several windows with a weak/moderate/strong level
- Next due: how many days until a habit becomes due again
- Completion summary: total, first and last completion

Design Principles:
    - Stateless: operates only on the habit spec, completions and bindings passed in
    - Point-in-time: each day is judged with completions known up to that day
    - Bounded: next-due scanning stops after const.NEXT_DUE_SCAN_DAYS days
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import as_day, completions_up_to_day, dt_today_local, iter_days
from ..utils.math_utils import calculate_percentage, clamp, round_ratio, safe_ratio
from .schedule_engine import ScheduleEngine

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from ..specs import HabitSpec
    from ..type_defs import CompletionSummary, StrengthEntry
    from .dependency_engine import DependencyBindings


class StatisticsEngine:
    """Stateless engine for habit compliance statistics.

    Example:
        stats = StatisticsEngine()

        # Strength over the last 30 days
        value = stats.strength(spec, stream.completions, window_days=30)

        # Days until due again (const.NOT_DUE_SOON when not within a year)
        offset = stats.next_due_offset(spec, stream.completions)
    """

    # ────────────────────────────────────────────────────────────────
    # Reference Date
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def _dt_today_local() -> date:
        """Return today's local date."""
        return dt_today_local()

    def _resolve_day(self, reference: date | datetime | None) -> date:
        """Return the calendar date of reference, defaulting to today."""
        if reference is None:
            return self._dt_today_local()
        return as_day(reference)

    # ────────────────────────────────────────────────────────────────
    # Strength (Compliance)
    # ────────────────────────────────────────────────────────────────

    def strength(
        self,
        spec: HabitSpec,
        completions: Iterable[datetime],
        window_days: int = const.STRENGTH_WINDOW_ALL_TIME,
        as_of: date | datetime | None = None,
        bindings: DependencyBindings | None = None,
    ) -> float:
        """Compute the fraction of due days that were satisfied.

        Range:
            window_days == 0: first completion date through as_of
                              (0.0 when there are no completions).
            window_days > 0:  the trailing window_days ending at as_of,
                              clamped to start no earlier than the first completion.

        Per day (using only completions dated on or before that day):
            - counted when the day is due or has a completion
            - satisfied when not due, or when it has completions that meet
              required_on_day

        Args:
            spec: Habit specification.
            completions: Completion timestamps (any order).
            window_days: Trailing window size, 0 for all time.
            as_of: Last day of the range. Defaults to today.
            bindings: Dependency occurrence side table.

        Returns:
            Strength in [0, 1]; 1.0 when no day in range imposed an obligation.
        """
        end = self._resolve_day(as_of)
        ordered = sorted(completions)
        first_day = as_day(ordered[0]) if ordered else None

        if window_days == const.STRENGTH_WINDOW_ALL_TIME:
            if first_day is None:
                return 0.0
            start = first_day
        else:
            start = end - timedelta(days=window_days - 1)
            if first_day is not None and start < first_day:
                start = first_day

        total_due = 0
        satisfied = 0

        for day in iter_days(start, end):
            known = completions_up_to_day(ordered, day)
            is_due = ScheduleEngine.is_due_on_day(spec, day, known, bindings)
            completed = ScheduleEngine.completed_on_day(spec, day, ordered, bindings)

            if not is_due and completed == 0:
                continue

            total_due += 1
            if not is_due:
                satisfied += 1
                continue

            required = ScheduleEngine.required_on_day(spec, day, known, bindings)
            if completed > 0 and completed >= required:
                satisfied += 1

        return clamp(safe_ratio(satisfied, total_due, empty=1.0), 0.0, 1.0)

    @staticmethod
    def strength_level(value: float) -> str:
        """Bucket a strength value into weak / moderate / strong."""
        if value < const.STRENGTH_THRESHOLD_WEAK:
            return const.STRENGTH_LEVEL_WEAK
        if value < const.STRENGTH_THRESHOLD_MODERATE:
            return const.STRENGTH_LEVEL_MODERATE
        return const.STRENGTH_LEVEL_STRONG

    def strength_report(
        self,
        spec: HabitSpec,
        completions: Iterable[datetime],
        windows: Mapping[str, int] | None = None,
        as_of: date | datetime | None = None,
        bindings: DependencyBindings | None = None,
    ) -> dict[str, StrengthEntry]:
        """Compute strength for several labelled windows.

        Args:
            windows: Label -> window days. Defaults to week/month/year/all_time.

        Returns:
            Label -> StrengthEntry, in the order of `windows`.
        """
        if windows is None:
            windows = const.DEFAULT_STRENGTH_WINDOWS
        end = self._resolve_day(as_of)
        ordered = sorted(completions)

        report: dict[str, StrengthEntry] = {}
        for label, window_days in windows.items():
            value = self.strength(spec, ordered, window_days, end, bindings)
            report[label] = {
                "window_days": window_days,
                "strength": round_ratio(value, const.STRENGTH_PRECISION),
                "percent": calculate_percentage(value),
                "level": self.strength_level(value),
            }
        return report

    # ────────────────────────────────────────────────────────────────
    # Next Due
    # ────────────────────────────────────────────────────────────────

    def next_due_offset(
        self,
        spec: HabitSpec,
        completions: Sequence[datetime],
        from_day: date | datetime | None = None,
        bindings: DependencyBindings | None = None,
    ) -> int:
        """Return days until the habit is next due (0 = due today).

        Scans forward day by day up to const.NEXT_DUE_SCAN_DAYS (inclusive).
        Specs that are not due within that bound, such as a two-year interval
        completed recently, return const.NOT_DUE_SOON instead of an exact
        future date.
        """
        start = self._resolve_day(from_day)
        ordered = sorted(completions)

        for offset in range(const.NEXT_DUE_SCAN_DAYS + 1):
            day = start + timedelta(days=offset)
            if ScheduleEngine.is_due_on_day(spec, day, ordered, bindings):
                return offset
        return const.NOT_DUE_SOON

    def next_due_date(
        self,
        spec: HabitSpec,
        completions: Sequence[datetime],
        from_day: date | datetime | None = None,
        bindings: DependencyBindings | None = None,
    ) -> date | None:
        """Return the next due date, or None when not due within the scan bound."""
        start = self._resolve_day(from_day)
        offset = self.next_due_offset(spec, completions, start, bindings)
        if offset == const.NOT_DUE_SOON:
            return None
        return start + timedelta(days=offset)

    # ────────────────────────────────────────────────────────────────
    # Summary
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def completion_summary(completions: Iterable[datetime]) -> CompletionSummary:
        """Return the total count and first/last completion timestamps."""
        ordered = sorted(completions)
        return {
            "total": len(ordered),
            "first": ordered[0] if ordered else None,
            "last": ordered[-1] if ordered else None,
        }
