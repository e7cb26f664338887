"""Schedule Engine - Per-day predicates for every habit specification variant.

Every variant answers the same four questions about a calendar day:
- is_due_on_day: does the day still require a completion?
- completed_on_day: how many completions were recorded on that date?
- required_on_day: how many completions does the day need (multi-per-day)?
- is_covered_on_day: is the day inside an interval window opened by a prior
  completion (multi-day intervals only)?

Dispatch is an exhaustive `match` over the closed HabitSpec union; adding a
variant without handling it here fails type checking through assert_never.

Point-in-time correctness: due/required/covered only consider completions
dated on or before the evaluated day, so a later completion can never make a
missed day look satisfied. `completions` must be sorted ascending.

Dependency variants read their occurrences from a DependencyBindings side
table (see dependency_engine.py); a missing target means "never observed"
and the habit is simply never due.

ARCHITECTURE: Pure logic engine. All methods are static.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, assert_never

from .. import const
from ..specs import (
    CompositeSpec,
    DiscontinuedSpec,
    FrequencySpec,
    HabitSpec,
    HashDependencySpec,
    IntervalSpec,
    MonthlyDateSpec,
    SlidingWindowSpec,
    TagDependencySpec,
    WeekdaySpec,
    YearlyDateSpec,
    YearlyMonthSpec,
)
from ..utils.dt_utils import (
    add_interval,
    as_day,
    clamp_day_of_month,
    completions_up_to_day,
    count_after,
    count_between,
    count_on_day,
    month_start,
    week_start,
)
from .dependency_engine import DependencyEngine

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .dependency_engine import DependencyBindings


class ScheduleEngine:
    """Pure evaluator for habit specifications on calendar days."""

    # =========================================================================
    # PREDICATES
    # =========================================================================

    @staticmethod
    def is_due_on_day(
        spec: HabitSpec,
        day: date | datetime,
        completions: Sequence[datetime],
        bindings: DependencyBindings | None = None,
    ) -> bool:
        """Return True when the habit still needs a completion on day.

        Args:
            spec: Habit specification.
            day: Calendar day (a datetime is reduced to its date).
            completions: All completion timestamps of the habit, ascending.
            bindings: Dependency occurrence side table (dependency specs only).
        """
        day = as_day(day)
        known = completions_up_to_day(completions, day)

        match spec:
            case IntervalSpec(interval=interval, unit=unit):
                if not known:
                    return True
                return add_interval(as_day(known[-1]), interval, unit) <= day

            case FrequencySpec(count=count, period_unit=period_unit):
                start = ScheduleEngine._period_start(day, period_unit)
                return count_between(known, start, day) < count

            case SlidingWindowSpec(count=count):
                start = day - timedelta(days=spec.window_days - 1)
                return count_between(known, start, day) < count

            case WeekdaySpec(weekday=weekday):
                return day.weekday() == weekday and count_on_day(known, day) == 0

            case MonthlyDateSpec(day_of_month=day_of_month):
                target = clamp_day_of_month(day.year, day.month, day_of_month)
                return day.day == target and count_on_day(known, day) == 0

            case YearlyDateSpec(month=month, day_of_month=day_of_month):
                if day.month != month:
                    return False
                target = clamp_day_of_month(day.year, month, day_of_month)
                return day.day == target and count_on_day(known, day) == 0

            case YearlyMonthSpec(month=month):
                return day.month == month and day.day == 1 and count_on_day(known, day) == 0

            case HashDependencySpec(required_count=required_count) | TagDependencySpec(
                required_count=required_count
            ):
                occurrences = DependencyEngine.occurrences_for(spec, bindings)
                return (
                    ScheduleEngine._occurrences_since_last(occurrences, known, day)
                    >= required_count
                )

            case CompositeSpec(specs=members):
                return any(
                    ScheduleEngine.is_due_on_day(member, day, completions, bindings)
                    for member in members
                )

            case DiscontinuedSpec():
                return False

            case _:
                assert_never(spec)

    @staticmethod
    def completed_on_day(
        spec: HabitSpec,
        day: date | datetime,
        completions: Sequence[datetime],
        bindings: DependencyBindings | None = None,
    ) -> int:
        """Return the number of completions whose calendar date equals day."""
        day = as_day(day)

        match spec:
            case DiscontinuedSpec():
                return 0
            case (
                IntervalSpec()
                | FrequencySpec()
                | SlidingWindowSpec()
                | WeekdaySpec()
                | MonthlyDateSpec()
                | YearlyDateSpec()
                | YearlyMonthSpec()
                | HashDependencySpec()
                | TagDependencySpec()
                | CompositeSpec()
            ):
                return count_on_day(completions, day)
            case _:
                assert_never(spec)

    @staticmethod
    def required_on_day(
        spec: HabitSpec,
        day: date | datetime,
        completions: Sequence[datetime],
        bindings: DependencyBindings | None = None,
    ) -> int:
        """Return how many completions day needs (non-zero only for N/d frequencies)."""
        day = as_day(day)

        match spec:
            case FrequencySpec(count=count, period_unit=period_unit):
                return count if period_unit == const.UNIT_DAY else 0
            case CompositeSpec(specs=members):
                return max(
                    (
                        ScheduleEngine.required_on_day(member, day, completions, bindings)
                        for member in members
                    ),
                    default=0,
                )
            case (
                IntervalSpec()
                | SlidingWindowSpec()
                | WeekdaySpec()
                | MonthlyDateSpec()
                | YearlyDateSpec()
                | YearlyMonthSpec()
                | HashDependencySpec()
                | TagDependencySpec()
                | DiscontinuedSpec()
            ):
                return 0
            case _:
                assert_never(spec)

    @staticmethod
    def is_covered_on_day(
        spec: HabitSpec,
        day: date | datetime,
        completions: Sequence[datetime],
        bindings: DependencyBindings | None = None,
    ) -> bool:
        """Return True when day lies inside the window opened by the last completion.

        Only Interval specs (and composites containing one) open windows, so a
        "2w" habit completed on the 1st is covered through the 14th without
        those days being individually due.
        """
        day = as_day(day)

        match spec:
            case IntervalSpec(interval=interval, unit=unit):
                known = completions_up_to_day(completions, day)
                if not known:
                    return False
                last_day = as_day(known[-1])
                return last_day <= day < add_interval(last_day, interval, unit)
            case CompositeSpec(specs=members):
                return any(
                    ScheduleEngine.is_covered_on_day(member, day, completions, bindings)
                    for member in members
                )
            case (
                FrequencySpec()
                | SlidingWindowSpec()
                | WeekdaySpec()
                | MonthlyDateSpec()
                | YearlyDateSpec()
                | YearlyMonthSpec()
                | HashDependencySpec()
                | TagDependencySpec()
                | DiscontinuedSpec()
            ):
                return False
            case _:
                assert_never(spec)

    # =========================================================================
    # DERIVED QUERIES
    # =========================================================================

    @staticmethod
    def day_status(
        spec: HabitSpec,
        day: date | datetime,
        completions: Sequence[datetime],
        today: date,
        bindings: DependencyBindings | None = None,
    ) -> str:
        """Classify a day for the recent-days habit grid.

        Order of precedence mirrors how the grid reads: completions first
        (partial when the day is still due), then interval coverage, then
        missed/due for uncompleted due days.

        Returns:
            One of the const.DAY_STATUS_* values.
        """
        day = as_day(day)
        if day > today:
            return const.DAY_STATUS_FUTURE

        completed = ScheduleEngine.completed_on_day(spec, day, completions, bindings)
        is_due = ScheduleEngine.is_due_on_day(spec, day, completions, bindings)

        if completed > 0:
            return const.DAY_STATUS_PARTIAL if is_due else const.DAY_STATUS_COMPLETED
        if not is_due and ScheduleEngine.is_covered_on_day(
            spec, day, completions, bindings
        ):
            return const.DAY_STATUS_COVERED
        if is_due:
            return const.DAY_STATUS_MISSED if day < today else const.DAY_STATUS_DUE
        return const.DAY_STATUS_IDLE

    @staticmethod
    def is_calendar_anchored(spec: HabitSpec) -> bool:
        """Return True for date-anchored specs, or composites containing one."""
        match spec:
            case WeekdaySpec() | MonthlyDateSpec() | YearlyDateSpec() | YearlyMonthSpec():
                return True
            case CompositeSpec(specs=members):
                return any(ScheduleEngine.is_calendar_anchored(member) for member in members)
            case (
                IntervalSpec()
                | FrequencySpec()
                | SlidingWindowSpec()
                | HashDependencySpec()
                | TagDependencySpec()
                | DiscontinuedSpec()
            ):
                return False
            case _:
                assert_never(spec)

    # =========================================================================
    # Private helpers
    # =========================================================================

    @staticmethod
    def _period_start(day: date, period_unit: str) -> date:
        """Return the first day of the calendar period containing day."""
        if period_unit == const.UNIT_WEEK:
            return week_start(day)
        if period_unit == const.UNIT_MONTH:
            return month_start(day)
        return day

    @staticmethod
    def _occurrences_since_last(
        occurrences: Sequence[datetime],
        known_completions: Sequence[datetime],
        day: date,
    ) -> int:
        """Count occurrences after the last completion and dated on or before day."""
        visible = completions_up_to_day(occurrences, day)
        last_completion = known_completions[-1] if known_completions else None
        return count_after(visible, last_completion)

