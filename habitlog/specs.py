# File: specs.py
"""Habit Specification value types.

A habit specification is a closed tagged union: every variant is a frozen
dataclass carrying only the parameters parsed from the annotation body.
Dependency variants do NOT carry their resolved occurrence lists; those live
in a DependencyBindings side table (see engines/dependency_engine.py) and
are passed to the evaluator next to the habit spec.

Each variant renders its canonical annotation body through `label`, so
`SpecParser.parse_spec(to_annotation(spec)) == spec` for every variant.

Parse outcomes that are not habits (`NotAHabit`, `Unparseable`) are also
defined here so callers can match on a single result type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from . import const


def ordinal_suffix(number: int) -> str:
    """Return the English ordinal suffix for a day number (1st, 2nd, 13th, 22nd)."""
    if 10 <= number % 100 <= 20:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


# =============================================================================
# SCHEDULE VARIANTS
# =============================================================================


@dataclass(frozen=True, slots=True)
class IntervalSpec:
    """Due every `interval` units since the last completion ("2d", "1m")."""

    interval: int
    unit: str

    @property
    def label(self) -> str:
        return f"{self.interval}{self.unit}"


@dataclass(frozen=True, slots=True)
class FrequencySpec:
    """`count` completions required per calendar day/week/month ("3/w")."""

    count: int
    period_unit: str

    @property
    def label(self) -> str:
        return f"{self.count}/{self.period_unit}"


@dataclass(frozen=True, slots=True)
class SlidingWindowSpec:
    """`count` completions required in any trailing window ("3 in 7d")."""

    count: int
    window: int
    window_unit: str

    @property
    def window_days(self) -> int:
        if self.window_unit == const.UNIT_WEEK:
            return self.window * const.DAYS_PER_WEEK
        return self.window

    @property
    def label(self) -> str:
        return f"{self.count} in {self.window}{self.window_unit}"


@dataclass(frozen=True, slots=True)
class WeekdaySpec:
    """Due on one weekday every week ("every monday"). weekday: Monday == 0."""

    weekday: int

    @property
    def label(self) -> str:
        return f"every {const.WEEKDAY_NAMES[self.weekday]}"


@dataclass(frozen=True, slots=True)
class YearlyMonthSpec:
    """Due once in the named month each year ("every march")."""

    month: int

    @property
    def label(self) -> str:
        return f"every {const.MONTH_NAMES[self.month - 1]}"


@dataclass(frozen=True, slots=True)
class MonthlyDateSpec:
    """Due on a day of every month ("13th"), clamped in short months."""

    day_of_month: int

    @property
    def label(self) -> str:
        return f"{self.day_of_month}{ordinal_suffix(self.day_of_month)}"


@dataclass(frozen=True, slots=True)
class YearlyDateSpec:
    """Due on a month/day every year ("march 13th")."""

    month: int
    day_of_month: int

    @property
    def label(self) -> str:
        month_name = const.MONTH_NAMES[self.month - 1]
        return f"{month_name} {self.day_of_month}{ordinal_suffix(self.day_of_month)}"


@dataclass(frozen=True, slots=True)
class HashDependencySpec:
    """Due after `required_count` completions of another habit ("after 7 a3f7")."""

    target_hash: str
    required_count: int

    @property
    def label(self) -> str:
        return f"after {self.required_count} {self.target_hash}"


@dataclass(frozen=True, slots=True)
class TagDependencySpec:
    """Due after `required_count` entries containing a tag ("every 3 @run")."""

    tag: str
    required_count: int

    @property
    def label(self) -> str:
        return f"every {self.required_count} {self.tag}"


@dataclass(frozen=True, slots=True)
class CompositeSpec:
    """OR-combination of several specifications ("every monday, every friday")."""

    specs: tuple[HabitSpec, ...]

    @property
    def label(self) -> str:
        return f"{const.COMPOSITE_SEPARATOR} ".join(spec.label for spec in self.specs)


@dataclass(frozen=True, slots=True)
class DiscontinuedSpec:
    """Sentinel for a bare "@habit" marker: the habit is no longer active."""

    @property
    def label(self) -> str:
        return ""


HabitSpec: TypeAlias = (
    IntervalSpec
    | FrequencySpec
    | SlidingWindowSpec
    | WeekdaySpec
    | YearlyMonthSpec
    | MonthlyDateSpec
    | YearlyDateSpec
    | HashDependencySpec
    | TagDependencySpec
    | CompositeSpec
    | DiscontinuedSpec
)

DependencySpec: TypeAlias = HashDependencySpec | TagDependencySpec


# =============================================================================
# NON-HABIT PARSE OUTCOMES
# =============================================================================


@dataclass(frozen=True, slots=True)
class NotAHabit:
    """The entry carries no habit marker; it is ordinary log text."""


@dataclass(frozen=True, slots=True)
class Unparseable:
    """The marker is present but the body matches no known grammar."""

    raw: str


ParseResult: TypeAlias = HabitSpec | NotAHabit | Unparseable

NOT_A_HABIT = NotAHabit()
DISCONTINUED = DiscontinuedSpec()


def to_annotation(spec: HabitSpec) -> str:
    """Render the full annotation for a spec ("@habit[2d]", or "@habit" when discontinued)."""
    if isinstance(spec, DiscontinuedSpec):
        return const.HABIT_MARKER
    return f"{const.HABIT_MARKER}[{spec.label}]"


def is_habit_spec(result: ParseResult) -> bool:
    """Return True when a parse result is a usable specification (Discontinued included)."""
    return not isinstance(result, (NotAHabit, Unparseable))
