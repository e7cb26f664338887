"""Type definitions for habitlog data structures.

TypedDict is used for the fixed-shape dictionaries the query layer returns
(reports, summaries, options). Value types with behavior (specs, streams, log
entries) are dataclasses in their own modules.

IMPORTANT: This file must NOT import from engines/, managers/ or helpers/ to
avoid circular dependencies. Only import from typing and the standard library.

NOTE: TypedDict is STATIC ANALYSIS ONLY and does not validate at runtime.
Runtime validation of options happens in helpers/options_helpers.py.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

HabitHash = str  # 4-char lowercase hex identity, e.g. "a3f7"


# =============================================================================
# Query Options
# =============================================================================


class HabitQueryOptions(TypedDict):
    """Validated options for the query layer (see HABIT_OPTIONS_SCHEMA)."""

    filter_due_only: bool
    sort_by: str  # const.SORT_BY_*
    strength_windows: dict[str, int]  # label -> window days (0 = all time)
    grid_days: int


# =============================================================================
# Report Structures
# =============================================================================


class StrengthEntry(TypedDict):
    """Strength for one evaluation window."""

    window_days: int
    strength: float
    percent: int
    level: str  # const.STRENGTH_LEVEL_*


class CompletionSummary(TypedDict):
    """Headline numbers of a habit's completion history."""

    total: int
    first: datetime | None
    last: datetime | None


class UpcomingHabit(TypedDict):
    """A calendar-anchored habit and the next day it becomes due."""

    habit_hash: HabitHash
    name: str
    label: str
    due_date: date


class DayCell(TypedDict):
    """One cell of the recent-days habit grid."""

    day: date
    status: str  # const.DAY_STATUS_*
    completed: int
