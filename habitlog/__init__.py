"""habitlog - Recurring habit schedules and compliance scoring for event logs.

Public API:
    parse_spec(text)                      -> HabitSpec | NotAHabit | Unparseable
    content_hash(text)                    -> 4-char habit identity
    build_streams(log)                    -> list[HabitStream]
    resolve_dependencies(streams, log)    -> DependencyBindings
    is_due_on_day / completed_on_day / required_on_day / is_covered_on_day
    strength(spec, completions, ...)      -> float in [0, 1]
    next_due_offset(spec, completions)    -> days, or NOT_DUE_SOON
    HabitManager(log, options)            -> query layer over a log snapshot
"""

from .const import NOT_DUE_SOON
from .engines.dependency_engine import (
    DependencyBindings,
    DependencyEngine,
    DependencyTarget,
)
from .engines.parser_engine import SpecParser
from .engines.schedule_engine import ScheduleEngine
from .engines.statistics_engine import StatisticsEngine
from .engines.stream_engine import HabitStream, StreamEngine
from .helpers.log_helpers import LogEntry
from .managers.habit_manager import HabitManager
from .specs import (
    CompositeSpec,
    DiscontinuedSpec,
    FrequencySpec,
    HabitSpec,
    HashDependencySpec,
    IntervalSpec,
    MonthlyDateSpec,
    NotAHabit,
    ParseResult,
    SlidingWindowSpec,
    TagDependencySpec,
    Unparseable,
    WeekdaySpec,
    YearlyDateSpec,
    YearlyMonthSpec,
    to_annotation,
)
from .utils.text_utils import content_hash

_statistics = StatisticsEngine()

parse_spec = SpecParser.parse_spec
build_streams = StreamEngine.build_streams
resolve_dependencies = DependencyEngine.resolve_dependencies
is_due_on_day = ScheduleEngine.is_due_on_day
completed_on_day = ScheduleEngine.completed_on_day
required_on_day = ScheduleEngine.required_on_day
is_covered_on_day = ScheduleEngine.is_covered_on_day
strength = _statistics.strength
next_due_offset = _statistics.next_due_offset

__all__ = [
    "NOT_DUE_SOON",
    "CompositeSpec",
    "DependencyBindings",
    "DependencyEngine",
    "DependencyTarget",
    "DiscontinuedSpec",
    "FrequencySpec",
    "HabitManager",
    "HabitSpec",
    "HabitStream",
    "HashDependencySpec",
    "IntervalSpec",
    "LogEntry",
    "MonthlyDateSpec",
    "NotAHabit",
    "ParseResult",
    "ScheduleEngine",
    "SlidingWindowSpec",
    "SpecParser",
    "StatisticsEngine",
    "StreamEngine",
    "TagDependencySpec",
    "Unparseable",
    "WeekdaySpec",
    "YearlyDateSpec",
    "YearlyMonthSpec",
    "build_streams",
    "completed_on_day",
    "content_hash",
    "is_covered_on_day",
    "is_due_on_day",
    "next_due_offset",
    "parse_spec",
    "required_on_day",
    "resolve_dependencies",
    "strength",
    "to_annotation",
]
