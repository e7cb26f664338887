"""Engine modules for habitlog.

Contains the pure computation engines:
- parser_engine: @habit annotation parsing into HabitSpec values
- schedule_engine: Per-day due/completed/required/covered predicates
- stream_engine: Grouping of log entries into per-habit streams
- dependency_engine: Occurrence scanning for hash and tag dependencies
- statistics_engine: Strength scoring and next-due lookups
"""

# Use relative imports within package to avoid mypy module resolution issues
from .dependency_engine import DependencyBindings, DependencyEngine, DependencyTarget
from .parser_engine import SpecParser
from .schedule_engine import ScheduleEngine
from .statistics_engine import StatisticsEngine
from .stream_engine import HabitStream, StreamEngine

__all__ = [
    "DependencyBindings",
    "DependencyEngine",
    "DependencyTarget",
    "HabitStream",
    "ScheduleEngine",
    "SpecParser",
    "StatisticsEngine",
    "StreamEngine",
]
