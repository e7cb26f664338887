"""Manager modules for habitlog.

Managers hold a log snapshot and coordinate between engines.
Engines stay pure; anything that remembers state lives here.
"""

from .habit_manager import HabitManager

__all__ = ["HabitManager"]
