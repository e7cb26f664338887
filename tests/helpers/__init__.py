"""Test helpers for habitlog tests.

This module re-exports the helpers for convenient imports:

    from tests.helpers import ScenarioResult, at, load_scenario, make_log

See individual modules for full documentation:
- setup.py: YAML scenario loading and in-code log construction
"""

from tests.helpers.setup import ScenarioResult, at, load_scenario, make_log

__all__ = ["ScenarioResult", "at", "load_scenario", "make_log"]
