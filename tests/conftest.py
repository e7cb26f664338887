"""Shared fixtures for habitlog tests."""

from __future__ import annotations

import pytest

from habitlog.engines.statistics_engine import StatisticsEngine
from tests.helpers.setup import ScenarioResult, load_scenario


@pytest.fixture
def stats() -> StatisticsEngine:
    """Return a StatisticsEngine instance."""
    return StatisticsEngine()


@pytest.fixture
def habits_scenario() -> ScenarioResult:
    """Load the mixed habits scenario (today = Monday 2025-03-10)."""
    return load_scenario("tests/scenarios/scenario_habits.yaml")
