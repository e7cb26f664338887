"""Tests for dt_utils calendar arithmetic."""

from __future__ import annotations

from datetime import UTC, date, datetime

from freezegun import freeze_time
import pytest

from habitlog.utils.dt_utils import (
    add_interval,
    as_day,
    clamp_day_of_month,
    completions_up_to_day,
    count_after,
    count_between,
    count_on_day,
    dt_parse,
    dt_today_local,
    iter_days,
    month_start,
    week_start,
)


# =============================================================================
# Normalization
# =============================================================================


class TestNormalization:
    """Tests for dt_parse / as_day / dt_today_local."""

    def test_parse_iso_string(self) -> None:
        assert dt_parse("2025-03-10 09:30") == datetime(2025, 3, 10, 9, 30)
        assert dt_parse("2025-03-10T09:30:00") == datetime(2025, 3, 10, 9, 30)

    def test_parse_date_is_midnight(self) -> None:
        assert dt_parse(date(2025, 3, 10)) == datetime(2025, 3, 10)

    def test_parse_aware_keeps_wall_clock(self) -> None:
        """Timezone is dropped, not converted."""
        assert dt_parse(datetime(2025, 3, 10, 23, 0, tzinfo=UTC)) == datetime(2025, 3, 10, 23, 0)

    @pytest.mark.parametrize("value", [None, "", "yesterday", 42])
    def test_parse_invalid(self, value: object) -> None:
        assert dt_parse(value) is None  # type: ignore[arg-type]

    def test_as_day(self) -> None:
        assert as_day(datetime(2025, 3, 10, 23, 59)) == date(2025, 3, 10)
        assert as_day(date(2025, 3, 10)) == date(2025, 3, 10)

    @freeze_time("2025-03-10 12:00:00")
    def test_today(self) -> None:
        assert dt_today_local() == date(2025, 3, 10)


# =============================================================================
# Calendar Arithmetic
# =============================================================================


class TestAddInterval:
    """Tests for add_interval including month-end clamping."""

    def test_days_and_weeks(self) -> None:
        assert add_interval(date(2025, 2, 27), 2, "d") == date(2025, 3, 1)
        assert add_interval(date(2025, 3, 1), 2, "w") == date(2025, 3, 15)

    def test_month_end_clamps(self) -> None:
        """Jan 31 + 1 month lands on the last day of February."""
        assert add_interval(date(2025, 1, 31), 1, "m") == date(2025, 2, 28)
        assert add_interval(date(2024, 1, 31), 1, "m") == date(2024, 2, 29)

    def test_leap_day_plus_year(self) -> None:
        assert add_interval(date(2024, 2, 29), 1, "y") == date(2025, 2, 28)

    def test_year_boundary(self) -> None:
        assert add_interval(date(2025, 12, 31), 1, "d") == date(2026, 1, 1)

    def test_unknown_unit(self) -> None:
        with pytest.raises(ValueError):
            add_interval(date(2025, 1, 1), 1, "h")

    def test_period_starts(self) -> None:
        """Weeks start on Monday."""
        assert week_start(date(2025, 3, 9)) == date(2025, 3, 3)
        assert week_start(date(2025, 3, 10)) == date(2025, 3, 10)
        assert month_start(date(2025, 3, 31)) == date(2025, 3, 1)

    def test_clamp_day_of_month(self) -> None:
        assert clamp_day_of_month(2025, 4, 31) == 30
        assert clamp_day_of_month(2025, 2, 30) == 28
        assert clamp_day_of_month(2024, 2, 30) == 29
        assert clamp_day_of_month(2025, 3, 15) == 15

    def test_iter_days_inclusive(self) -> None:
        assert list(iter_days(date(2025, 2, 27), date(2025, 3, 1))) == [
            date(2025, 2, 27),
            date(2025, 2, 28),
            date(2025, 3, 1),
        ]
        assert list(iter_days(date(2025, 3, 2), date(2025, 3, 1))) == []


# =============================================================================
# Timestamp List Queries
# =============================================================================


class TestTimestampQueries:
    """Tests for prefix and counting helpers on sorted timestamp lists."""

    completions = [
        datetime(2025, 3, 1, 8, 0),
        datetime(2025, 3, 1, 20, 0),
        datetime(2025, 3, 3, 0, 0),
        datetime(2025, 3, 5, 23, 59, 59),
    ]

    def test_prefix_includes_whole_day(self) -> None:
        """Late-evening completions belong to their calendar day."""
        assert completions_up_to_day(self.completions, date(2025, 3, 1)) == self.completions[:2]
        assert completions_up_to_day(self.completions, date(2025, 3, 5)) == self.completions
        assert completions_up_to_day(self.completions, date(2025, 2, 28)) == []

    def test_counts(self) -> None:
        assert count_on_day(self.completions, date(2025, 3, 1)) == 2
        assert count_on_day(self.completions, date(2025, 3, 2)) == 0
        assert count_between(self.completions, date(2025, 3, 2), date(2025, 3, 5)) == 2
        assert count_between(self.completions, date(2025, 3, 5), date(2025, 3, 2)) == 0

    def test_count_after_is_strict(self) -> None:
        assert count_after(self.completions, None) == 4
        assert count_after(self.completions, datetime(2025, 3, 1, 20, 0)) == 2
        assert count_after(self.completions, datetime(2025, 3, 6)) == 0
