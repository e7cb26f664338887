"""Parser Engine - Annotation grammar for habit specifications.

Turns the `@habit[...]` annotation of a log entry into a typed HabitSpec.
The log is free text that predates the habit feature, so parsing never
raises: entries without the marker are `NotAHabit`, entries whose body does
not match the grammar are `Unparseable` and are silently left out of habit
processing (the annotation text stays visible in the entry).

Grammar (body is lower-cased and whitespace-collapsed first):
    Nd | Nw | Nm | Ny                 Interval
    N/d | N/w | N/m                   Frequency
    N in Kd | N in Kw                 Sliding window
    every <weekday>                   Weekday
    every <month>                     Yearly month
    <day>th                           Monthly date (st/nd/rd/th accepted)
    <month> <day>th                   Yearly date
    after N <hash>                    Hash dependency
    every N <tag>                     Tag dependency
    a, b, ...                         Composite (OR of the parts)
    (empty / no brackets)             Discontinued

ARCHITECTURE: Pure logic engine. All methods are static.
"""

from __future__ import annotations

import re

from .. import const
from ..specs import (
    DISCONTINUED,
    NOT_A_HABIT,
    CompositeSpec,
    FrequencySpec,
    HabitSpec,
    HashDependencySpec,
    IntervalSpec,
    MonthlyDateSpec,
    ParseResult,
    SlidingWindowSpec,
    TagDependencySpec,
    Unparseable,
    WeekdaySpec,
    YearlyDateSpec,
    YearlyMonthSpec,
)
from ..utils.text_utils import is_tag_token

_WHITESPACE = re.compile(r"\s+")


def _lookup_name(name: str, names: tuple[str, ...]) -> int | None:
    """Return the index of a full or 3-letter abbreviated calendar name."""
    if name in names:
        return names.index(name)
    if len(name) == const.ABBREVIATION_LENGTH:
        for index, full_name in enumerate(names):
            if full_name.startswith(name):
                return index
    return None


class SpecParser:
    """Pure parser for habit annotation bodies."""

    @staticmethod
    def is_habit_entry(text: str) -> bool:
        """Return True when text contains the habit marker."""
        return const.HABIT_ANNOTATION_PATTERN.search(text) is not None

    @staticmethod
    def find_annotation(text: str) -> re.Match[str] | None:
        """Locate the first habit annotation in text.

        Group 1 of the match is the raw bracket contents (None when the marker
        has no brackets), group 2 the closing bracket (None when unclosed).
        """
        return const.HABIT_ANNOTATION_PATTERN.search(text)

    @staticmethod
    def parse_spec(text: str) -> ParseResult:
        """Parse the habit annotation of a log entry.

        Args:
            text: Full entry text.

        Returns:
            NotAHabit when there is no marker, DiscontinuedSpec for an empty
            or missing body, Unparseable for an unknown or unclosed body, else
            the parsed HabitSpec.
        """
        match = SpecParser.find_annotation(text)
        if match is None:
            return NOT_A_HABIT
        body, closing = match.group(1), match.group(2)
        if body is not None and closing is None:
            const.LOGGER.debug("SpecParser: Unclosed habit annotation %r", body)
            return Unparseable(raw=body)
        if body is None or not body.strip():
            return DISCONTINUED

        spec = SpecParser.parse_body(body)
        if spec is None:
            const.LOGGER.debug("SpecParser: Unparseable habit annotation %r", body)
            return Unparseable(raw=body)
        return spec

    @staticmethod
    def parse_body(body: str) -> HabitSpec | None:
        """Parse a non-empty annotation body, returning None when it matches no grammar."""
        normalized = _WHITESPACE.sub(" ", body.strip().lower())
        if not normalized:
            return None

        if const.COMPOSITE_SEPARATOR in normalized:
            parts = [part.strip() for part in normalized.split(const.COMPOSITE_SEPARATOR)]
            if any(not part for part in parts):
                return None
            members: list[HabitSpec] = []
            for part in parts:
                member = SpecParser._parse_single(part)
                if member is None:
                    return None
                members.append(member)
            return CompositeSpec(specs=tuple(members))

        return SpecParser._parse_single(normalized)

    # =========================================================================
    # Private: single-form parsing
    # =========================================================================

    @staticmethod
    def _parse_single(body: str) -> HabitSpec | None:
        """Match one normalized form against each grammar family in turn."""
        if match := const.PATTERN_INTERVAL.match(body):
            interval = int(match.group(1))
            if interval < 1:
                return None
            return IntervalSpec(interval=interval, unit=match.group(2))

        if match := const.PATTERN_FREQUENCY.match(body):
            count = int(match.group(1))
            if count < 1:
                return None
            return FrequencySpec(count=count, period_unit=match.group(2))

        if match := const.PATTERN_SLIDING_WINDOW.match(body):
            count = int(match.group(1))
            window = int(match.group(2))
            if count < 1 or window < 1:
                return None
            return SlidingWindowSpec(count=count, window=window, window_unit=match.group(3))

        if match := const.PATTERN_EVERY_NAME.match(body):
            name = match.group(1)
            weekday = _lookup_name(name, const.WEEKDAY_NAMES)
            if weekday is not None:
                return WeekdaySpec(weekday=weekday)
            month = _lookup_name(name, const.MONTH_NAMES)
            if month is not None:
                return YearlyMonthSpec(month=month + 1)
            return None

        if match := const.PATTERN_MONTHLY_DATE.match(body):
            day_of_month = int(match.group(1))
            if not 1 <= day_of_month <= const.MAX_DAY_OF_MONTH:
                return None
            return MonthlyDateSpec(day_of_month=day_of_month)

        if match := const.PATTERN_YEARLY_DATE.match(body):
            month = _lookup_name(match.group(1), const.MONTH_NAMES)
            day_of_month = int(match.group(2))
            if month is None or not 1 <= day_of_month <= const.MAX_DAY_OF_MONTH:
                return None
            return YearlyDateSpec(month=month + 1, day_of_month=day_of_month)

        if match := const.PATTERN_HASH_DEPENDENCY.match(body):
            required_count = int(match.group(1))
            if required_count < 1:
                return None
            return HashDependencySpec(
                target_hash=match.group(2), required_count=required_count
            )

        if match := const.PATTERN_TAG_DEPENDENCY.match(body):
            required_count = int(match.group(1))
            tag = match.group(2)
            if required_count < 1 or len(tag) < 2 or not is_tag_token(tag):
                return None
            return TagDependencySpec(tag=tag, required_count=required_count)

        return None
