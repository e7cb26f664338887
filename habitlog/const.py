# File: const.py
"""Constants for the habitlog engine.

This file centralizes the annotation grammar tokens, calendar names, scan
bounds, option keys and defaults used across the engines, managers and
helpers so every module agrees on the same values.
"""

import logging
import re
from typing import Final

# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Annotation Grammar
# ------------------------------------------------------------------------------------------------
# Marker token that declares an entry to be a habit: "@habit[SPEC]" or bare "@habit"
HABIT_MARKER = "@habit"

# Marker with optional bracketed body. Group 1 is the body (None when no brackets),
# group 2 the closing bracket (None when the body runs unclosed to the end of the text).
HABIT_ANNOTATION_PATTERN: Final = re.compile(
    r"@habit(?![\w-])(?:\[([^\]]*)(\])?)?", re.IGNORECASE
)

# Separator for composite (OR-combined) specifications inside one annotation body
COMPOSITE_SEPARATOR = ","

# Characters that start a tag token ("#health", "@run", "+project", ...)
TAG_LEADERS = "!@#^&~+=\\|"

# Content hash width in hex characters
HASH_LENGTH = 4

# Interval units: "2d", "1w", "3m", "1y"
UNIT_DAY = "d"
UNIT_WEEK = "w"
UNIT_MONTH = "m"
UNIT_YEAR = "y"

DAYS_PER_WEEK = 7

# Grammar patterns (matched against the lower-cased, whitespace-collapsed body)
PATTERN_INTERVAL: Final = re.compile(r"^(\d+)\s*([dwmy])$")
PATTERN_FREQUENCY: Final = re.compile(r"^(\d+)\s*/\s*([dwm])$")
PATTERN_SLIDING_WINDOW: Final = re.compile(r"^(\d+) in (\d+)\s*([dw])$")
PATTERN_EVERY_NAME: Final = re.compile(r"^every ([a-z]+)$")
PATTERN_MONTHLY_DATE: Final = re.compile(r"^(\d{1,2})(?:st|nd|rd|th)$")
PATTERN_YEARLY_DATE: Final = re.compile(r"^([a-z]+) (\d{1,2})(?:st|nd|rd|th)$")
PATTERN_HASH_DEPENDENCY: Final = re.compile(r"^after (\d+) ([0-9a-f]+)$")
PATTERN_TAG_DEPENDENCY: Final = re.compile(r"^every (\d+) (\S+)$")

# First "#tag" inside a display name
PATTERN_FIRST_TAG: Final = re.compile(r"#\S+")

# ------------------------------------------------------------------------------------------------
# Calendar Names
# ------------------------------------------------------------------------------------------------
# Index matches date.weekday(): Monday == 0
WEEKDAY_NAMES: Final[tuple[str, ...]] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Index + 1 matches date.month
MONTH_NAMES: Final[tuple[str, ...]] = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

ABBREVIATION_LENGTH = 3

MAX_DAY_OF_MONTH = 31

# ------------------------------------------------------------------------------------------------
# Dependency Targets
# ------------------------------------------------------------------------------------------------
DEPENDENCY_KIND_TAG = "tag"
DEPENDENCY_KIND_HASH = "hash"

# ------------------------------------------------------------------------------------------------
# Next-Due Scanning
# ------------------------------------------------------------------------------------------------
# Forward scan bound (inclusive) in days
NEXT_DUE_SCAN_DAYS = 366

# Sentinel returned when nothing is due within the scan bound
NOT_DUE_SOON = 999

# ------------------------------------------------------------------------------------------------
# Strength (Compliance) Scoring
# ------------------------------------------------------------------------------------------------
# A window of 0 days means "all time" (from the first completion)
STRENGTH_WINDOW_ALL_TIME = 0

STRENGTH_WINDOW_WEEK = "week"
STRENGTH_WINDOW_MONTH = "month"
STRENGTH_WINDOW_YEAR = "year"
STRENGTH_WINDOW_ALL = "all_time"

DEFAULT_STRENGTH_WINDOWS: Final[dict[str, int]] = {
    STRENGTH_WINDOW_WEEK: 7,
    STRENGTH_WINDOW_MONTH: 30,
    STRENGTH_WINDOW_YEAR: 365,
    STRENGTH_WINDOW_ALL: STRENGTH_WINDOW_ALL_TIME,
}

# Level thresholds: value < WEAK -> weak, value < MODERATE -> moderate, else strong
STRENGTH_THRESHOLD_WEAK = 0.5
STRENGTH_THRESHOLD_MODERATE = 0.8

STRENGTH_LEVEL_WEAK = "weak"
STRENGTH_LEVEL_MODERATE = "moderate"
STRENGTH_LEVEL_STRONG = "strong"

STRENGTH_PRECISION = 4

# ------------------------------------------------------------------------------------------------
# Day Status (habit grid cells)
# ------------------------------------------------------------------------------------------------
DAY_STATUS_FUTURE = "future"
DAY_STATUS_PARTIAL = "partial"  # completions recorded but still due (e.g. 1 of 2/d)
DAY_STATUS_COMPLETED = "completed"
DAY_STATUS_COVERED = "covered"  # inside a multi-day interval window
DAY_STATUS_MISSED = "missed"
DAY_STATUS_DUE = "due"
DAY_STATUS_IDLE = "idle"

# ------------------------------------------------------------------------------------------------
# Query Options
# ------------------------------------------------------------------------------------------------
CONF_FILTER_DUE_ONLY = "filter_due_only"
CONF_SORT_BY = "sort_by"
CONF_STRENGTH_WINDOWS = "strength_windows"
CONF_GRID_DAYS = "grid_days"

SORT_BY_NAME = "name"
SORT_BY_NEXT_DUE = "next_due"
SORT_OPTIONS: Final[tuple[str, ...]] = (SORT_BY_NAME, SORT_BY_NEXT_DUE)

DEFAULT_FILTER_DUE_ONLY = False
DEFAULT_SORT_BY = SORT_BY_NAME
DEFAULT_GRID_DAYS = 5
MIN_GRID_DAYS = 1
MAX_GRID_DAYS = 31

# ------------------------------------------------------------------------------------------------
# Log Record Fields
# ------------------------------------------------------------------------------------------------
LOG_FIELD_TEXT = "text"
LOG_FIELD_TIMESTAMP = "timestamp"
