"""Query option schema and validation.

Options arrive as a plain dict from whatever hosts the engine (settings file,
UI form, API call). They are validated once with voluptuous and the result is
a fully populated HabitQueryOptions dict with defaults filled in.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import voluptuous as vol

from .. import const

if TYPE_CHECKING:
    from ..type_defs import HabitQueryOptions


# =============================================================================
# INPUT VALIDATION HELPERS
# =============================================================================


def validate_strength_windows(value: Any) -> dict[str, int]:
    """Validate a label -> window days mapping.

    Args:
        value: Mapping like {"week": 7, "all_time": 0}

    Returns:
        New dict with string labels and integer window sizes

    Raises:
        vol.Invalid: If not a mapping, empty, or a window is negative
    """
    if not isinstance(value, dict):
        raise vol.Invalid("Strength windows must be a mapping of label to days")
    if not value:
        raise vol.Invalid("At least one strength window is required")

    windows: dict[str, int] = {}
    for label, days in value.items():
        if not isinstance(label, str) or not label.strip():
            raise vol.Invalid(f"Invalid strength window label: {label!r}")
        # bool is an int subclass; reject it explicitly
        if isinstance(days, bool) or not isinstance(days, int):
            raise vol.Invalid(f"Window '{label}' must be a whole number of days")
        if days < const.STRENGTH_WINDOW_ALL_TIME:
            raise vol.Invalid(f"Window '{label}' must not be negative (0 = all time)")
        windows[label.strip()] = days
    return windows


# ----------------------------------------------------------------------------------
# QUERY OPTIONS SCHEMA
# ----------------------------------------------------------------------------------


HABIT_OPTIONS_SCHEMA = vol.Schema(
    {
        vol.Optional(
            const.CONF_FILTER_DUE_ONLY, default=const.DEFAULT_FILTER_DUE_ONLY
        ): bool,
        vol.Optional(const.CONF_SORT_BY, default=const.DEFAULT_SORT_BY): vol.In(
            const.SORT_OPTIONS
        ),
        vol.Optional(
            const.CONF_STRENGTH_WINDOWS,
            default=lambda: dict(const.DEFAULT_STRENGTH_WINDOWS),
        ): validate_strength_windows,
        vol.Optional(const.CONF_GRID_DAYS, default=const.DEFAULT_GRID_DAYS): vol.All(
            vol.Coerce(int),
            vol.Range(min=const.MIN_GRID_DAYS, max=const.MAX_GRID_DAYS),
        ),
    }
)


def validate_options(raw: dict[str, Any] | None = None) -> HabitQueryOptions:
    """Validate raw options and fill in defaults.

    Raises:
        vol.Invalid: On unknown keys or out-of-range values
            (vol.MultipleInvalid when several fields fail).
    """
    options: HabitQueryOptions = HABIT_OPTIONS_SCHEMA(raw or {})
    return options
