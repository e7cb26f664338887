"""Log record helpers.

The event log is owned by an external store. The engine only needs each
record's text and local timestamp, so anything exposing those (objects,
mappings or `(text, timestamp)` pairs) is coerced into an immutable
`LogEntry` before processing. Records that cannot be read are skipped with a
warning; they never abort a query pass.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .. import const
from ..utils.dt_utils import dt_parse


@dataclass(frozen=True, slots=True)
class LogEntry:
    """One immutable record of the event log.

    `source` holds the external record the entry was coerced from, so
    look-ups can hand the store back its own object.
    """

    text: str
    timestamp: datetime
    source: Any = field(default=None, compare=False, repr=False)

    @property
    def record(self) -> Any:
        """Return the external record behind this entry."""
        return self if self.source is None else self.source


def coerce_log_entry(record: Any) -> LogEntry | None:
    """Coerce a single external record into a LogEntry.

    Accepts LogEntry, a mapping with "text"/"timestamp" keys, any object with
    `text` and `timestamp` attributes (named tuples included), or a
    `(text, timestamp)` pair. Timestamps may be datetimes, dates or ISO
    strings; aware datetimes keep their wall-clock time with tzinfo dropped.

    Returns:
        LogEntry, or None when text or timestamp is missing or unreadable.
    """
    if isinstance(record, LogEntry):
        stamp = record.timestamp
        if isinstance(stamp, datetime) and stamp.tzinfo is None:
            return record
        text = record.text
        raw_timestamp = stamp
        record = record.record
    elif isinstance(record, Mapping):
        text = record.get(const.LOG_FIELD_TEXT)
        raw_timestamp = record.get(const.LOG_FIELD_TIMESTAMP)
    elif hasattr(record, const.LOG_FIELD_TEXT) and hasattr(
        record, const.LOG_FIELD_TIMESTAMP
    ):
        text = getattr(record, const.LOG_FIELD_TEXT)
        raw_timestamp = getattr(record, const.LOG_FIELD_TIMESTAMP)
    elif isinstance(record, tuple) and len(record) == 2:
        text, raw_timestamp = record
    else:
        return None

    if not isinstance(text, str):
        return None

    timestamp = dt_parse(raw_timestamp)
    if timestamp is None:
        return None

    return LogEntry(text=text, timestamp=timestamp, source=record)


def coerce_log_entries(records: Iterable[Any]) -> list[LogEntry]:
    """Coerce external records into LogEntry values, preserving order.

    Unreadable records are dropped and logged at WARNING level.
    """
    entries: list[LogEntry] = []
    for record in records:
        entry = coerce_log_entry(record)
        if entry is None:
            const.LOGGER.warning("Skipping unreadable log record: %r", record)
            continue
        entries.append(entry)
    return entries


def sort_chronologically(entries: Iterable[LogEntry]) -> list[LogEntry]:
    """Return entries oldest to newest; ties keep their log order."""
    return sorted(entries, key=lambda entry: entry.timestamp)
