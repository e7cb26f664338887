"""Stream Engine - Groups log entries into per-habit completion histories.

A habit stream is every entry sharing one content hash, oldest to newest.
The chronologically last entry decides the stream's current specification
(rescheduling is just logging the habit again with a new annotation), its
display name and the raw text reused when a new completion is recorded.
Completions logged before a respec still count toward the history; only
future due/required computation follows the new spec.

Streams whose latest spec is Discontinued are excluded from active listings
but can be built on request so their history stays available for look-ups.

Streams are rebuilt from the full log on every pass. Nothing is persisted.

ARCHITECTURE: Pure logic engine. All methods are static.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from .. import const
from ..helpers.log_helpers import coerce_log_entries, sort_chronologically
from ..specs import DiscontinuedSpec, HabitSpec, NotAHabit, Unparseable
from ..utils.dt_utils import as_day
from ..utils.text_utils import content_hash, extract_core_text
from .parser_engine import SpecParser

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import date

    from ..helpers.log_helpers import LogEntry
    from ..type_defs import HabitHash
    from .dependency_engine import DependencyBindings


@dataclass
class HabitStream:
    """Completion history and current schedule of one habit identity.

    Attributes:
        habit_hash: Content hash shared by every entry of the habit
        display_name: Core text (annotation stripped) of the latest entry
        spec: Specification parsed from the latest entry
        completions: All completion timestamps, ascending
        raw_text: Full text of the latest entry, reused for new completions
        bindings: Dependency occurrences this stream's spec refers to
                  (filled in by DependencyEngine.resolve_dependencies)
    """

    habit_hash: HabitHash
    display_name: str
    spec: HabitSpec
    completions: list[datetime] = field(default_factory=list)
    raw_text: str = ""
    bindings: DependencyBindings = field(default_factory=dict)

    @property
    def is_discontinued(self) -> bool:
        """Return True when the latest annotation ended the habit."""
        return isinstance(self.spec, DiscontinuedSpec)


class StreamEngine:
    """Pure builder for habit streams."""

    @staticmethod
    def build_streams(
        log: Iterable[object], include_discontinued: bool = False
    ) -> list[HabitStream]:
        """Group the full log into habit streams.

        Args:
            log: Log records (anything coerce_log_entries accepts), any order.
            include_discontinued: Keep streams whose latest spec is Discontinued.

        Returns:
            Streams sorted by display name (case-insensitive), then hash.
            Building twice from the same log yields equal streams.
        """
        entries = sort_chronologically(coerce_log_entries(log))
        streams: dict[HabitHash, HabitStream] = {}
        skipped = 0

        for entry in entries:
            spec = SpecParser.parse_spec(entry.text)
            if isinstance(spec, NotAHabit):
                continue
            if isinstance(spec, Unparseable):
                skipped += 1
                continue

            habit_hash = content_hash(entry.text)
            stream = streams.get(habit_hash)
            if stream is None:
                stream = HabitStream(
                    habit_hash=habit_hash,
                    display_name=extract_core_text(entry.text),
                    spec=spec,
                )
                streams[habit_hash] = stream

            # Last write wins: the newest entry sets the current schedule
            stream.completions.append(entry.timestamp)
            stream.spec = spec
            stream.raw_text = entry.text
            stream.display_name = extract_core_text(entry.text)

        result = [
            stream
            for stream in streams.values()
            if include_discontinued or not stream.is_discontinued
        ]
        result.sort(key=lambda stream: (stream.display_name.casefold(), stream.habit_hash))

        const.LOGGER.debug(
            "StreamEngine: Built %d streams from %d entries (%d unparseable, %d discontinued)",
            len(result),
            len(entries),
            skipped,
            len(streams) - len(result),
        )
        return result

    @staticmethod
    def find_stream(
        streams: Sequence[HabitStream], habit_hash: HabitHash
    ) -> HabitStream | None:
        """Return the stream with the given hash, or None."""
        habit_hash = habit_hash.lower()
        for stream in streams:
            if stream.habit_hash == habit_hash:
                return stream
        return None

    @staticmethod
    def completion_entries(
        log: Iterable[object], habit_hash: HabitHash
    ) -> list[LogEntry]:
        """Return every valid habit entry of one identity, oldest first.

        Works for discontinued habits too, since it reads the log directly.
        """
        habit_hash = habit_hash.lower()
        matches: list[LogEntry] = []
        for entry in sort_chronologically(coerce_log_entries(log)):
            spec = SpecParser.parse_spec(entry.text)
            if isinstance(spec, (NotAHabit, Unparseable)):
                continue
            if content_hash(entry.text) == habit_hash:
                matches.append(entry)
        return matches

    @staticmethod
    def latest_entry_on_day(
        log: Iterable[object], habit_hash: HabitHash, day: date | datetime
    ) -> LogEntry | None:
        """Return the most recent entry of a habit recorded on day (undo target).

        The entry's `record` is the caller's own log record.
        """
        day = as_day(day)
        on_day = [
            entry
            for entry in StreamEngine.completion_entries(log, habit_hash)
            if as_day(entry.timestamp) == day
        ]
        return on_day[-1] if on_day else None
