"""Dependency Engine - Resolves tag and hash dependencies against the full log.

"every 3 @run" and "after 7 a3f7" habits become due based on what happens
elsewhere in the log, not in their own history. Resolution batches by
target: the distinct targets of all dependent streams are collected first,
then one pass over the log builds a sorted timestamp list per target. The
cost is O(total entries) no matter how many habits share a target.

The result is a DependencyBindings side table keyed by DependencyTarget.
Specs stay pure values; evaluators receive the table next to the habit spec.

Matching rules:
- Tag: any whitespace token of the entry, with every habit annotation
  removed, that equals or starts with the tag (case-insensitive).
- Hash: any entry whose own content hash equals the target.

A target that never occurs resolves to an empty list, so the dependent
habit is never due. That is not an error.

ARCHITECTURE: Pure logic engine. All methods are static.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, NamedTuple, TypeAlias

from .. import const
from ..helpers.log_helpers import coerce_log_entries
from ..specs import (
    CompositeSpec,
    DependencySpec,
    HabitSpec,
    HashDependencySpec,
    TagDependencySpec,
)
from ..utils.dt_utils import count_after
from ..utils.text_utils import content_hash, tokenize

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from .stream_engine import HabitStream


class DependencyTarget(NamedTuple):
    """What a dependency spec counts: a tag or another habit's hash."""

    kind: str  # const.DEPENDENCY_KIND_TAG or const.DEPENDENCY_KIND_HASH
    value: str


DependencyBindings: TypeAlias = dict[DependencyTarget, list[datetime]]


class DependencyEngine:
    """Pure resolver for dependency specifications."""

    # =========================================================================
    # TARGETS
    # =========================================================================

    @staticmethod
    def target_of(spec: DependencySpec) -> DependencyTarget:
        """Return the binding key for a dependency spec."""
        if isinstance(spec, TagDependencySpec):
            return DependencyTarget(const.DEPENDENCY_KIND_TAG, spec.tag.lower())
        return DependencyTarget(const.DEPENDENCY_KIND_HASH, spec.target_hash.lower())

    @staticmethod
    def dependency_targets(spec: HabitSpec) -> list[DependencyTarget]:
        """Return the targets a spec depends on (composite members included)."""
        if isinstance(spec, (HashDependencySpec, TagDependencySpec)):
            return [DependencyEngine.target_of(spec)]
        if isinstance(spec, CompositeSpec):
            targets: list[DependencyTarget] = []
            for member in spec.specs:
                for target in DependencyEngine.dependency_targets(member):
                    if target not in targets:
                        targets.append(target)
            return targets
        return []

    @staticmethod
    def collect_targets(streams: Iterable[HabitStream]) -> set[DependencyTarget]:
        """Return the distinct dependency targets across all streams."""
        targets: set[DependencyTarget] = set()
        for stream in streams:
            targets.update(DependencyEngine.dependency_targets(stream.spec))
        return targets

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    @staticmethod
    def scan_occurrences(
        targets: Iterable[DependencyTarget], log: Iterable[object]
    ) -> DependencyBindings:
        """Build the occurrence list of every target in one pass over the log.

        Returns:
            Bindings with an entry (possibly empty) for every requested target,
            each list sorted ascending.
        """
        bindings: DependencyBindings = {target: [] for target in targets}
        if not bindings:
            return bindings

        tags = [t for t in bindings if t.kind == const.DEPENDENCY_KIND_TAG]
        hashes = {t.value: t for t in bindings if t.kind == const.DEPENDENCY_KIND_HASH}

        for entry in coerce_log_entries(log):
            if tags:
                tokens = [token.lower() for token in tokenize(entry.text)]
                for target in tags:
                    if any(token.startswith(target.value) for token in tokens):
                        bindings[target].append(entry.timestamp)
            if hashes:
                matched = hashes.get(content_hash(entry.text))
                if matched is not None:
                    bindings[matched].append(entry.timestamp)

        for occurrences in bindings.values():
            occurrences.sort()
        return bindings

    @staticmethod
    def resolve_dependencies(
        streams: Sequence[HabitStream], log: Iterable[object]
    ) -> DependencyBindings:
        """Resolve every dependent stream against the log.

        Each dependent stream's `bindings` is set to the slice of the table it
        refers to. Streams without dependencies get an empty mapping.

        Returns:
            The full DependencyBindings table, shared by all streams.
        """
        targets = DependencyEngine.collect_targets(streams)
        bindings = DependencyEngine.scan_occurrences(targets, log)

        for stream in streams:
            stream.bindings = {
                target: bindings[target]
                for target in DependencyEngine.dependency_targets(stream.spec)
            }

        const.LOGGER.debug(
            "DependencyEngine: Resolved %d targets for %d streams",
            len(bindings),
            len(streams),
        )
        return bindings

    # =========================================================================
    # QUERIES
    # =========================================================================

    @staticmethod
    def occurrences_for(
        spec: DependencySpec,
        bindings: Mapping[DependencyTarget, Sequence[datetime]] | None,
    ) -> Sequence[datetime]:
        """Return the bound occurrences of a dependency spec (empty when unbound)."""
        if not bindings:
            return []
        return bindings.get(DependencyEngine.target_of(spec), [])

    @staticmethod
    def remaining_occurrences(
        spec: DependencySpec,
        completions: Sequence[datetime],
        bindings: Mapping[DependencyTarget, Sequence[datetime]] | None,
    ) -> int:
        """Return how many more occurrences are needed before the habit is due.

        Counts occurrences strictly after the habit's latest completion; the
        counter restarts with every completion. Returns 0 once due.
        """
        occurrences = DependencyEngine.occurrences_for(spec, bindings)
        last_completion = completions[-1] if completions else None
        since_last = count_after(occurrences, last_completion)
        return max(0, spec.required_count - since_last)
