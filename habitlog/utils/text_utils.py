# File: utils/text_utils.py
"""Text utilities for habitlog: annotation stripping and content identity.

A habit's identity is a short hash of its "core" text, the entry text with
every `@habit` annotation removed. Two entries with the same core text are
completions of the same habit no matter what schedule they carry.

Functions:
    - strip_annotations: Remove all @habit / @habit[...] substrings
    - extract_core_text: Core text used as display name and hash input
    - content_hash: Short, stable hex identity of the core text
    - tokenize: Whitespace tokens of the core text
    - is_tag_token: Whether a token starts with a tag leader
    - extract_first_tag: First "#tag" in a string
"""

from __future__ import annotations

import hashlib
import re

from .. import const

_WHITESPACE = re.compile(r"\s+")


def strip_annotations(text: str) -> str:
    """Remove every habit annotation from text and collapse whitespace.

    Examples:
        strip_annotations("retinol @habit[2d] #health") → "retinol #health"
        strip_annotations("@HABIT[every monday] call mom") → "call mom"
    """
    stripped = const.HABIT_ANNOTATION_PATTERN.sub(" ", text)
    return _WHITESPACE.sub(" ", stripped).strip()


def extract_core_text(text: str) -> str:
    """Return the core text of an entry (annotation removed)."""
    return strip_annotations(text)


def content_hash(text: str) -> str:
    """Return the identity hash for an entry's core text.

    The hash is the first `const.HASH_LENGTH` hex characters of a SHA-256
    digest of the annotation-stripped text. It only needs to be stable and
    well spread for personal log sizes.

    Examples:
        content_hash("retinol @habit[1d]") == content_hash("retinol @habit[3/w]")
    """
    core = extract_core_text(text)
    return hashlib.sha256(core.encode("utf-8")).hexdigest()[: const.HASH_LENGTH]


def tokenize(text: str) -> list[str]:
    """Split the annotation-stripped text into whitespace-delimited tokens."""
    core = strip_annotations(text)
    return core.split(" ") if core else []


def is_tag_token(token: str) -> bool:
    """Return True when token starts with one of the tag leader characters."""
    return bool(token) and token[0] in const.TAG_LEADERS


def extract_first_tag(display_name: str) -> str | None:
    """Return the first "#tag" found in a display name, or None.

    Examples:
        extract_first_tag("take #vitamins daily") → "#vitamins"
        extract_first_tag("retinol") → None
    """
    match = const.PATTERN_FIRST_TAG.search(display_name)
    return match.group(0) if match else None
