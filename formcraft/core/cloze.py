"""
Cloze passage parser.

A cloze passage is plain text with blank markers ("___"). Splitting on the
marker gives k literal segments and k-1 blank slots; slot i is answered
under the key "blank-{i}".

    >>> [tuple(s) for s in parse_cloze("The ___ jumps")]
    [('The ', 0), (' jumps', None)]
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import NamedTuple

BLANK_MARKER = "___"
BLANK_KEY_PREFIX = "blank-"

_BLANK_KEY_RE = re.compile(rf"^{BLANK_KEY_PREFIX}(\d+)$")


class ClozeSegment(NamedTuple):
    """Literal text followed by a blank slot (None after the last literal)."""

    literal_before: str
    slot_index: int | None


@dataclass(frozen=True)
class ClozePassage:
    """
    Lazily parsed view of a passage.

    Iterating walks the passage from the start every time, so the same
    object can be iterated repeatedly and always reflects ``passage``.
    """

    passage: str

    def __iter__(self) -> Iterator[ClozeSegment]:
        text = self.passage or ""
        start = 0
        slot = 0
        while True:
            pos = text.find(BLANK_MARKER, start)
            if pos < 0:
                yield ClozeSegment(text[start:], None)
                return
            yield ClozeSegment(text[start:pos], slot)
            slot += 1
            start = pos + len(BLANK_MARKER)

    @property
    def slot_count(self) -> int:
        return count_blanks(self.passage)

    def slot_keys(self) -> list[str]:
        return [blank_key(i) for i in range(self.slot_count)]


def parse_cloze(passage: str | None) -> ClozePassage:
    """Parse a passage into literal segments and blank slots."""
    return ClozePassage(passage or "")


def count_blanks(passage: str | None) -> int:
    """Number of blank markers in the passage."""
    return (passage or "").count(BLANK_MARKER)


def blank_key(index: int) -> str:
    """Answer key for the blank slot at ``index``."""
    return f"{BLANK_KEY_PREFIX}{index}"


def slot_index(key: str) -> int | None:
    """Inverse of blank_key(); None for keys that are not blank keys."""
    match = _BLANK_KEY_RE.match(str(key))
    return int(match.group(1)) if match else None


def fill_passage(passage: str | None, answers: Mapping[str, str], missing: str = "") -> str:
    """Replace each blank marker, in order, with the respondent's text."""
    parts: list[str] = []
    for segment in parse_cloze(passage):
        parts.append(segment.literal_before)
        if segment.slot_index is not None:
            value = answers.get(blank_key(segment.slot_index))
            parts.append(missing if value is None else str(value))
    return "".join(parts)
