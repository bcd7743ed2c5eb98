"""Ordinal match scoring and item ranking for dropdown search."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence


class MatchScore(IntEnum):
    """How well a text matches a probe, strongest first. An ordering key, not a distance."""

    EQUAL = 4
    EQUAL_CASE_INSENSITIVE = 3
    PARTIAL_MATCH = 2
    PARTIAL_MATCH_CASE_INSENSITIVE = 1
    NO_MATCH = 0


@dataclass(frozen=True)
class Item:
    """A selectable entry: id is the identity, name is what gets matched and shown."""

    id: str
    name: str


def escape_probe(probe: str) -> str:
    """Double the first literal '//' in probe. No other characters are escaped."""
    return probe.replace("//", "////", 1)


def score_match(text: str, probe: str) -> MatchScore:
    """
    Score text against probe on the MatchScore scale.

    Exact match beats case-insensitive match, which beats substring containment,
    which beats case-insensitive containment. A text shorter than the probe never
    matches. Containment is plain substring search; the probe is never treated
    as a pattern.
    """
    if len(text) < len(probe):
        return MatchScore.NO_MATCH
    if text == probe:
        return MatchScore.EQUAL
    lowered = text.lower()
    if lowered == probe.lower():
        return MatchScore.EQUAL_CASE_INSENSITIVE
    escaped = escape_probe(probe)
    if escaped in text:
        return MatchScore.PARTIAL_MATCH
    if escaped.lower() in lowered:
        return MatchScore.PARTIAL_MATCH_CASE_INSENSITIVE
    return MatchScore.NO_MATCH


def rank_scored(items: Sequence[Item], probe: str) -> list[tuple[Item, MatchScore]]:
    """Return (item, score) pairs that match, best first; ties keep input order."""
    scored = [(item, score_match(item.name, probe)) for item in items]
    matched = [pair for pair in scored if pair[1] > MatchScore.NO_MATCH]
    # sorted() is stable, so equal scores stay in input order
    return sorted(matched, key=lambda pair: pair[1], reverse=True)


def rank_items(items: Sequence[Item], probe: str) -> list[Item]:
    """Drop items whose name does not match probe and order the rest by score."""
    return [item for item, _ in rank_scored(items, probe)]
