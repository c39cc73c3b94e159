"""Element correspondence between two snapshots.

No identifier is guaranteed to survive a release, so a counterpart is inferred
from a weighted feature score. The weights are a fixed contract:

* +2 per attribute of the before-element whose value is identical on the candidate
* +1 per attribute whose candidate value contains the before-value as a substring
* +1 when the tag names are equal
* +2 when both elements sit at the same zero-based index among element siblings

The highest total wins; ties keep the earliest candidate in pool order and an
all-zero pool yields no match. Each lookup scans the whole pool, so matching a
full before-pool against an after-pool is quadratic in element count.
"""

from __future__ import annotations

from typing import Sequence

from bs4 import Tag

from .tree import attributes_of, sibling_index, tag_name

EXACT_ATTRIBUTE_WEIGHT = 2
SUBSTRING_ATTRIBUTE_WEIGHT = 1
TAG_WEIGHT = 1
POSITION_WEIGHT = 2


def correspondence_score(
    before_attrs: dict[str, str],
    before_tag: str,
    before_position: int,
    candidate: Tag,
) -> int:
    candidate_attrs = attributes_of(candidate)
    score = 0
    for name, value in before_attrs.items():
        other = candidate_attrs.get(name)
        if other is None:
            continue
        if other == value:
            score += EXACT_ATTRIBUTE_WEIGHT
        elif value and value in other:
            score += SUBSTRING_ATTRIBUTE_WEIGHT

    if tag_name(candidate) == before_tag:
        score += TAG_WEIGHT
    if sibling_index(candidate) == before_position:
        score += POSITION_WEIGHT
    return score


def find_matching_element(before_element: Tag, pool: Sequence[Tag]) -> Tag | None:
    before_attrs = attributes_of(before_element)
    before_tag = tag_name(before_element)
    before_position = sibling_index(before_element)

    best: Tag | None = None
    best_score = 0
    for candidate in pool:
        score = correspondence_score(before_attrs, before_tag, before_position, candidate)
        if score > best_score:
            best_score = score
            best = candidate
    return best
