from __future__ import annotations

import logging
from typing import Iterable

from bs4 import Tag

from .catalog import LandmarkDescriptor
from .models import NOT_FOUND, ChangeKind, ElementSnapshot, LandmarkChangeRecord, MatchOutcome
from .tree import (
    TreeModel,
    attributes_of,
    element_children,
    has_element_siblings,
    parent_element,
    tag_name,
    text_content,
)

logger = logging.getLogger("anchordiff.core")


def structural_path(element: Tag) -> tuple[str, ...]:
    """Root-to-element segments shaped ``tag#id`` or ``tag:nth-of-type(n)``.

    The ``:nth-of-type`` qualifier is only added when the element has element
    siblings; an id short-circuits it.
    """
    segments: list[str] = []
    current: Tag | None = element
    while current is not None:
        name = tag_name(current)
        segment = name
        element_id = current.get("id")
        if element_id:
            segment += f"#{element_id}"
        elif has_element_siblings(current):
            position = 1 + sum(
                1 for sibling in current.find_previous_siblings(True) if tag_name(sibling) == name
            )
            segment += f":nth-of-type({position})"
        segments.append(segment)
        current = parent_element(current)
    segments.reverse()
    return tuple(segments)


def capture_element_snapshot(element: Tag) -> ElementSnapshot:
    return ElementSnapshot(
        tag_name=tag_name(element),
        attributes=attributes_of(element),
        child_count=len(element_children(element)),
        text_length=len(text_content(element)),
        path=structural_path(element),
    )


def resolve_landmark(tree: TreeModel, selectors: Iterable[str]) -> MatchOutcome:
    for selector in selectors:
        element = tree.find_first(selector)
        if element is not None:
            return MatchOutcome(
                found=True,
                selector_used=selector,
                element_snapshot=capture_element_snapshot(element),
            )
    return NOT_FOUND


def classify_change(before: MatchOutcome, after: MatchOutcome) -> ChangeKind:
    if not before.found and after.found:
        return "added"
    if before.found and not after.found:
        return "removed"
    if before.found and after.found and before.selector_used != after.selector_used:
        return "changed"
    return "unchanged"


def detect_landmark_changes(
    before: TreeModel,
    after: TreeModel,
    landmarks: Iterable[LandmarkDescriptor],
) -> tuple[LandmarkChangeRecord, ...]:
    records: list[LandmarkChangeRecord] = []
    for landmark in landmarks:
        before_match = resolve_landmark(before, landmark.selectors)
        after_match = resolve_landmark(after, landmark.selectors)
        change = classify_change(before_match, after_match)
        logger.debug(
            "Landmark %s: before=%s after=%s -> %s",
            landmark.name,
            before_match.selector_used,
            after_match.selector_used,
            change,
        )
        if change == "unchanged":
            continue
        records.append(
            LandmarkChangeRecord(
                landmark_name=landmark.name,
                before_match=before_match,
                after_match=after_match,
                change_kind=change,
            )
        )
    return tuple(records)
