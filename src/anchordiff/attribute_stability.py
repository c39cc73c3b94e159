from __future__ import annotations

import logging
from typing import Iterable

from .models import AttributeStabilityRecord
from .tree import TreeModel

logger = logging.getLogger("anchordiff.core")


def collect_attribute_values(tree: TreeModel, attribute: str) -> dict[str, None]:
    """Distinct values of ``attribute`` in document order (dict used as an ordered set)."""
    values: dict[str, None] = {}
    for element in tree.elements_with_attribute(attribute):
        raw = element.get(attribute)
        values.setdefault("" if raw is None else str(raw), None)
    return values


def attribute_stability(before: TreeModel, after: TreeModel, attribute: str) -> AttributeStabilityRecord:
    before_values = collect_attribute_values(before, attribute)
    after_values = collect_attribute_values(after, attribute)
    common = tuple(value for value in before_values if value in after_values)

    before_count = len(before_values)
    score = (len(common) / before_count) * 100.0 if before_count else 0.0
    return AttributeStabilityRecord(
        attribute_name=attribute,
        before_count=before_count,
        after_count=len(after_values),
        common_count=len(common),
        stability_score_percent=score,
        stable_values=common,
    )


def analyze_attribute_stability(
    before: TreeModel,
    after: TreeModel,
    attributes: Iterable[str],
) -> dict[str, AttributeStabilityRecord]:
    records: dict[str, AttributeStabilityRecord] = {}
    for attribute in attributes:
        record = attribute_stability(before, after, attribute)
        logger.debug(
            "Attribute %s: %d before, %d after, %d common (%.2f%%)",
            attribute,
            record.before_count,
            record.after_count,
            record.common_count,
            record.stability_score_percent,
        )
        records[attribute] = record
    return records
