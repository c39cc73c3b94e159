from __future__ import annotations

import logging
from typing import Callable

from .anchor_recommendation import recommend_anchors
from .attribute_stability import analyze_attribute_stability
from .catalog import AnalyzerConfig
from .landmarks import detect_landmark_changes
from .models import AnalysisResult
from .tree import TreeModel, parse

logger = logging.getLogger("anchordiff.core")

ProgressCallback = Callable[[str], None]


def compare_snapshots(
    before_markup: str | bytes | None,
    after_markup: str | bytes | None,
    config: AnalyzerConfig | None = None,
    on_progress: ProgressCallback | None = None,
) -> AnalysisResult:
    """Compare two markup snapshots and report identifier stability.

    Raises ``ParseError`` when either snapshot cannot be tokenized. Every other
    per-selector or per-element problem degrades to a no-match outcome.
    """
    report = on_progress or (lambda _message: None)

    report("Parsing snapshots...")
    before = parse(before_markup)
    after = parse(after_markup)
    logger.info(
        "Parsed snapshots: %d element(s) before, %d element(s) after.",
        before.element_count,
        after.element_count,
    )
    return compare_trees(before, after, config, report)


def compare_trees(
    before: TreeModel,
    after: TreeModel,
    config: AnalyzerConfig | None = None,
    on_progress: ProgressCallback | None = None,
) -> AnalysisResult:
    settings = config or AnalyzerConfig()
    report = on_progress or (lambda _message: None)

    report("Analyzing attribute stability...")
    stable_attributes = analyze_attribute_stability(before, after, settings.attributes)

    report("Detecting landmark changes...")
    changed_selectors = detect_landmark_changes(before, after, settings.landmarks)

    report("Ranking anchor candidates...")
    recommended_anchors = recommend_anchors(
        before,
        after,
        settings.features,
        settings.reliability_threshold,
    )

    result = AnalysisResult(
        stable_attributes=stable_attributes,
        changed_selectors=changed_selectors,
        recommended_anchors=recommended_anchors,
    )
    logger.info(
        "Analysis complete: %d changed landmark(s), %d reliable anchor(s).",
        len(result.changed_selectors),
        len(result.reliable_anchors),
    )
    return result
