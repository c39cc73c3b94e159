from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Iterable, Sequence

from bs4 import Tag

from .catalog import DEFAULT_RELIABILITY_THRESHOLD, FeatureDescriptor
from .matching import find_matching_element
from .models import AnchorRecommendation, CandidateSelector, StrategyType
from .selector_rules import (
    attribute_selector,
    class_selector,
    class_tokens,
    first_data_attribute,
    id_selector,
    longest_class_token,
)
from .tree import (
    TreeModel,
    attributes_of,
    element_children,
    parent_element,
    tag_name,
    text_content,
)

logger = logging.getLogger("anchordiff.core")

MAX_TERM_SCORE = 5
MAX_ALTERNATIVES = 3
MAX_STABILITY_SCORE = 100

TEXT_TERM_WEIGHT = 1
ATTRIBUTE_TERM_WEIGHT = 2

PoolBuilder = Callable[[TreeModel], list[Tag]]
SelectorBuilder = Callable[[Tag], str | None]


@dataclass(frozen=True, slots=True)
class SelectorStrategy:
    strategy: StrategyType
    base_score: int
    term_weight: int
    pool: PoolBuilder
    build_selector: SelectorBuilder


def term_match_score(element: Tag, key_terms: Iterable[str]) -> int:
    text = text_content(element).lower()
    values = [value.lower() for value in attributes_of(element).values()]
    score = 0
    for term in key_terms:
        needle = term.lower()
        if not needle:
            continue
        if needle in text:
            score += TEXT_TERM_WEIGHT
        if any(needle in value for value in values):
            score += ATTRIBUTE_TERM_WEIGHT
    return min(MAX_TERM_SCORE, score)


def role_qualifier(element: Tag) -> str:
    qualifier = ""
    first_class = next(iter(class_tokens(element.get("class"))), None)
    if first_class:
        qualifier += class_selector(first_class)

    parent = parent_element(element)
    if parent is not None:
        siblings = element_children(parent)
        same_tag = [sibling for sibling in siblings if sibling.name == element.name]
        if len(siblings) > 1 and len(same_tag) > 1:
            position = next(index for index, sibling in enumerate(siblings) if sibling is element) + 1
            qualifier += f":nth-child({position})"
    return qualifier


def build_role_selector(role: str) -> SelectorBuilder:
    def _build(element: Tag) -> str:
        return f"{tag_name(element)}{attribute_selector('role', role)}{role_qualifier(element)}"

    return _build


def build_id_selector(element: Tag) -> str | None:
    value = element.get("id")
    if value:
        return id_selector(str(value))
    return _fallback_attribute_selector(element, "id")


def build_data_selector(element: Tag) -> str | None:
    found = first_data_attribute(attributes_of(element))
    if found is None:
        return None
    name, value = found
    return attribute_selector(name, value)


def build_class_selector(element: Tag) -> str | None:
    token = longest_class_token(element.get("class"))
    if token:
        return class_selector(token)
    return _fallback_attribute_selector(element, "class")


def _fallback_attribute_selector(element: Tag, attribute: str) -> str | None:
    if not element.has_attr(attribute):
        return None
    return attribute_selector(attribute, str(element.get(attribute)))


def strategies_for(feature: FeatureDescriptor) -> list[SelectorStrategy]:
    strategies: list[SelectorStrategy] = []
    if feature.role_hint:
        role_query = attribute_selector("role", feature.role_hint)
        strategies.append(
            SelectorStrategy(
                strategy="role-based",
                base_score=85,
                term_weight=5,
                pool=lambda tree: tree.find_all(role_query),
                build_selector=build_role_selector(feature.role_hint),
            )
        )
    strategies.extend(
        (
            SelectorStrategy(
                strategy="id-based",
                base_score=90,
                term_weight=3,
                pool=lambda tree: tree.elements_with_attribute("id"),
                build_selector=build_id_selector,
            ),
            SelectorStrategy(
                strategy="data-based",
                base_score=85,
                term_weight=3,
                pool=lambda tree: tree.elements_with_attribute_prefix("data-"),
                build_selector=build_data_selector,
            ),
            SelectorStrategy(
                strategy="class-based",
                base_score=75,
                term_weight=3,
                pool=lambda tree: tree.elements_with_attribute("class"),
                build_selector=build_class_selector,
            ),
        )
    )
    return strategies


def collect_candidates(
    before: TreeModel,
    after: TreeModel,
    feature: FeatureDescriptor,
) -> list[CandidateSelector]:
    candidates: list[CandidateSelector] = []
    for strategy in strategies_for(feature):
        after_pool = strategy.pool(after)
        for before_element in strategy.pool(before):
            term_score = term_match_score(before_element, feature.key_terms)
            if term_score <= 0:
                continue
            counterpart = find_matching_element(before_element, after_pool)
            if counterpart is None:
                continue
            selector = strategy.build_selector(counterpart)
            if not selector:
                continue
            candidates.append(
                CandidateSelector(
                    selector_text=selector,
                    stability_score=min(
                        MAX_STABILITY_SCORE,
                        strategy.base_score + term_score * strategy.term_weight,
                    ),
                    strategy=strategy.strategy,
                )
            )
    return candidates


def rank_candidates(candidates: Sequence[CandidateSelector]) -> list[CandidateSelector]:
    # sorted() is stable: equal scores keep strategy order, then document order.
    return sorted(candidates, key=lambda item: item.stability_score, reverse=True)


def build_recommendation(
    feature_name: str,
    candidates: Sequence[CandidateSelector],
    reliability_threshold: float = DEFAULT_RELIABILITY_THRESHOLD,
) -> AnchorRecommendation:
    ranked = rank_candidates(candidates)
    if not ranked:
        return AnchorRecommendation(feature_name=feature_name)

    primary = ranked[0]
    alternatives: list[str] = []
    for candidate in ranked[1:]:
        if len(alternatives) >= MAX_ALTERNATIVES:
            break
        if candidate.selector_text == primary.selector_text or candidate.selector_text in alternatives:
            continue
        alternatives.append(candidate.selector_text)

    return AnchorRecommendation(
        feature_name=feature_name,
        primary_selector=primary.selector_text,
        alternative_selectors=tuple(alternatives),
        stability_score=primary.stability_score,
        strategy_used=primary.strategy,
        is_reliable=primary.stability_score > reliability_threshold,
    )


def recommend_anchors(
    before: TreeModel,
    after: TreeModel,
    features: Iterable[FeatureDescriptor],
    reliability_threshold: float = DEFAULT_RELIABILITY_THRESHOLD,
) -> dict[str, AnchorRecommendation]:
    recommendations: dict[str, AnchorRecommendation] = {}
    for feature in features:
        candidates = collect_candidates(before, after, feature)
        recommendation = build_recommendation(feature.name, candidates, reliability_threshold)
        logger.debug(
            "Feature %s: %d candidate(s), primary=%s score=%s",
            feature.name,
            len(candidates),
            recommendation.primary_selector,
            recommendation.stability_score,
        )
        recommendations[feature.name] = recommendation
    return recommendations
