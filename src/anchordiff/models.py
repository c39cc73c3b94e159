from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

ChangeKind = Literal["added", "removed", "changed", "unchanged"]
StrategyType = Literal["role-based", "id-based", "data-based", "class-based"]


@dataclass(frozen=True, slots=True)
class ElementSnapshot:
    tag_name: str
    attributes: dict[str, str]
    child_count: int
    text_length: int
    path: tuple[str, ...]

    @property
    def css_path(self) -> str:
        return " > ".join(self.path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tagName": self.tag_name,
            "attributes": dict(self.attributes),
            "childCount": self.child_count,
            "textLength": self.text_length,
            "path": list(self.path),
            "cssPath": self.css_path,
        }


@dataclass(frozen=True, slots=True)
class MatchOutcome:
    found: bool
    selector_used: str | None = None
    element_snapshot: ElementSnapshot | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"found": self.found}
        if self.found:
            payload["selectorUsed"] = self.selector_used
            payload["elementSnapshot"] = (
                self.element_snapshot.to_dict() if self.element_snapshot else None
            )
        return payload


NOT_FOUND = MatchOutcome(found=False)


@dataclass(frozen=True, slots=True)
class AttributeStabilityRecord:
    attribute_name: str
    before_count: int
    after_count: int
    common_count: int
    stability_score_percent: float
    stable_values: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "attributeName": self.attribute_name,
            "beforeCount": self.before_count,
            "afterCount": self.after_count,
            "commonCount": self.common_count,
            "stabilityScorePercent": round(self.stability_score_percent, 2),
            "stableValues": list(self.stable_values),
        }


@dataclass(frozen=True, slots=True)
class LandmarkChangeRecord:
    landmark_name: str
    before_match: MatchOutcome
    after_match: MatchOutcome
    change_kind: ChangeKind

    def to_dict(self) -> dict[str, Any]:
        return {
            "landmarkName": self.landmark_name,
            "beforeMatch": self.before_match.to_dict(),
            "afterMatch": self.after_match.to_dict(),
            "changeKind": self.change_kind,
        }


@dataclass(frozen=True, slots=True)
class CandidateSelector:
    selector_text: str
    stability_score: int
    strategy: StrategyType


@dataclass(frozen=True, slots=True)
class AnchorRecommendation:
    feature_name: str
    primary_selector: str | None = None
    alternative_selectors: tuple[str, ...] = ()
    stability_score: int = 0
    strategy_used: StrategyType | None = None
    is_reliable: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "featureName": self.feature_name,
            "primarySelector": self.primary_selector,
            "alternativeSelectors": list(self.alternative_selectors),
            "stabilityScore": self.stability_score,
            "strategyUsed": self.strategy_used,
            "isReliable": self.is_reliable,
        }


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    stable_attributes: dict[str, AttributeStabilityRecord] = field(default_factory=dict)
    changed_selectors: tuple[LandmarkChangeRecord, ...] = ()
    recommended_anchors: dict[str, AnchorRecommendation] = field(default_factory=dict)

    @property
    def reliable_anchors(self) -> list[AnchorRecommendation]:
        return [item for item in self.recommended_anchors.values() if item.is_reliable]

    def to_dict(self) -> dict[str, Any]:
        return {
            "stableAttributes": {
                name: record.to_dict() for name, record in self.stable_attributes.items()
            },
            "changedSelectors": [record.to_dict() for record in self.changed_selectors],
            "recommendedAnchors": {
                name: item.to_dict() for name, item in self.recommended_anchors.items()
            },
        }
