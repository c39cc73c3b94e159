from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any

from .errors import CatalogError

DEFAULT_RELIABILITY_THRESHOLD = 60.0

DEFAULT_ATTRIBUTES: tuple[str, ...] = ("id", "class", "data-testid", "role", "aria-label", "name")


@dataclass(frozen=True, slots=True)
class LandmarkDescriptor:
    name: str
    selectors: tuple[str, ...]
    role_hint: str | None = None
    key_terms: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class FeatureDescriptor:
    name: str
    role_hint: str | None
    key_terms: tuple[str, ...]


DEFAULT_LANDMARKS: tuple[LandmarkDescriptor, ...] = (
    LandmarkDescriptor(
        name="MESSAGE_LIST",
        selectors=(".ms-List", '[role="list"]', "[data-list-type]"),
        role_hint="list",
        key_terms=("message", "inbox", "mail"),
    ),
    LandmarkDescriptor(
        name="COMPOSE_BUTTON",
        selectors=('[aria-label*="New mail"]', '[aria-label*="Compose"]'),
        role_hint="button",
        key_terms=("compose", "new", "create", "mail"),
    ),
    LandmarkDescriptor(
        name="FOLDER_TREE",
        selectors=('[role="tree"]', ".folderPaneTree", '[aria-label*="folder pane"]'),
        role_hint="tree",
        key_terms=("folder", "navigation", "tree"),
    ),
    LandmarkDescriptor(
        name="READING_PANE",
        selectors=(
            '[aria-label*="Reading Pane"]',
            ".readingPane",
            '[data-app-section="ReadingPane"]',
        ),
        role_hint="region",
        key_terms=("reading", "content", "message"),
    ),
    LandmarkDescriptor(
        name="RIBBON",
        selectors=(".ms-CommandBar", '[role="toolbar"]', ".commandBarWrapper"),
        role_hint="toolbar",
        key_terms=("command", "action", "toolbar"),
    ),
)

DEFAULT_FEATURES: tuple[FeatureDescriptor, ...] = (
    FeatureDescriptor("MessageList", "list", ("message", "inbox", "mail")),
    FeatureDescriptor("ComposeButton", "button", ("compose", "new", "create", "mail")),
    FeatureDescriptor("FolderPane", "tree", ("folder", "navigation", "tree")),
    FeatureDescriptor("ReadingPane", "region", ("reading", "content", "message")),
    FeatureDescriptor("CommandBar", "toolbar", ("command", "action", "toolbar")),
)


@dataclass(frozen=True, slots=True)
class AnalyzerConfig:
    attributes: tuple[str, ...] = DEFAULT_ATTRIBUTES
    landmarks: tuple[LandmarkDescriptor, ...] = DEFAULT_LANDMARKS
    features: tuple[FeatureDescriptor, ...] = DEFAULT_FEATURES
    reliability_threshold: float = DEFAULT_RELIABILITY_THRESHOLD


def load_catalog(path: str | Path) -> AnalyzerConfig:
    """Build an analyzer configuration from a JSON catalog file.

    Every top-level key is optional; absent keys keep the built-in tables.
    """
    catalog_path = Path(path)
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CatalogError(f"Could not read catalog {catalog_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Catalog {catalog_path} is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise CatalogError(f"Catalog {catalog_path} must contain a JSON object.")
    return catalog_from_mapping(payload)


def catalog_from_mapping(payload: dict[str, Any]) -> AnalyzerConfig:
    defaults = AnalyzerConfig()
    attributes = defaults.attributes
    if "attributes" in payload:
        attributes = _string_tuple(payload["attributes"], "attributes")
        if not attributes:
            raise CatalogError("attributes must list at least one attribute name.")

    landmarks = defaults.landmarks
    if "landmarks" in payload:
        landmarks = tuple(
            _landmark_from_entry(entry, index)
            for index, entry in enumerate(_entry_list(payload["landmarks"], "landmarks"))
        )

    features = defaults.features
    if "features" in payload:
        features = tuple(
            _feature_from_entry(entry, index)
            for index, entry in enumerate(_entry_list(payload["features"], "features"))
        )

    threshold = defaults.reliability_threshold
    if "reliabilityThreshold" in payload:
        raw = payload["reliabilityThreshold"]
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise CatalogError("reliabilityThreshold must be a number.")
        if not 0 <= raw <= 100:
            raise CatalogError("reliabilityThreshold must be between 0 and 100.")
        threshold = float(raw)

    return AnalyzerConfig(
        attributes=attributes,
        landmarks=landmarks,
        features=features,
        reliability_threshold=threshold,
    )


def _landmark_from_entry(entry: Any, index: int) -> LandmarkDescriptor:
    if not isinstance(entry, dict):
        raise CatalogError(f"landmarks[{index}] must be an object.")
    name = _required_name(entry, f"landmarks[{index}]")
    selectors = _string_tuple(entry.get("selectors", []), f"landmarks[{index}].selectors")
    if not selectors:
        raise CatalogError(f"landmarks[{index}].selectors must not be empty.")
    return LandmarkDescriptor(
        name=name,
        selectors=selectors,
        role_hint=_optional_string(entry.get("roleHint"), f"landmarks[{index}].roleHint"),
        key_terms=_string_tuple(entry.get("keyTerms", []), f"landmarks[{index}].keyTerms"),
    )


def _feature_from_entry(entry: Any, index: int) -> FeatureDescriptor:
    if not isinstance(entry, dict):
        raise CatalogError(f"features[{index}] must be an object.")
    name = _required_name(entry, f"features[{index}]")
    key_terms = _string_tuple(entry.get("keyTerms", []), f"features[{index}].keyTerms")
    if not key_terms:
        raise CatalogError(f"features[{index}].keyTerms must not be empty.")
    return FeatureDescriptor(
        name=name,
        role_hint=_optional_string(entry.get("roleHint"), f"features[{index}].roleHint"),
        key_terms=key_terms,
    )


def _entry_list(value: Any, label: str) -> list[Any]:
    if not isinstance(value, list):
        raise CatalogError(f"{label} must be a list.")
    return value


def _required_name(entry: dict[str, Any], label: str) -> str:
    name = str(entry.get("name", "") or "").strip()
    if not name:
        raise CatalogError(f"{label}.name is required.")
    return name


def _optional_string(value: Any, label: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise CatalogError(f"{label} must be a string.")
    return value.strip() or None


def _string_tuple(value: Any, label: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise CatalogError(f"{label} must be a list of strings.")
    # Keep first occurrence order while dropping blanks and duplicates.
    return tuple(dict.fromkeys(item.strip() for item in value if item.strip()))
