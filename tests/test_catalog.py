import json
from pathlib import Path

import pytest

from anchordiff.catalog import (
    DEFAULT_ATTRIBUTES,
    DEFAULT_FEATURES,
    DEFAULT_LANDMARKS,
    AnalyzerConfig,
    catalog_from_mapping,
    load_catalog,
)
from anchordiff.errors import CatalogError


def _write(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_default_configuration_tables() -> None:
    config = AnalyzerConfig()
    assert config.attributes == DEFAULT_ATTRIBUTES
    assert [item.name for item in config.landmarks] == [
        "MESSAGE_LIST",
        "COMPOSE_BUTTON",
        "FOLDER_TREE",
        "READING_PANE",
        "RIBBON",
    ]
    assert [item.name for item in config.features] == [
        "MessageList",
        "ComposeButton",
        "FolderPane",
        "ReadingPane",
        "CommandBar",
    ]
    assert config.reliability_threshold == 60.0


def test_empty_catalog_keeps_defaults(tmp_path: Path) -> None:
    assert load_catalog(_write(tmp_path, {})) == AnalyzerConfig()


def test_catalog_overrides_only_given_keys(tmp_path: Path) -> None:
    config = load_catalog(
        _write(
            tmp_path,
            {
                "attributes": ["id", " data-qa ", "id"],
                "features": [{"name": "Search", "roleHint": "search", "keyTerms": ["search", "find"]}],
                "reliabilityThreshold": 75,
            },
        )
    )

    assert config.attributes == ("id", "data-qa")
    assert config.landmarks == DEFAULT_LANDMARKS
    assert len(config.features) == 1
    assert config.features[0].name == "Search"
    assert config.features[0].role_hint == "search"
    assert config.features[0].key_terms == ("search", "find")
    assert config.reliability_threshold == 75.0


def test_catalog_landmarks_are_parsed() -> None:
    config = catalog_from_mapping(
        {"landmarks": [{"name": "HEADER", "selectors": ["header", "[role=\"banner\"]"]}]}
    )

    assert len(config.landmarks) == 1
    landmark = config.landmarks[0]
    assert landmark.name == "HEADER"
    assert landmark.selectors == ("header", '[role="banner"]')
    assert landmark.role_hint is None
    assert landmark.key_terms == ()
    assert config.features == DEFAULT_FEATURES


def test_blank_role_hint_becomes_none() -> None:
    config = catalog_from_mapping({"features": [{"name": "X", "roleHint": "  ", "keyTerms": ["x"]}]})
    assert config.features[0].role_hint is None


@pytest.mark.parametrize(
    "payload",
    [
        {"attributes": "id"},
        {"attributes": []},
        {"attributes": ["id", 3]},
        {"landmarks": {}},
        {"landmarks": ["MESSAGE_LIST"]},
        {"landmarks": [{"name": "X", "selectors": []}]},
        {"landmarks": [{"selectors": ["div"]}]},
        {"features": [{"name": "X", "keyTerms": []}]},
        {"features": [{"name": "X", "roleHint": 5, "keyTerms": ["x"]}]},
        {"reliabilityThreshold": "high"},
        {"reliabilityThreshold": True},
        {"reliabilityThreshold": 101},
        {"reliabilityThreshold": -1},
    ],
)
def test_malformed_catalog_entries_are_rejected(payload: dict) -> None:
    with pytest.raises(CatalogError):
        catalog_from_mapping(payload)


def test_unreadable_or_invalid_catalog_files(tmp_path: Path) -> None:
    with pytest.raises(CatalogError):
        load_catalog(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(broken)

    with pytest.raises(CatalogError):
        load_catalog(_write(tmp_path, ["id"]))
