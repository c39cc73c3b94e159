from __future__ import annotations

from .analysis import compare_snapshots
from .catalog import AnalyzerConfig, load_catalog
from .errors import (
    AnchorDiffError,
    CatalogError,
    ParseError,
    SelectorSyntaxError,
    SinkWriteError,
    SourceUnavailableError,
)
from .models import AnalysisResult
from .tree import TreeModel, parse

__version__ = "0.1.0"

__all__ = [
    "AnalysisResult",
    "AnalyzerConfig",
    "AnchorDiffError",
    "CatalogError",
    "ParseError",
    "SelectorSyntaxError",
    "SinkWriteError",
    "SourceUnavailableError",
    "TreeModel",
    "compare_snapshots",
    "load_catalog",
    "parse",
]
