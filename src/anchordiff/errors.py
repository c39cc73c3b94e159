from __future__ import annotations

from pathlib import Path


class AnchorDiffError(RuntimeError):
    """Base class for failures surfaced to the invoker."""


class ParseError(AnchorDiffError):
    """Raised when snapshot markup cannot be tokenized at all."""


class SelectorSyntaxError(AnchorDiffError):
    """Raised by strict queries when a selector string is invalid."""

    def __init__(self, selector: str, reason: str = "") -> None:
        self.selector = selector
        message = f"Invalid selector {selector!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class SourceUnavailableError(AnchorDiffError):
    """Raised when a snapshot source cannot supply markup."""


class SinkWriteError(AnchorDiffError):
    """Raised when a result sink cannot persist output."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"Could not write {self.path}: {reason}")


class CatalogError(AnchorDiffError):
    """Raised when a catalog file is unreadable or malformed."""
