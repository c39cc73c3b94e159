from __future__ import annotations

import logging
from pathlib import Path

from .errors import SourceUnavailableError

logger = logging.getLogger("anchordiff.io")

DEFAULT_SNAPSHOT_DIR = Path("html")

SNAPSHOT_MODES: dict[str, tuple[str, str]] = {
    "inbox": ("inbox-A.html", "inbox-B.html"),
    "read": ("read-A.html", "read-B.html"),
    "write": ("write-A.html", "write-B.html"),
}
DEFAULT_MODE = "inbox"

_MISSING_BROWSER_ERROR_HINTS = (
    "executable doesn't exist",
    "executable does not exist",
    "download new browsers",
    "playwright install",
    "could not find browser",
    "failed to launch chromium because executable",
)


def resolve_mode_paths(mode: str, snapshot_dir: Path | None = None) -> tuple[Path, Path]:
    names = SNAPSHOT_MODES.get(mode.strip().lower())
    if names is None:
        known = ", ".join(sorted(SNAPSHOT_MODES))
        raise SourceUnavailableError(f"Unknown comparison mode {mode!r}. Expected one of: {known}.")
    root = snapshot_dir or DEFAULT_SNAPSHOT_DIR
    return root / names[0], root / names[1]


def read_snapshot(path: str | Path) -> str:
    snapshot_path = Path(path)
    if not snapshot_path.is_file():
        raise SourceUnavailableError(f"Snapshot file not found: {snapshot_path}")
    try:
        markup = snapshot_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceUnavailableError(f"Could not read snapshot {snapshot_path}: {exc}") from exc
    if not markup.strip():
        raise SourceUnavailableError(f"Snapshot file is empty: {snapshot_path}")
    logger.info("Loaded snapshot %s (%d characters).", snapshot_path, len(markup))
    return markup


def is_missing_browser_error(exc: Exception) -> bool:
    message = str(exc).lower()
    return any(hint in message for hint in _MISSING_BROWSER_ERROR_HINTS)


def capture_rendered_markup(url: str, *, timeout_ms: int = 30_000, headless: bool = True) -> str:
    """Load ``url`` in headless Chromium and return the rendered document markup."""
    target = url.strip()
    if not target:
        raise SourceUnavailableError("A URL is required to capture a snapshot.")

    try:
        from playwright.sync_api import Error as PlaywrightError
        from playwright.sync_api import sync_playwright
    except ModuleNotFoundError as exc:
        raise SourceUnavailableError(
            "Playwright is not installed in this interpreter. Run `pip install playwright`."
        ) from exc

    logger.info("Capturing rendered markup from %s", target)
    try:
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(headless=headless)
            try:
                page = browser.new_page()
                page.goto(target, wait_until="networkidle", timeout=timeout_ms)
                markup = page.content()
            finally:
                browser.close()
    except PlaywrightError as exc:
        if is_missing_browser_error(exc):
            raise SourceUnavailableError(
                "Chromium is not installed for Playwright. Run `playwright install chromium`."
            ) from exc
        raise SourceUnavailableError(f"Could not capture {target}: {exc}") from exc

    if not markup.strip():
        raise SourceUnavailableError(f"Captured page is empty: {target}")
    return markup
