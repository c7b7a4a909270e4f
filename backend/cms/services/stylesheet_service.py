from __future__ import annotations

import contextlib
import logging
import os
import threading
from pathlib import Path
from typing import Mapping, Optional

import httpx

from ..config import Settings
from .settings_service import THEME_KEY

logger = logging.getLogger(__name__)

PLACEHOLDER_CSS = "/* CMS: theme CSS could not be fetched and no fallback stylesheet was found. */"
_DEFAULT_THEMES = {"", "azure", "default"}


def theme_css_url(base_url: str, theme: Optional[str]) -> str:
    theme = (theme or "").strip()
    if theme in _DEFAULT_THEMES:
        return f"{base_url}.min.css"
    return f"{base_url}.{theme}.min.css"


def _fetch_css(url: str, timeout: float) -> str:
    resp = httpx.get(url, timeout=timeout, follow_redirects=True)
    resp.raise_for_status()
    return resp.text


class StylesheetService:
    """Keeps the derived stylesheet on disk in line with the theme setting."""

    def __init__(self, config: Settings) -> None:
        self.config = config
        self.path = Path(config.STYLESHEET_PATH)
        self.fallback_path = Path(config.FALLBACK_STYLESHEET_PATH)

    def _fetch_theme(self, theme: Optional[str]) -> Optional[str]:
        url = theme_css_url(self.config.THEME_CSS_BASE_URL, theme)
        try:
            return _fetch_css(url, self.config.THEME_FETCH_TIMEOUT_SECONDS)
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            logger.warning("theme css fetch failed url=%s theme=%s: %s", url, theme, exc)
            return None

    def _fallback_css(self) -> str:
        try:
            return self.fallback_path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("fallback stylesheet unavailable at %s: %s", self.fallback_path, exc)
            return PLACEHOLDER_CSS

    def _write(self, css: str) -> bool:
        tmp_path: Optional[Path] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # readers of the served file only ever see a complete stylesheet
            tmp_path = self.path.with_name(f".{self.path.name}.{os.getpid()}.{threading.get_ident()}.tmp")
            tmp_path.write_text(css, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.warning("failed to write stylesheet %s: %s", self.path, exc)
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink()
            return False
        return True

    def _generate(self, theme: Optional[str]) -> bool:
        css = self._fetch_theme(theme)
        if css is None:
            css = self._fallback_css()
        return self._write(css)

    def ensure_stylesheet(self, site_settings: Mapping[str, str]) -> bool:
        """Create the stylesheet if it is missing. Never raises."""
        if self.path.exists():
            return True
        theme = site_settings.get(THEME_KEY) or "azure"
        logger.info("generating stylesheet for theme %s", theme)
        return self._generate(theme)

    def refresh_stylesheet(self, theme: Optional[str]) -> bool:
        """Regenerate after a theme change, overwriting the current file.

        If the fetch fails an existing stylesheet is kept as is.
        """
        if not self.path.exists():
            return self._generate(theme)
        css = self._fetch_theme(theme)
        if css is None:
            logger.warning("stylesheet not updated for theme %s", theme)
            return False
        logger.info("stylesheet regenerated for theme %s", theme)
        return self._write(css)
