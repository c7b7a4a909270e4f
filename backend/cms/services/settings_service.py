from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import Settings, settings
from ..models import Setting

logger = logging.getLogger(__name__)

THEME_KEY = "theme_color"

THEME_COLORS = (
    "azure", "red", "pink", "fuchsia", "purple", "violet", "indigo", "blue", "cyan",
    "jade", "green", "lime", "yellow", "amber", "pumpkin", "orange", "sand",
)


@dataclass(frozen=True)
class SettingDefault:
    value: str
    description: str
    # hints for the settings form
    input_type: str = "text"
    options: Tuple[str, ...] = ()
    required: bool = False


def default_settings(config: Settings | None = None) -> Dict[str, SettingDefault]:
    cfg = config or settings
    return {
        "site_title": SettingDefault(
            value=cfg.SITE_TITLE,
            description="The name of your website",
            required=True,
        ),
        "site_description": SettingDefault(
            value="A simple CMS with SQLite and PicoCSS.",
            description="Short description used for search engines",
        ),
        THEME_KEY: SettingDefault(
            value="azure",
            description="Select the theme color for the website (PicoCSS).",
            input_type="select",
            options=THEME_COLORS,
        ),
    }


class SettingsService:
    """Key/value site settings backed by the compiled default table."""

    def __init__(self, db: Session, config: Settings | None = None) -> None:
        self.db = db
        self.defaults = default_settings(config)

    def row_count(self) -> int:
        return int(self.db.execute(select(func.count()).select_from(Setting)).scalar_one())

    def stored_settings(self) -> Dict[str, str]:
        rows = self.db.execute(select(Setting)).scalars().all()
        return {row.name: row.value for row in rows}

    def site_settings(self) -> Dict[str, str]:
        """Full name -> value map; keys without a row fall back to their default."""
        values = {key: item.value for key, item in self.defaults.items()}
        values.update(self.stored_settings())
        return values

    def get_setting(self, name: str) -> Optional[str]:
        row = self.db.get(Setting, name)
        if row is not None:
            return row.value
        default = self.defaults.get(name)
        return default.value if default else None

    def upsert_setting(self, name: str, value: str) -> bool:
        row = self.db.get(Setting, name)
        if row is None:
            self.db.add(Setting(name=name, value=value))
        else:
            row.value = value
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("failed to save setting %s", name, exc_info=True)
            return False
        return True

    def save_settings(self, form: Mapping[str, str]) -> List[str]:
        """Upsert every known key in ``form``, one commit per key.

        Unknown keys are ignored, as are select values outside the key's
        options. Returns the keys that were written; a failed key is logged
        and skipped, keys saved before it stay saved.
        """
        saved: List[str] = []
        for key, raw in form.items():
            default = self.defaults.get(key)
            if default is None:
                continue
            value = (raw or "").strip()
            if default.options and value not in default.options:
                logger.warning("setting %s rejected: %r is not an allowed option", key, value)
                continue
            if self.upsert_setting(key, value):
                saved.append(key)
        if saved:
            logger.info("settings saved: %s", ", ".join(saved))
        return saved
