from __future__ import annotations

import argparse
import logging

from backend.cms.config import settings
from backend.cms.db import SessionLocal, configure_engine
from backend.cms.services.settings_service import THEME_KEY, SettingsService
from backend.cms.services.stylesheet_service import StylesheetService


def main() -> None:
    ap = argparse.ArgumentParser(
        description="Regenerate the derived stylesheet from the stored theme setting."
    )
    ap.add_argument("--theme", default=None, help="override the stored theme colour")
    args = ap.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    configure_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
    db = SessionLocal()
    try:
        theme = args.theme or SettingsService(db, settings).get_setting(THEME_KEY)
    finally:
        db.close()
    ok = StylesheetService(settings).refresh_stylesheet(theme)
    print(f"theme={theme} updated={ok}")


if __name__ == "__main__":
    main()
