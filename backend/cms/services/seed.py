from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import Settings
from ..models import Message, Post, PostKind, Setting
from .settings_service import SettingsService

logger = logging.getLogger(__name__)


def _sample_posts(site_title: str) -> list[dict]:
    return [
        {
            "title": "Hello World",
            "content": "Hello World! <br /> How Are you?",
            "type": PostKind.POST.value,
            "slug": "hello-world",
        },
        {
            "title": "Another Post",
            "content": "This is another post.",
            "type": PostKind.POST.value,
            "slug": "another-post",
        },
        {
            "title": "Welcome",
            "content": f"Welcome to the {site_title}!",
            "type": PostKind.PAGE.value,
            "slug": "welcome",
        },
    ]


SAMPLE_MESSAGE = {
    "name": "John Doe",
    "email": "john.doe@example.com",
    "subject": "Test Message",
    "message": "This is a test message.",
}


def seed_initial_content(db: Session, config: Settings | None = None) -> bool:
    """First-run bootstrap, keyed off an empty settings table.

    Once any setting row exists nothing is re-seeded, even if posts or
    messages were emptied later. Returns True when seeding ran.
    """
    service = SettingsService(db, config)
    if service.row_count() > 0:
        return False

    for name, item in service.defaults.items():
        db.add(Setting(name=name, value=item.value))
    site_title = service.defaults["site_title"].value
    for data in _sample_posts(site_title):
        db.add(Post(**data))
    db.add(Message(**SAMPLE_MESSAGE, is_read=False))
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("first-run seeding failed")
        return False
    logger.info("seeded default settings, %s sample posts and a sample message", len(_sample_posts(site_title)))
    return True
