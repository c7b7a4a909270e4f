from __future__ import annotations

import logging
import re
from dataclasses import dataclass, astuple
from typing import List, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Message, is_row_id

logger = logging.getLogger(__name__)

# everything outside letters, digits and !#$%&'*+-=?^_`{|}~@.[]
_EMAIL_DISALLOWED_RE = re.compile(r"[^A-Za-z0-9!#$%&'*+\-=?^_`{|}~@.\[\]]")


def sanitize_email(raw: str) -> str:
    return _EMAIL_DISALLOWED_RE.sub("", raw or "")


@dataclass(frozen=True)
class ContactSubmission:
    name: str
    email: str
    subject: str
    message: str

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "ContactSubmission":
        return cls(
            name=(form.get("name") or "").strip(),
            email=sanitize_email(form.get("email") or ""),
            subject=(form.get("subject") or "").strip(),
            message=(form.get("message") or "").strip(),
        )

    def is_complete(self) -> bool:
        return all(astuple(self))


class MessageService:
    """Contact-form inbox."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_messages(self, limit: int | None = None) -> List[Message]:
        query = select(Message).order_by(Message.created_at.desc(), Message.id.desc())
        if limit:
            query = query.limit(limit)
        return list(self.db.execute(query).scalars().all())

    def get_message(self, message_id: int | None) -> Optional[Message]:
        if not is_row_id(message_id):
            return None
        return self.db.get(Message, message_id)

    def unread_count(self) -> int:
        query = select(func.count()).select_from(Message).where(Message.is_read.is_(False))
        return int(self.db.execute(query).scalar_one())

    def create_message(self, submission: ContactSubmission) -> Optional[Message]:
        if not submission.is_complete():
            logger.warning("contact submission rejected: required field missing")
            return None
        entry = Message(
            name=submission.name,
            email=submission.email,
            subject=submission.subject,
            message=submission.message,
            is_read=False,
        )
        self.db.add(entry)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("failed to store contact message")
            return None
        self.db.refresh(entry)
        logger.info("contact message stored id=%s", entry.id)
        return entry

    def mark_read(self, message: Message) -> Message:
        """One-way unread -> read transition; a no-op on read messages."""
        if message.is_read:
            return message
        message_id = message.id
        message.is_read = True
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("failed to mark message id=%s as read", message_id)
            return message
        logger.info("message marked read id=%s", message.id)
        return message

    def delete_message(self, message_id: int | None) -> bool:
        entry = self.get_message(message_id)
        if entry is None:
            return False
        self.db.delete(entry)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("failed to delete message id=%s", message_id)
            return False
        logger.info("message deleted id=%s", message_id)
        return True
