from __future__ import annotations

import enum
from datetime import datetime
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class PostKind(str, enum.Enum):
    POST = "post"  # chronological, listed on the home feed
    PAGE = "page"  # static, listed in the site navigation

    @classmethod
    def coerce(cls, raw: str | None) -> "PostKind":
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            return cls.POST


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    # raw HTML, stored verbatim
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(16), nullable=False, default=PostKind.POST.value, index=True)
    # unique by convention only
    slug: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @property
    def is_page(self) -> bool:
        return self.type == PostKind.PAGE.value
