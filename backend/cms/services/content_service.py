from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Post, PostKind, is_row_id
from ..utils.slugify import slugify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostInput:
    title: str
    content: str
    type: str
    slug: str

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "PostInput":
        title = (form.get("title") or "").strip()
        return cls(
            title=title,
            content=form.get("content") or "",
            type=PostKind.coerce(form.get("type")).value,
            slug=slugify(form.get("slug") or form.get("title") or ""),
        )


class ContentService:
    """Posts and pages, keyed by id and (by convention) by slug."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_posts(self, kind: PostKind | str | None = None) -> List[Post]:
        query = select(Post)
        if kind:
            query = query.where(Post.type == PostKind(kind).value)
        query = query.order_by(Post.created_at.desc(), Post.id.desc())
        return list(self.db.execute(query).scalars().all())

    def get_post(self, post_id: int | None) -> Optional[Post]:
        if not is_row_id(post_id):
            return None
        return self.db.get(Post, post_id)

    def get_post_by_slug(self, slug: str) -> Optional[Post]:
        if not slug:
            return None
        query = select(Post).where(Post.slug == slug).order_by(Post.id.asc()).limit(1)
        return self.db.execute(query).scalars().first()

    def create_post(self, data: PostInput) -> Optional[Post]:
        post = Post(title=data.title, content=data.content, type=data.type, slug=data.slug)
        self.db.add(post)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("failed to create post slug=%s", data.slug)
            return None
        self.db.refresh(post)
        logger.info("post created id=%s type=%s slug=%s", post.id, post.type, post.slug)
        return post

    def update_post(self, post_id: int, data: PostInput) -> Optional[Post]:
        post = self.get_post(post_id)
        if post is None:
            logger.info("post update skipped, id=%s not found", post_id)
            return None
        post.title = data.title
        post.content = data.content
        post.type = data.type
        post.slug = data.slug
        post.updated_at = datetime.utcnow()
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("failed to update post id=%s", post_id)
            return None
        logger.info("post updated id=%s slug=%s", post.id, post.slug)
        return post

    def delete_post(self, post_id: int | None) -> bool:
        post = self.get_post(post_id)
        if post is None:
            return False
        self.db.delete(post)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("failed to delete post id=%s", post_id)
            return False
        logger.info("post deleted id=%s", post_id)
        return True
