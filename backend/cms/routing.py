from __future__ import annotations

import enum
import re
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .models import MAX_ROW_ID, MIN_ROW_ID


class Page(str, enum.Enum):
    HOME = "home"
    POST = "post"
    LOGIN = "login"
    ADMIN = "admin"
    NEW = "new"
    EDIT = "edit"
    SETTINGS = "settings"
    CONTACT = "contact"

    @classmethod
    def lookup(cls, raw: str) -> "Page":
        """Unknown page names fall back to the home feed."""
        try:
            return cls(raw)
        except ValueError:
            return cls.HOME


class AdminAction(str, enum.Enum):
    NEW_POST = "new_post"
    EDIT_POST = "edit_post"
    DELETE_POST = "delete_post"
    SAVE_SETTINGS = "save_settings"
    LOGOUT = "logout"
    VIEW_MESSAGE = "view_message"
    DELETE_MESSAGE = "delete_message"

    @classmethod
    def lookup(cls, raw: str) -> Optional["AdminAction"]:
        try:
            return cls(raw)
        except ValueError:
            return None


@dataclass(frozen=True)
class Route:
    page: str = Page.HOME.value
    action: str = ""
    slug: str = ""
    id: Optional[int] = None


_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def to_int(raw: str | None) -> int:
    """Leading-digit integer coercion: "42abc" -> 42, "abc" -> 0.

    Values outside the row-id range saturate at its bounds.
    """
    if not raw:
        return 0
    match = _LEADING_INT_RE.match(raw)
    if not match:
        return 0
    return max(MIN_ROW_ID, min(MAX_ROW_ID, int(match.group(1))))


def _strip_base_path(path: str, base_path: str) -> str:
    base = (base_path or "").rstrip("/")
    if base and (path == base or path.startswith(base + "/")):
        return path[len(base):]
    return path


def resolve_route(path: str, base_path: str = "") -> Route:
    """Parse a request path into a Route.

    Pure and total: malformed input degrades to defaults. Segments past the
    ones a page consumes are ignored.
    """
    path = (path or "").split("?", 1)[0]
    path = _strip_base_path(path, base_path)
    trimmed = path.strip("/")
    parts = trimmed.split("/") if trimmed else []

    if not parts or not parts[0]:
        return Route()

    page = parts[0]
    second = parts[1] if len(parts) > 1 else ""
    if page == Page.POST.value and second:
        return Route(page=page, slug=second)
    if page == Page.EDIT.value and second:
        return Route(page=page, id=to_int(second))
    if page == Page.ADMIN.value and second:
        third = parts[2] if len(parts) > 2 else ""
        return Route(page=page, action=second, id=to_int(third) if third else None)
    return Route(page=page)


def apply_query_overrides(route: Route, query: Mapping[str, str]) -> Route:
    """``?action=``, ``?id=`` and ``?slug=`` take precedence over path segments."""
    changes = {}
    if query.get("action"):
        changes["action"] = query["action"]
    if "id" in query:
        changes["id"] = to_int(query["id"])
    if "slug" in query:
        changes["slug"] = query["slug"]
    return replace(route, **changes) if changes else route
