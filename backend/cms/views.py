from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Optional, Union

from .models import Message, Post
from .services.settings_service import SettingDefault


@dataclass
class Redirect:
    # path relative to the application mount point, "" is home
    target: str = ""


@dataclass
class PageView:
    template: ClassVar[str] = ""
    status_code: ClassVar[int] = 200

    def status(self) -> int:
        return self.status_code

    def context(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class HomeView(PageView):
    template: ClassVar[str] = "home.html"
    posts: List[Post] = field(default_factory=list)


@dataclass
class SingleView(PageView):
    template: ClassVar[str] = "single.html"
    post: Optional[Post] = None


@dataclass
class NotFoundView(PageView):
    template: ClassVar[str] = "404.html"
    status_code: ClassVar[int] = 404


@dataclass
class LoginView(PageView):
    template: ClassVar[str] = "login.html"
    login_error: Optional[str] = None

    def status(self) -> int:
        return 400 if self.login_error else 200


@dataclass
class AdminView(PageView):
    template: ClassVar[str] = "admin/dashboard.html"
    unread_count: int = 0
    messages: List[Message] = field(default_factory=list)
    pages: List[Post] = field(default_factory=list)
    posts: List[Post] = field(default_factory=list)


@dataclass
class EditPostView(PageView):
    template: ClassVar[str] = "admin/edit_post.html"
    is_new: bool = True
    post: Optional[Post] = None


@dataclass
class SettingsView(PageView):
    template: ClassVar[str] = "admin/settings.html"
    defaults: Dict[str, SettingDefault] = field(default_factory=dict)
    values: Dict[str, str] = field(default_factory=dict)


@dataclass
class ContactView(PageView):
    template: ClassVar[str] = "contact.html"
    success: bool = False


@dataclass
class MessageView(PageView):
    template: ClassVar[str] = "admin/view_message.html"
    message: Optional[Message] = None


Outcome = Union[Redirect, PageView]
