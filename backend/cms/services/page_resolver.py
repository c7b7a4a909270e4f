from __future__ import annotations

from typing import Callable, Dict

from ..auth import AuthGate
from ..context import RequestContext
from ..models import PostKind
from ..routing import Page, Route
from ..views import (
    AdminView,
    ContactView,
    EditPostView,
    HomeView,
    LoginView,
    NotFoundView,
    Outcome,
    Redirect,
    SettingsView,
    SingleView,
)
from .content_service import ContentService
from .message_service import ContactSubmission, MessageService
from .settings_service import SettingsService

# pages that never render without an admin session
PROTECTED_PAGES = frozenset({Page.ADMIN, Page.NEW, Page.EDIT, Page.SETTINGS})


class PageResolver:
    """Maps a route to the view model its template needs."""

    def __init__(self, ctx: RequestContext, gate: AuthGate) -> None:
        self.ctx = ctx
        self.gate = gate
        self.content = ContentService(ctx.db)
        self.messages = MessageService(ctx.db)
        self._handlers: Dict[Page, Callable[[Route], Outcome]] = {
            Page.HOME: self._home,
            Page.POST: self._single,
            Page.LOGIN: self._login,
            Page.ADMIN: self._admin,
            Page.NEW: self._new,
            Page.EDIT: self._edit,
            Page.SETTINGS: self._settings,
            Page.CONTACT: self._contact,
        }

    def resolve(self, route: Route) -> Outcome:
        page = Page.lookup(route.page)
        if page in PROTECTED_PAGES:
            self.gate.require_login()
        return self._handlers[page](route)

    def _home(self, route: Route) -> Outcome:
        return HomeView(posts=self.content.list_posts(PostKind.POST))

    def _single(self, route: Route) -> Outcome:
        post = self.content.get_post_by_slug(route.slug)
        if post is None:
            return NotFoundView()
        return SingleView(post=post)

    def _login(self, route: Route) -> Outcome:
        if not self.ctx.is_post:
            return LoginView()
        error = self.gate.login(self.ctx.form.get("username", ""), self.ctx.form.get("password", ""))
        if error:
            return LoginView(login_error=error)
        return Redirect(Page.ADMIN.value)

    def _admin(self, route: Route) -> Outcome:
        return AdminView(
            unread_count=self.messages.unread_count(),
            messages=self.messages.list_messages(),
            pages=self.content.list_posts(PostKind.PAGE),
            posts=self.content.list_posts(PostKind.POST),
        )

    def _new(self, route: Route) -> Outcome:
        return EditPostView(is_new=True)

    def _edit(self, route: Route) -> Outcome:
        post = self.content.get_post(route.id)
        if post is None:
            return NotFoundView()
        return EditPostView(is_new=False, post=post)

    def _settings(self, route: Route) -> Outcome:
        service = SettingsService(self.ctx.db, self.ctx.config)
        return SettingsView(defaults=service.defaults, values=service.site_settings())

    def _contact(self, route: Route) -> Outcome:
        if not self.ctx.is_post:
            return ContactView()
        # incomplete submissions are dropped without feedback
        stored = self.messages.create_message(ContactSubmission.from_form(self.ctx.form))
        return ContactView(success=stored is not None)
