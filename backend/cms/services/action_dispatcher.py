from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from ..auth import AuthGate
from ..context import RequestContext
from ..routing import AdminAction, Page, Route
from ..views import MessageView, NotFoundView, Outcome, Redirect
from .content_service import ContentService, PostInput
from .message_service import MessageService
from .settings_service import THEME_KEY, SettingsService
from .stylesheet_service import StylesheetService

logger = logging.getLogger(__name__)

Handler = Callable[[Route], Optional[Outcome]]


class ActionDispatcher:
    """Runs an authenticated admin action and says where to go next.

    ``dispatch`` returns a Redirect, a terminal view (message detail), or
    None when the action does not apply (unknown action, wrong method,
    missing id) so the page resolver handles the request.
    """

    def __init__(self, ctx: RequestContext, gate: AuthGate) -> None:
        self.ctx = ctx
        self.gate = gate
        self.content = ContentService(ctx.db)
        self.messages = MessageService(ctx.db)
        self.settings = SettingsService(ctx.db, ctx.config)
        self._handlers: Dict[AdminAction, Handler] = {
            AdminAction.NEW_POST: self._new_post,
            AdminAction.EDIT_POST: self._edit_post,
            AdminAction.DELETE_POST: self._delete_post,
            AdminAction.SAVE_SETTINGS: self._save_settings,
            AdminAction.LOGOUT: self._logout,
            AdminAction.VIEW_MESSAGE: self._view_message,
            AdminAction.DELETE_MESSAGE: self._delete_message,
        }

    def dispatch(self, route: Route) -> Optional[Outcome]:
        action = AdminAction.lookup(route.action)
        if action is None:
            return None
        self.gate.require_login()
        return self._handlers[action](route)

    def _new_post(self, route: Route) -> Optional[Outcome]:
        if not self.ctx.is_post:
            return None
        self.content.create_post(PostInput.from_form(self.ctx.form))
        return Redirect(Page.ADMIN.value)

    def _edit_post(self, route: Route) -> Optional[Outcome]:
        if not self.ctx.is_post or route.id is None:
            return None
        self.content.update_post(route.id, PostInput.from_form(self.ctx.form))
        return Redirect(Page.ADMIN.value)

    def _delete_post(self, route: Route) -> Optional[Outcome]:
        if route.id is None:
            return None
        self.content.delete_post(route.id)
        return Redirect(Page.ADMIN.value)

    def _save_settings(self, route: Route) -> Optional[Outcome]:
        if not self.ctx.is_post:
            return None
        saved = self.settings.save_settings(self.ctx.form)
        if THEME_KEY in saved:
            theme = self.settings.get_setting(THEME_KEY)
            if theme:
                StylesheetService(self.ctx.config).refresh_stylesheet(theme)
        return Redirect(Page.SETTINGS.value)

    def _logout(self, route: Route) -> Optional[Outcome]:
        self.gate.logout()
        return Redirect("")

    def _view_message(self, route: Route) -> Optional[Outcome]:
        if route.id is None:
            return None
        message = self.messages.get_message(route.id)
        if message is None:
            return NotFoundView()
        return MessageView(message=self.messages.mark_read(message))

    def _delete_message(self, route: Route) -> Optional[Outcome]:
        if route.id is None:
            return None
        self.messages.delete_message(route.id)
        return Redirect(Page.ADMIN.value)
