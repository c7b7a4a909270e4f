from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, RedirectResponse, Response
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ..auth import AuthGate
from ..config import Settings
from ..context import RequestContext, form_to_dict
from ..db import get_db
from ..models import PostKind
from ..routing import Route, apply_query_overrides, resolve_route
from ..services.action_dispatcher import ActionDispatcher
from ..services.content_service import ContentService
from ..services.page_resolver import PageResolver
from ..services.settings_service import SettingsService
from ..services.stylesheet_service import PLACEHOLDER_CSS, StylesheetService
from ..views import Outcome, Redirect


router = APIRouter()


def base_path_for(request: Request) -> str:
    cfg: Settings = request.app.state.settings
    return (cfg.BASE_PATH or request.scope.get("root_path") or "").rstrip("/")


def redirect_to(request: Request, url: str) -> RedirectResponse:
    status_code = 303 if request.method == "POST" else 302
    return RedirectResponse(url=url, status_code=status_code)


def _layout_context(ctx: RequestContext, route: Route, site_settings: Dict[str, str], logged_in: bool) -> Dict[str, Any]:
    defaults = SettingsService(ctx.db, ctx.config).defaults
    return {
        "site_title": site_settings.get("site_title") or defaults["site_title"].value,
        "site_description": site_settings.get("site_description") or defaults["site_description"].value,
        "settings": site_settings,
        "nav_pages": ContentService(ctx.db).list_posts(PostKind.PAGE),
        "logged_in": logged_in,
        "page": route.page,
        "route": route,
        "url": ctx.url,
        "now_year": datetime.utcnow().year,
    }


def render_outcome(
    request: Request,
    ctx: RequestContext,
    route: Route,
    outcome: Outcome,
    gate: AuthGate,
) -> Response:
    if isinstance(outcome, Redirect):
        return redirect_to(request, ctx.url(outcome.target))
    site_settings = SettingsService(ctx.db, ctx.config).site_settings()
    templates = request.app.state.templates
    context = {"request": request}
    context.update(_layout_context(ctx, route, site_settings, gate.is_logged_in()))
    context.update(outcome.context())
    return templates.TemplateResponse(outcome.template, context, status_code=outcome.status())


def handle_request(request: Request, db: Session, form: Dict[str, str]) -> Response:
    """Route -> auth gate -> admin action or page view -> rendered response."""
    cfg: Settings = request.app.state.settings
    ctx = RequestContext(
        method=request.method,
        path=request.url.path,
        db=db,
        config=cfg,
        session=request.session,
        base_path=base_path_for(request),
        query=dict(request.query_params),
        form=form,
    )
    route = apply_query_overrides(resolve_route(ctx.path, ctx.base_path), ctx.query)
    gate = AuthGate(ctx.session, cfg)

    outcome = None
    if route.action and gate.is_logged_in():
        outcome = ActionDispatcher(ctx, gate).dispatch(route)
    if isinstance(outcome, Redirect):
        return render_outcome(request, ctx, route, outcome, gate)

    StylesheetService(cfg).ensure_stylesheet(SettingsService(db, cfg).site_settings())
    if outcome is None:
        outcome = PageResolver(ctx, gate).resolve(route)
    return render_outcome(request, ctx, route, outcome, gate)


@router.get("/style.css", include_in_schema=False)
def stylesheet(request: Request, db: Session = Depends(get_db)):
    cfg: Settings = request.app.state.settings
    service = StylesheetService(cfg)
    service.ensure_stylesheet(SettingsService(db, cfg).site_settings())
    if not Path(service.path).exists():
        return Response(PLACEHOLDER_CSS, media_type="text/css")
    return FileResponse(service.path, media_type="text/css")


@router.api_route("/{path:path}", methods=["GET", "POST"], include_in_schema=False)
async def site(request: Request, path: str, db: Session = Depends(get_db)):
    form: Dict[str, str] = {}
    if request.method == "POST":
        form = form_to_dict(await request.form())
    return await run_in_threadpool(handle_request, request, db, form)
