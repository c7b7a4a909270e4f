from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware
from .config import Settings, settings
from .auth import LoginRequired
from .db import init_db
from .routers.site import base_path_for, redirect_to, router as site_router
import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def create_app(app_settings: Settings | None = None) -> FastAPI:
    cfg = app_settings or settings
    logging.basicConfig(level=cfg.LOG_LEVEL.upper(), format=LOG_FORMAT)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="MiniCMS", version="0.1.0", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = cfg

    app.mount("/static", StaticFiles(directory=str(cfg.static_dir)), name="static")
    app.state.templates = Jinja2Templates(directory=str(cfg.templates_dir))
    app.add_middleware(
        SessionMiddleware,
        secret_key=cfg.APP_SECRET,
        max_age=cfg.SESSION_MAX_AGE_SECONDS,
        same_site="lax",
    )

    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired):
        return redirect_to(request, f"{base_path_for(request)}/login")

    @app.get("/health", include_in_schema=False)
    def healthcheck():
        return {"status": "ok"}

    app.include_router(site_router)

    init_db(cfg)
    logger.info("cms ready env=%s database=%s", cfg.APP_ENV, cfg.DATABASE_URL.split("://", 1)[0])
    return app


def run() -> None:
    import uvicorn

    uvicorn.run("backend.cms.main:create_app", factory=True, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
