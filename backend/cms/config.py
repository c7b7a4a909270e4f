from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from pathlib import Path


_PACKAGE_DIR = Path(__file__).resolve().parent
# backend/cms/config.py -> parents[2] == repo root
_PROJECT_ROOT = _PACKAGE_DIR.parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_ENV: str = Field(default="development")
    APP_SECRET: str = Field(default="please-change-me")
    LOG_LEVEL: str = Field(default="INFO")
    HOST: str = Field(default="127.0.0.1")
    PORT: int = Field(default=8000)

    DATABASE_URL: str = Field(
        default=f"sqlite:///{_PROJECT_ROOT / 'data' / 'cms.sqlite'}")
    DB_ECHO: bool = Field(default=False)

    # mount point of the application; empty means "use the ASGI root_path"
    BASE_PATH: str = Field(default="")
    SITE_TITLE: str = Field(default="MiniCMS")

    ADMIN_USERNAME: str = Field(default="admin")
    ADMIN_PASSWORD: str = Field(default="admin")
    ADMIN_PASSWORD_HASH: str | None = Field(default=None)
    SESSION_MAX_AGE_SECONDS: int = Field(default=8 * 60 * 60)

    STYLESHEET_PATH: str = Field(
        default=str(_PROJECT_ROOT / "data" / "style.css"))
    FALLBACK_STYLESHEET_PATH: str = Field(
        default=str(_PACKAGE_DIR / "static" / "fallback.css"))
    THEME_CSS_BASE_URL: str = Field(
        default="https://cdn.jsdelivr.net/npm/@picocss/pico@2/css/pico.classless")
    THEME_FETCH_TIMEOUT_SECONDS: float = Field(default=10.0)

    @property
    def project_root(self) -> Path:
        return _PROJECT_ROOT

    @property
    def templates_dir(self) -> Path:
        return _PACKAGE_DIR / "templates"

    @property
    def static_dir(self) -> Path:
        return _PACKAGE_DIR / "static"


settings = Settings()
