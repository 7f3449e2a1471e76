from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_ROOT_ENV_FILE = _PROJECT_ROOT / ".env"


class PortalSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ROOT_ENV_FILE), ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # FastAPI app
    APP_NAME: str = "Verifyhub"
    APP_VERSION: str = "0.1.0"
    APP_ENV: str = "development"
    API_PREFIX: str = "/api"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    ENABLE_ACCESS_LOG: bool = True
    CORS_ALLOW_ORIGIN: str = "*"
    CORS_ALLOW_METHODS: str = "POST,GET,OPTIONS"
    CORS_ALLOW_HEADERS: str = "Content-Type,Authorization"

    # Public origin used for redirect and verification links.
    # Falls back to the incoming request's base URL when empty.
    PUBLIC_BASE_URL: str = ""
    DEFAULT_SERVER_ID: str = "web_verification"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./verifyhub.db"
    DATABASE_ECHO: bool = False
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    AUTO_CREATE_TABLES: bool = True

    # Discord OAuth
    DISCORD_API_BASE_URL: str = "https://discord.com/api"
    DISCORD_CDN_BASE_URL: str = "https://cdn.discordapp.com"
    DISCORD_CLIENT_ID: str = ""
    DISCORD_CLIENT_SECRET: str = ""
    DISCORD_REDIRECT_URI: str = ""
    DISCORD_OAUTH_SCOPES: str = "identify guilds.join"
    DISCORD_HTTP_TIMEOUT_SECONDS: float = 15.0

    # Admin gate
    PORTAL_OWNER_KEY: str = ""
    PORTAL_ADMIN_KEY: str = ""
    ADMIN_SESSION_TTL_SECONDS: int = 24 * 60 * 60
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_LEEWAY_SECONDS: int = 30

    # Bot simulator
    BOT_RECENT_COMMANDS_LIMIT: int = 10

    @property
    def oauth_scopes(self) -> str:
        return " ".join(
            scope.strip() for scope in self.DISCORD_OAUTH_SCOPES.split() if scope.strip()
        )

    @property
    def public_base_url(self) -> str | None:
        cleaned = self.PUBLIC_BASE_URL.strip().rstrip("/")
        return cleaned or None

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def cors_allow_methods(self) -> str:
        return ", ".join(self._split_csv(self.CORS_ALLOW_METHODS))

    @property
    def cors_allow_headers(self) -> str:
        return ", ".join(self._split_csv(self.CORS_ALLOW_HEADERS))

    @staticmethod
    def _split_csv(raw: str) -> list[str]:
        return [item.strip() for item in raw.split(",") if item.strip()]


@lru_cache
def get_settings() -> PortalSettings:
    return PortalSettings()
