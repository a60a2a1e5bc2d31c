from functools import lru_cache
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

REQUIRED_SETTINGS = (
    "DISCORD_BOT_TOKEN",
    "DISCORD_CLIENT_ID",
    "STRIPE_SECRET_KEY",
    "DATABASE_URL",
)

# Query parameters asyncpg does not understand; TLS is driven by DATABASE_SSL.
_SSL_QUERY_PARAMS = {"sslmode", "ssl"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", env_ignore_empty=True)

    # App
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Discord
    DISCORD_BOT_TOKEN: str = ""
    DISCORD_CLIENT_ID: int | None = None
    DISCORD_GUILD_ID: int | None = None
    DISCORD_REQUIRED_ROLE_ID: int | None = None

    # Stripe
    STRIPE_SECRET_KEY: str = ""
    STRIPE_API_VERSION: str = "2025-02-24.acacia"

    # Database
    DATABASE_URL: str = ""
    DATABASE_SSL: bool = True
    DATABASE_POOL_SIZE: int = 5

    # Reporting
    TIMEZONE_OFFSET_HOURS: int = Field(default=0, ge=-12, le=14)

    # Monitoring
    SENTRY_DSN: str = ""
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0

    @property
    def async_database_url(self) -> str:
        return normalise_database_url(self.DATABASE_URL)

    def missing_required(self) -> list[str]:
        """Names of required settings that are unset or blank."""
        return [name for name in REQUIRED_SETTINGS if not str(getattr(self, name) or "").strip()]


def normalise_database_url(url: str) -> str:
    """Rewrite a libpq-style URL into the asyncpg dialect SQLAlchemy expects.

    ``postgres://`` and ``postgresql://`` both map to ``postgresql+asyncpg://``.
    ``sslmode``/``ssl`` query parameters are dropped because asyncpg rejects
    them as unknown connect arguments.
    """
    if not url:
        return url
    if url.startswith("postgres://"):
        url = "postgresql+asyncpg://" + url[len("postgres://"):]
    elif url.startswith("postgresql://"):
        url = "postgresql+asyncpg://" + url[len("postgresql://"):]

    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in _SSL_QUERY_PARAMS]
    return urlunsplit(parts._replace(query=urlencode(query)))


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
