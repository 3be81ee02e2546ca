"""
Spotify Ranker – Application configuration.
Reads environment variables from a .env file via pydantic-settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── App ──
    APP_NAME: str = "Spotify Ranker"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ── Database ──
    DATABASE_URL: str = "sqlite+aiosqlite:///./ranker.db"

    # ── JWT ──
    SECRET_KEY: str = "change-me-to-a-random-secret"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # ── Spotify catalog (client credentials) ──
    SPOTIFY_CLIENT_ID: str = ""
    SPOTIFY_CLIENT_SECRET: str = ""

    # ── Image hosting ──
    IMGUR_CLIENT_ID: str = ""

    # ── Seeded admin account ──
    ADMIN_EMAIL: str = "admin@spotify-ranker.com"
    ADMIN_PASSWORD: str = ""

    # ── Caching / paging ──
    CACHE_TTL_SECONDS: float = 5 * 60
    ACTIVITY_PAGE_SIZE: int = 20


settings = Settings()
