from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # ─────────── APP ───────────
    app_name: str = "Freelance Marketplace API"
    environment: str = "dev"
    log_level: str = "INFO"

    # ─────────── API ───────────
    api_prefix: str = "/api/v1"
    request_id_header: str = "X-Request-Id"
    cors_origins: str = "http://localhost:3000"

    # ─────────── DATABASE ───────────
    database_url: str

    # ─────────── JWT / AUTH ───────────
    jwt_secret_key: str
    jwt_refresh_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_access_token_minutes: int = 60 * 24 * 7  # 7 days
    jwt_refresh_token_days: int = 30

    bcrypt_rounds: int = 12
    password_reset_token_minutes: int = 10

    # ─────────── REFRESH COOKIE ───────────
    refresh_cookie_name: str = "refreshToken"
    refresh_cookie_remember_days: int = 30
    refresh_cookie_session_days: int = 1

    # no mail transport yet; opt in to return the reset token in the response body (dev only)
    expose_reset_token: bool = False

    @model_validator(mode="after")
    def _secrets_differ(self) -> "Settings":
        if self.jwt_secret_key == self.jwt_refresh_secret_key:
            raise ValueError("jwt_refresh_secret_key must differ from jwt_secret_key")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in {"prod", "production"}

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
