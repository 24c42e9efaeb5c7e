"""TeamSync assistant configuration.

Reads TEAMSYNC_* environment variables (or .env). The data store is
optional at load time: an unconfigured store is reported to the user
by the input guard instead of failing at startup.
"""

from functools import lru_cache

import jwt
from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from shared.config import BaseSettings, supabase_key_field, supabase_url_field


class Settings(BaseSettings):
    """Assistant settings."""

    model_config = SettingsConfigDict(env_prefix="TEAMSYNC_")

    service_name: str = "teamsync-assistant"
    log_level: str = "WARNING"

    # Data store
    supabase_url: str | None = supabase_url_field(required=False)
    supabase_key: str | None = supabase_key_field(required=False)

    # Signed-in user
    access_token: str | None = Field(
        default=None,
        description="User access token (JWT) issued by the auth service",
    )
    user_id: str | None = Field(
        default=None,
        description="Explicit user id; overrides the token's sub claim",
    )

    # Limits
    request_timeout: float = Field(default=10.0, gt=0, description="Seconds per command")
    rate_limit_ms: int = Field(default=1000, ge=0)
    max_message_length: int = Field(default=500, ge=1)
    list_limit: int = Field(default=10, ge=1)

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, v: str | None) -> str | None:
        """Require the project root URL; the client adds /rest/v1 itself."""
        if v is None:
            return v
        v = v.strip().rstrip("/")
        if v.endswith("/rest/v1"):
            raise ValueError("supabase_url must not include /rest/v1")
        return v or None

    @property
    def store_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    def current_user_id(self) -> str | None:
        """Return the signed-in user's id, if any.

        The token signature is not verified here: the store enforces it
        on every request.
        """
        if self.user_id:
            return self.user_id
        if not self.access_token:
            return None
        try:
            claims = jwt.decode(self.access_token, options={"verify_signature": False})
        except jwt.InvalidTokenError:
            return None
        sub = claims.get("sub")
        return str(sub) if sub else None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Raises ValidationError if any value is malformed.
    """
    return Settings()
