"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field, field_validator, ConfigDict

# Project root: fitclub/
PROJECT_ROOT = Path(__file__).parent.parent.parent


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./fitclub.db",
        description="Database connection URL"
    )

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Strava ===
    strava_client_id: Optional[str] = Field(default=None)
    strava_client_secret: Optional[str] = Field(
        default=None,
        # Also accept STRAVA_SECRET
        validation_alias=AliasChoices("strava_client_secret", "strava_secret"),
    )
    strava_redirect_uri: str = Field(
        default="http://localhost:5173/strava/callback",
        description="Where Strava sends the athlete after authorization"
    )
    strava_webhook_verify_token: Optional[str] = Field(default=None)
    strava_token_refresh_margin_seconds: int = Field(
        default=0,
        ge=0,
        description="Refresh access tokens this many seconds before expiry"
    )
    strava_http_timeout: float = Field(default=15.0, gt=0)

    # === Athletes & activities ===
    athlete_id_prefix: str = Field(default="CYA", min_length=1)
    proof_required_distance_km: float = Field(default=10.0, gt=0)
    leaderboard_default_limit: int = Field(default=100, ge=1)

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    @property
    def strava_configured(self) -> bool:
        """Strava calls are only attempted with both credentials set."""
        return bool(self.strava_client_id and self.strava_client_secret)

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
