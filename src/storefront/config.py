"""Application settings loaded from environment variables.

Domain infrastructure (databases, brokers, event store) is configured in
``domain.toml``; this module covers everything the API edge needs to build
its collaborators.
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Development-only secrets; never accepted with the live gateway
DEV_JWT_SECRET = "change-me"
DEV_WEBHOOK_SECRET = "whsec_test_secret"

STRIPE_KEY_PREFIXES = ("sk_test_", "sk_live_")


class Settings(BaseSettings):
    """Storefront settings, read from ``STOREFRONT_*`` variables or ``.env``."""

    # Auth
    jwt_secret: str = Field(default=DEV_JWT_SECRET, description="HMAC secret for access tokens")
    jwt_algorithm: str = Field(default="HS256")
    jwt_expiry_days: int = Field(default=7)

    # Payment gateway
    gateway: str = Field(default="fake", description="'stripe' or 'fake'")
    stripe_secret_key: str = Field(default="")
    stripe_webhook_secret: str = Field(default=DEV_WEBHOOK_SECRET, description="Webhook signing secret")
    currency: str = Field(default="usd")

    # Object storage
    storage: str = Field(default="memory", description="'s3' or 'memory'")
    s3_bucket: str = Field(default="storefront-uploads")
    s3_region: str = Field(default="us-east-1")
    s3_endpoint_url: str | None = Field(default=None)
    s3_public_url: str | None = Field(default=None, description="Base URL objects are served from")

    # Email
    smtp_host: str = Field(default="smtp.gmail.com")
    smtp_port: int = Field(default=587)
    smtp_user: str = Field(default="")
    smtp_password: str = Field(default="")
    admin_email: str = Field(default="admin@ceylonsoftwarehub.com")

    # HTTP
    allowed_origins: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="CORS allowed origins (comma-separated)",
    )
    rate_limit_enabled: bool = Field(default=True)
    rate_limit: str = Field(default="100 per 15 minutes", description="Per-client request limit")

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def check_live_gateway_secrets(self) -> "Settings":
        """The Stripe gateway needs real credentials, not the development defaults."""
        if self.gateway != "stripe":
            return self

        if not self.stripe_secret_key.startswith(STRIPE_KEY_PREFIXES):
            raise ValueError("Invalid Stripe secret key format. Must start with 'sk_test_' or 'sk_live_'")
        if not self.stripe_webhook_secret or self.stripe_webhook_secret == DEV_WEBHOOK_SECRET:
            raise ValueError("STOREFRONT_STRIPE_WEBHOOK_SECRET must be set to the endpoint's signing secret")
        if not self.jwt_secret or self.jwt_secret == DEV_JWT_SECRET:
            raise ValueError("STOREFRONT_JWT_SECRET must be set when running against Stripe")
        return self

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def mail_enabled(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)


@lru_cache
def get_settings() -> Settings:
    return Settings()
