"""
Configuration management for the payment-gateway and order-status core.

Loads settings from .env via pydantic-settings.

Notes:
    - default_payment_gateway is the fallback slug used when no gateway row is active
    - stripe_timeout_seconds bounds every provider call
    - validate_production_settings() refuses the fake gateway in production
"""
import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Database ────────────────────────────────────────────────────
    database_url: str = "sqlite:///./data/aurum_payments.db"

    # ── Payments ────────────────────────────────────────────────────
    # Slug looked up when no gateway row is active (mirrors payments.default)
    default_payment_gateway: str = "fake"
    default_currency: str = "INR"
    stripe_timeout_seconds: float = Field(default=20.0, ge=1.0, le=60.0)
    # Card-only PaymentIntents on newer Stripe API versions reject statement_descriptor;
    # set STRIPE_STATEMENT_DESCRIPTOR="" to omit it from intent requests
    stripe_statement_descriptor: str = Field(default="AURUMCRAFT", max_length=22)

    # ── Order statuses ──────────────────────────────────────────────
    order_status_default_color: str = "#64748b"
    order_status_page_size: int = 20

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"

    # ── CORS ────────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # allow unknown .env keys without crashing
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        Called during app startup. In production the fake gateway must never be
        the fallback, since it reports every payment as settled.
        """
        if self.environment == "production":
            if self.default_payment_gateway.strip().lower() == "fake":
                raise ValueError(
                    "DEFAULT_PAYMENT_GATEWAY must not be 'fake' in production. "
                    "Configure a real gateway (e.g. 'stripe')."
                )
            if "*" in self.cors_origins:
                raise ValueError(
                    "CORS_ORIGINS must not contain '*' in production. "
                    "Set explicit allowed origins."
                )
            logger.info("Production settings validated")
        else:
            warnings = []
            if self.default_payment_gateway.strip().lower() == "fake":
                warnings.append("DEFAULT_PAYMENT_GATEWAY=fake (payments are simulated)")
            if "*" in self.cors_origins:
                warnings.append("CORS_ORIGINS contains '*' (open access)")
            for w in warnings:
                logger.warning(w)


# Global settings instance
settings = Settings()
