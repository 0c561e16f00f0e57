"""
Configuration management for the travel & donation payments backend.

Loads settings from .env via pydantic-settings.

Security notes:
    - Gateway secrets are only ever handed to PaymentService through an
      immutable PaymentConfig; they are never logged or serialized.
    - RAZORPAY_KEY_SECRET (checkout/donation) and RAZORPAY_SECRET (travel)
      are distinct settings. Neither falls back to the other.
    - validate_production_settings() enforces credentials and strict CORS
      in production.
"""
import logging
from dataclasses import dataclass
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.constants import PURPOSE_CHECKOUT, PURPOSE_DONATION, PURPOSE_TRAVEL

logger = logging.getLogger(__name__)

# Verification channels and the setting that holds each one's HMAC secret
CHANNEL_SECRETS = {
    "checkout": "razorpay_key_secret",
    "donation": "razorpay_key_secret",
    "travel": "razorpay_secret",
}

# Order purposes each channel may mark Paid; an order is only confirmed
# through the channel whose secret belongs to it
CHANNEL_PURPOSES = {
    "checkout": (PURPOSE_CHECKOUT, PURPOSE_DONATION),
    "donation": (PURPOSE_CHECKOUT, PURPOSE_DONATION),
    "travel": (PURPOSE_TRAVEL,),
}


@dataclass(frozen=True)
class PaymentConfig:
    """Process-wide payment configuration injected into PaymentService."""

    key_id: str
    secret: str
    supported_currencies: tuple[str, ...]
    gateway_timeout_seconds: float
    purposes: tuple[str, ...]

    def __repr__(self) -> str:
        # Keep the secret out of logs and tracebacks
        return (
            f"PaymentConfig(key_id={self.key_id!r}, secret=***, "
            f"supported_currencies={self.supported_currencies!r}, "
            f"gateway_timeout_seconds={self.gateway_timeout_seconds!r}, "
            f"purposes={self.purposes!r})"
        )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Database ────────────────────────────────────────────────────
    database_url: str = "sqlite:///./data/payments.db"

    # ── Razorpay ────────────────────────────────────────────────────
    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""   # checkout + donation verification, API auth
    razorpay_secret: str = ""       # travel verification
    default_currency: str = "INR"
    supported_currencies: str = "INR"
    gateway_timeout_seconds: float = 15.0

    # ── Auth (JWT) ──────────────────────────────────────────────────
    jwt_secret: str = ""
    jwt_issuer: str = "travel-payments-api"
    jwt_access_ttl_minutes: int = 60

    # ── Uploads ─────────────────────────────────────────────────────
    upload_dir: str = "uploads"
    max_upload_bytes: int = 5 * 1024 * 1024  # 5 MB

    # ── Chat proxy (OpenAI-compatible) ──────────────────────────────
    chat_api_url: str = "https://api.openai.com/v1/chat/completions"
    chat_api_key: str = ""
    chat_model: str = "gpt-4o-mini"
    chat_timeout_seconds: float = 30.0

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"

    # ── CORS ────────────────────────────────────────────────────────
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def supported_currencies_list(self) -> List[str]:
        return [c.strip().upper() for c in self.supported_currencies.split(",") if c.strip()]

    def payment_config(self, channel: str) -> PaymentConfig:
        """
        Build the immutable payment configuration for a verification channel.

        Raises:
            KeyError: if the channel is not one of CHANNEL_SECRETS
        """
        secret_field = CHANNEL_SECRETS[channel]
        return PaymentConfig(
            key_id=self.razorpay_key_id,
            secret=getattr(self, secret_field),
            supported_currencies=tuple(self.supported_currencies_list),
            gateway_timeout_seconds=self.gateway_timeout_seconds,
            purposes=CHANNEL_PURPOSES[channel],
        )

    def validate_production_settings(self):
        """
        Validate settings for production safety.

        Called during app startup. Raises ValueError on unsafe production
        configuration, logs warnings otherwise.
        """
        if self.environment == "production":
            if "*" in self.cors_origins:
                raise ValueError(
                    "CORS_ORIGINS must not contain '*' in production. "
                    "Set explicit allowed origins."
                )
            if not self.razorpay_key_id or not self.razorpay_key_secret:
                raise ValueError(
                    "RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET must be set in production."
                )
            if not self.razorpay_secret:
                raise ValueError(
                    "RAZORPAY_SECRET must be set in production. "
                    "It verifies travel booking payments."
                )
            if not self.jwt_secret:
                raise ValueError(
                    "JWT_SECRET must be set in production. "
                    "It is used to sign access tokens after login."
                )
            logger.info("Production settings validated")
        else:
            warnings = []
            if not self.razorpay_key_secret:
                warnings.append("RAZORPAY_KEY_SECRET not set (checkout verification fails closed)")
            if not self.razorpay_secret:
                warnings.append("RAZORPAY_SECRET not set (travel verification fails closed)")
            if not self.jwt_secret:
                warnings.append("JWT_SECRET not set (login cannot issue tokens)")
            if "*" in self.cors_origins:
                warnings.append("CORS_ORIGINS contains '*' (open access)")
            for w in warnings:
                logger.warning(w)


# Global settings instance
settings = Settings()
