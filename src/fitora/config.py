"""Fitora API — configuration loaded from environment."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, loaded from .env or environment variables."""

    # ── Database ──────────────────────────────────────────
    database_url: str = "sqlite+aiosqlite:///./fitora.db"

    # ── SMTP relay ────────────────────────────────────────
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    email_from: str = ""

    # ── OTP ───────────────────────────────────────────────
    otp_ttl_seconds: int = 300
    otp_max_attempts: int = 5
    otp_sweep_interval_seconds: float = 60.0  # 0 disables the sweeper

    # ── API client (simulator) ────────────────────────────
    api_base_url: str = "http://localhost:8000/api"

    # ── App ───────────────────────────────────────────────
    app_name: str = "Fitora"
    environment: str = "development"
    debug: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def expose_otp(self) -> bool:
        """Return issued codes in API responses (never in production)."""
        return not self.is_production

    @property
    def email_configured(self) -> bool:
        return bool(self.smtp_username and self.smtp_password)

    @property
    def sender(self) -> str:
        return self.email_from or f'"{self.app_name}" <{self.smtp_username}>'


# Singleton settings instance
settings = Settings()
