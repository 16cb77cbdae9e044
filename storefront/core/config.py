import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class Settings:
    """Centralised application configuration sourced from environment variables."""

    def __init__(self) -> None:
        load_dotenv()
        self.database_path = Path(os.getenv("DATABASE_PATH", "data/storefront.db")).resolve()
        self.api_prefix = os.getenv("API_PREFIX", "/api/v1").rstrip("/")
        self.jwt_secret = os.getenv("JWT_SECRET", "change-me")
        self.jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
        self.access_token_exp_minutes = self._get_int("ACCESS_TOKEN_EXP_MINUTES", default=60)
        self.password_reset_exp_minutes = self._get_int("PASSWORD_RESET_EXP_MINUTES", default=15)
        self.refresh_token_exp_days = self._get_int("REFRESH_TOKEN_EXP_DAYS", default=7)
        self.otp_exp_minutes = self._get_int("OTP_EXP_MINUTES", default=5)
        self.otp_resend_grace_seconds = self._get_int("OTP_RESEND_GRACE_SECONDS", default=30)
        self.bcrypt_rounds = self._get_int("BCRYPT_ROUNDS", default=10)
        self.smtp_host = os.getenv("SMTP_HOST")
        self.smtp_port = self._get_int("SMTP_PORT", default=587)
        self.smtp_username = os.getenv("SMTP_USERNAME")
        self.smtp_password = os.getenv("SMTP_PASSWORD")
        self.smtp_from_email = os.getenv("SMTP_FROM_EMAIL")
        self.mail_from_name = os.getenv("MAIL_FROM_NAME", "Storefront")
        self.frontend_base_url = os.getenv("FRONTEND_BASE_URL", "http://localhost:3000")
        self.seed_admin_enabled = self._get_bool("SEED_ADMIN_ENABLED", default=False)
        self.admin_default_email = os.getenv("ADMIN_EMAIL")
        self.admin_default_password = os.getenv("ADMIN_PASSWORD")
        self.admin_default_username = os.getenv("ADMIN_USERNAME", "admin")
        self.expose_error_details = self._get_bool("EXPOSE_ERROR_DETAILS", default=False)
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        if origins:
            self.cors_allow_origins = [item.strip() for item in origins.split(",") if item.strip()]
        else:
            self.cors_allow_origins = ["*"]
        if not 4 <= self.bcrypt_rounds <= 31:
            raise RuntimeError("BCRYPT_ROUNDS must be between 4 and 31")

    @staticmethod
    def _get_int(key: str, default: Optional[int] = None) -> int:
        value = os.getenv(key)
        if value is None:
            if default is None:
                raise RuntimeError(f"Missing required environment variable: {key}")
            return default
        try:
            return int(value)
        except ValueError as exc:
            raise RuntimeError(f"Environment variable {key} must be an integer") from exc

    @staticmethod
    def _get_bool(key: str, default: bool = False) -> bool:
        value = os.getenv(key)
        if value is None or value == "":
            return default
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
        raise RuntimeError(f"Environment variable {key} must be a boolean")
