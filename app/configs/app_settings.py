from pydantic_settings import BaseSettings
from typing import Literal, Optional

# BaseSettings from pydantic-settings pulls values from the system environment first, then from the .env file, then the defaults below.
# On the serverless platform there is no .env file, the values come from the project's environment variables dashboard.


class Settings(BaseSettings):
    # Cakto webhook secret (when missing, the webhook accepts any request and only logs a warning)
    CAKTO_WEBHOOK_SECRET: Optional[str] = None

    # API Settings
    API_PREFIX: str = "/api"

    # Email settings ("resend" or "smtp")
    EMAIL_PROVIDER: Literal["resend", "smtp"] = "resend"
    EMAIL_FROM: str = "Painel PrecisionX <nao-responder@suaproducao.com>"

    # Resend API Key
    RESEND_API_KEY: Optional[str] = None

    # SMTP settings
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = True
    SMTP_TIMEOUT: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        # the same .env is shared with the frontend build, so unrelated keys are ignored instead of rejected
        extra = "ignore"


# module is executed once per process, every "from app.configs.app_settings import settings" reuses this instance
settings = Settings()


def get_settings() -> Settings:
    """Dependency function to get the process-wide settings"""
    return settings
