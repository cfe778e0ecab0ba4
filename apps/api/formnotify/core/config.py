"""Application configuration with environment variables."""

from urllib.parse import urlsplit

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Application identity
    APP_NAME: str = "FormNotify"
    APP_URL: str = "http://localhost:3000"

    # Self-hosted deployments own their sender address (no +timestamp rewrite)
    SELF_HOSTED: bool = False

    # Mail transports
    MAIL_MAILER: str = "smtp"  # Default transport id
    MAIL_CUSTOM_MAILER: str = "custom_smtp"  # Profile id for workspace SMTP
    MAIL_FROM_ADDRESS: str = "notifications@localhost"

    # Signing (opaque submission ids, file links)
    SIGNING_SECRET: str = "change-this-in-production"
    SUBMISSION_ID_SIGNATURE_LENGTH: int = 10
    SIGNED_URL_TTL_SECONDS: int = 7 * 86400

    @property
    def mail_domain(self) -> str:
        """Host part of APP_URL, used as the Message-ID domain."""
        url = (self.APP_URL or "").strip()
        host = urlsplit(url).hostname
        if host:
            return host
        # No scheme: take whatever follows "://" (or the raw value)
        return url.split("://", 1)[-1].split("/", 1)[0]

    @property
    def is_dev(self) -> bool:
        return self.ENV == "dev"


settings = Settings()
