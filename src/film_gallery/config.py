"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    storage_bucket: str = "catalog-images"
    max_image_size_mb: int = 10
    mailtrap_api_key: str | None = None
    mailtrap_api_url: str = "https://send.api.mailtrap.io/api/send"
    notification_sender: str = "noreply@example.com"
    admin_notification_emails: str | None = None
    site_url: str = "http://localhost:3000"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_email_list(raw: str | None) -> list[str]:
    """Parse a comma separated list of email addresses from env."""
    if raw is None:
        return []
    emails: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value and "@" in value and value not in emails:
            emails.append(value)
    return emails
