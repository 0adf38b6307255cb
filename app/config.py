"""Application configuration"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

from app.models import RecipientSet


def parse_emails(value: str = "") -> List[str]:
    """Split a comma-separated address list, dropping blanks"""
    return [item.strip() for item in str(value or "").split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # Delivery lists (comma-separated)
    to_emails: str = ""
    bcc_emails: str = ""

    # Email Service (MailChannels)
    mc_api_key: str = ""
    mailchannels_send_url: str = "https://api.mailchannels.net/tx/v1/send"
    from_email: str = "no-reply@example.com"
    from_name: str = "Website Booking Form"
    guest_from_name: str = "Reservations"
    guest_reply_to: str = ""
    business_name: str = "Our Team"
    site_name: str = "example.com"
    internal_subject_include_email: bool = True

    # Bot Protection (Turnstile)
    turnstile_secret: str = ""
    turnstile_verify_url: str = "https://challenges.cloudflare.com/turnstile/v0/siteverify"
    honeypot_field: str = "company"
    min_fill_ms: int = 3000

    # Form Validation
    required_fields: str = "first_name,last_name,email,phone,date"

    # Outbound HTTP
    http_timeout_seconds: float = 10.0

    # Application Settings
    environment: str = "development"
    api_base_url: str = "http://localhost:8000"

    # Monitoring
    log_level: str = "INFO"

    @property
    def to_emails_list(self) -> List[str]:
        """Parse primary recipients into a list"""
        return parse_emails(self.to_emails)

    @property
    def bcc_emails_list(self) -> List[str]:
        """Parse blind-copy recipients into a list"""
        return parse_emails(self.bcc_emails)

    @property
    def required_fields_list(self) -> List[str]:
        """Parse the required form fields into a list"""
        return [name.strip() for name in self.required_fields.split(",") if name.strip()]

    @property
    def recipient_set(self) -> RecipientSet:
        """Deduplicated delivery lists for the internal notification"""
        return RecipientSet.from_lists(self.to_emails_list, self.bcc_emails_list)

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.environment.lower() == "development"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings"""
    return settings
