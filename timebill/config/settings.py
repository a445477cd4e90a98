"""
Configuration management for the billing API.
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEVELOPMENT_SECRET_KEY = "dev-secret-change-me"


class TimebillConfig(BaseSettings):
    """Configuration settings for the billing API."""

    # Database
    database_url: str = Field(
        default="sqlite:///./timebill.db", alias="DATABASE_URL"
    )
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # Authentication
    secret_key: str = Field(default=DEVELOPMENT_SECRET_KEY, alias="SECRET_KEY")
    token_max_age_seconds: int = Field(
        default=30 * 24 * 60 * 60, gt=0, alias="TOKEN_MAX_AGE_SECONDS"
    )
    bcrypt_rounds: int = Field(default=10, ge=4, le=31, alias="BCRYPT_ROUNDS")

    # HTTP
    frontend_url: str = Field(default="http://localhost:3000", alias="FRONTEND_URL")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000, alias="PORT")

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Invoicing
    invoice_prefix: str = Field(default="INV", min_length=1, alias="INVOICE_PREFIX")
    default_payment_days: int = Field(default=30, ge=0, alias="DEFAULT_PAYMENT_DAYS")
    business_name: str = Field(default="Timebill Consulting", alias="BUSINESS_NAME")
    business_address: str = Field(default="", alias="BUSINESS_ADDRESS")
    business_email: str = Field(default="billing@example.com", alias="BUSINESS_EMAIL")
    payment_terms_text: str = Field(
        default="Due within 30 days via bank transfer", alias="PAYMENT_TERMS_TEXT"
    )
    email_sender: str = Field(default="billing@example.com", alias="EMAIL_SENDER")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()

    @field_validator("invoice_prefix")
    @classmethod
    def validate_invoice_prefix(cls, v):
        """Strip whitespace and a trailing dash from the invoice prefix."""
        cleaned = v.strip().rstrip("-")
        if not cleaned:
            raise ValueError("Invoice prefix cannot be empty")
        return cleaned

    @model_validator(mode="after")
    def validate_production_secret(self) -> "TimebillConfig":
        """Refuse the development secret key in production."""
        if self.environment == "production" and self.secret_key == DEVELOPMENT_SECRET_KEY:
            raise ValueError("SECRET_KEY must be set in production")
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


def load_config(env_file: Optional[str] = None) -> TimebillConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return TimebillConfig()


# Global configuration instance
_config: Optional[TimebillConfig] = None


def get_config() -> TimebillConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> TimebillConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
