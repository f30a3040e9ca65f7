"""Configuration management using pydantic-settings"""

from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_PLACEHOLDER_URL = "https://i.imgur.com/7DrMrhN.png"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    log_level: str = Field(default="INFO", description="Logging level")

    # Database mode: 'supabase' or 'sqlite'
    db_mode: str = Field(default="sqlite", description="Database backend: 'supabase' or 'sqlite'")
    database_path: str = Field(default="./data/contracts.db", description="Path to SQLite database")

    # Supabase settings
    supabase_url: Optional[str] = Field(default=None, description="Supabase project URL")
    supabase_key: Optional[str] = Field(default=None, description="Supabase anon key")
    supabase_service_key: Optional[str] = Field(default=None, description="Supabase service role key")

    # Automation webhook
    webhook_url: Optional[str] = Field(default=None, description="Automation service webhook URL")
    webhook_url_extra: Optional[str] = Field(
        default=None, description="Alternate webhook URL, takes precedence over webhook_url"
    )
    webhook_secret: str = Field(default="", description="Shared secret sent as X-Webhook-Secret")

    # Callback target handed to the automation service
    app_url: str = Field(default="http://localhost:3000", description="Public base URL of this service")
    callback_path: str = Field(
        default="/api/webhook/contract-pdf-ready", description="Path the automation service calls back"
    )

    # Media slots
    placeholder_image_url: str = Field(
        default=DEFAULT_PLACEHOLDER_URL, description="Image used for missing or broken media URLs"
    )
    storage_bucket: str = Field(
        default="promoter-documents", description="Storage bucket used to expand bare object paths"
    )

    # Storage folder per registry storage key, e.g. {"freelance": "1AbC..."}
    storage_folders: Dict[str, str] = Field(
        default_factory=dict, description="Output folder id keyed by contract type storage key"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def effective_webhook_url(self) -> Optional[str]:
        """Webhook URL to dispatch to, or None when dispatch is not configured."""
        return self.webhook_url_extra or self.webhook_url or None

    @property
    def callback_url(self) -> str:
        return f"{self.app_url.rstrip('/')}{self.callback_path}"


def get_settings() -> Settings:
    """Get application settings"""
    return Settings()
