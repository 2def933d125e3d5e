"""Configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SCOPES = "pages_show_list,instagram_basic,instagram_content_publish"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Facebook / Meta app
    facebook_app_id: Optional[str] = Field(
        default=None,
        description="Facebook App ID",
    )
    facebook_app_secret: Optional[str] = Field(
        default=None,
        description="Facebook App Secret",
    )
    facebook_redirect_uri: Optional[str] = Field(
        default=None,
        description="OAuth redirect URI (defaults to <origin>/auth0)",
    )
    facebook_scopes: str = Field(
        default=DEFAULT_SCOPES,
        description="Comma-separated OAuth scopes",
    )
    graph_api_version: str = Field(
        default="v17.0",
        description="Graph API version segment",
    )

    # OpenAI API
    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key for post analysis",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Chat completion model used for post analysis",
    )

    # Deployment
    environment: str = Field(
        default="development",
        description="Deployment environment; 'production' marks cookies Secure",
    )
    render_external_url: Optional[str] = Field(
        default=None,
        description="Public URL assigned by the hosting provider",
    )
    render_external_hostname: Optional[str] = Field(
        default=None,
        description="Public hostname assigned by the hosting provider",
    )

    # Server
    host: str = Field(
        default="127.0.0.1",
        description="Bind address for the web server",
    )
    port: int = Field(
        default=8000,
        description="Bind port for the web server",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def is_facebook_configured(self) -> bool:
        """Check if Facebook app credentials are configured."""
        return bool(self.facebook_app_id and self.facebook_app_secret)

    @property
    def is_openai_configured(self) -> bool:
        """Check if OpenAI API key is configured."""
        return bool(self.openai_api_key)

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def graph_base_url(self) -> str:
        return f"https://graph.facebook.com/{self.graph_api_version}"

    @property
    def oauth_dialog_url(self) -> str:
        return f"https://www.facebook.com/{self.graph_api_version}/dialog/oauth"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
