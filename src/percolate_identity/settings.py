"""Identity provider settings using Pydantic Settings."""

from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderCredentials(BaseModel):
    """OAuth2 client registration for one identity provider.

    Example (environment):
        PERCOLATE_IDENTITY_PROVIDERS__MICROSOFT__CLIENT_ID=...
        PERCOLATE_IDENTITY_PROVIDERS__MICROSOFT__CLIENT_SECRET=...
        PERCOLATE_IDENTITY_PROVIDERS__MICROSOFT__OPTIONS__TENANT=organizations
    """

    client_id: str = Field(default="", description="OAuth client ID")
    client_secret: str = Field(default="", description="OAuth client secret")
    redirect_url: str = Field(default="", description="Registered redirect URI")
    scopes: list[str] | None = Field(
        default=None,
        description="Scope override (provider defaults when unset)",
    )
    pkce: bool = Field(default=False, description="Send PKCE code challenges")
    options: dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific constructor options (e.g. Microsoft tenant)",
    )


class Settings(BaseSettings):
    """Identity provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PERCOLATE_IDENTITY_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    http_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for token exchange and user info requests",
    )
    user_agent: str = Field(
        default="percolate-identity",
        description="User-Agent header sent to identity providers",
    )
    providers: dict[str, ProviderCredentials] = Field(
        default_factory=dict,
        description="Client credentials keyed by provider name",
    )


settings = Settings()
