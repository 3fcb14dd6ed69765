"""Token and user models shared by all identity providers."""

import time
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Token(BaseModel):
    """OAuth2 credentials returned by a token exchange.

    Providers only read tokens; refreshing or storing them is up to the caller.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str = Field(description="Bearer access token")
    refresh_token: str = Field(default="", description="Refresh token (if issued)")
    token_type: str = Field(default="Bearer", description="Token type")
    expiry: datetime | None = Field(default=None, description="Access token expiry (UTC)")
    scope: str = Field(default="", description="Granted scope as returned by the provider")
    raw: dict[str, Any] = Field(default_factory=dict, description="Full token response")

    @classmethod
    def from_response(cls, data: Mapping[str, Any]) -> "Token":
        """Build a token from an OAuth2 token endpoint response.

        Accepts either ``expires_at`` (epoch seconds, as set by authlib) or
        ``expires_in`` (seconds from now).

        Example:
            >>> token = Token.from_response({"access_token": "abc", "expires_in": 3600})
            >>> token.token_type
            'Bearer'
        """
        expiry = None
        expires_at = data.get("expires_at")
        expires_in = data.get("expires_in")
        if expires_at is not None:
            expiry = datetime.fromtimestamp(int(expires_at), tz=timezone.utc)
        elif expires_in is not None:
            expiry = datetime.fromtimestamp(time.time() + int(expires_in), tz=timezone.utc)

        scope = data.get("scope") or ""
        if isinstance(scope, (list, tuple)):
            scope = " ".join(scope)

        return cls(
            access_token=str(data["access_token"]),
            refresh_token=str(data.get("refresh_token") or ""),
            token_type=str(data.get("token_type") or "Bearer"),
            expiry=expiry,
            scope=str(scope),
            raw=dict(data),
        )


class AuthUser(BaseModel):
    """Normalized identity returned by every provider.

    Empty ``id``, ``name`` or ``email`` mean the provider payload did not
    carry the field; that is a successful result, not an error. A non-empty
    ``email`` has always passed mailbox validation.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default="", description="Provider-scoped user identifier")
    name: str = Field(default="", description="Display name")
    email: str = Field(default="", description="Validated email address")
    username: str = Field(default="", description="Login handle (if the provider has one)")
    avatar_url: str = Field(default="", description="Profile picture URL")
    raw_user: dict[str, Any] = Field(
        default_factory=dict,
        description="Decoded user info payload, unmodified",
    )
    access_token: str = Field(default="", description="Access token used for the lookup")
    refresh_token: str = Field(default="", description="Refresh token (if issued)")
    expiry: datetime | None = Field(default=None, description="Access token expiry (UTC)")
