"""GitHub provider.

GitHub only returns the public profile email from ``/user``. When a user
keeps their address private the primary verified one is looked up from
``/user/emails`` (requires the ``user:email`` scope).
"""

import json

from loguru import logger

from percolate_identity.errors import UserFetchError
from percolate_identity.extraction import UserSchema, as_identifier, as_mailbox, chain
from percolate_identity.models import AuthUser, Token
from percolate_identity.providers.base import BaseProvider

NAME_GITHUB = "github"


class GitHubProvider(BaseProvider):
    """GitHub OAuth2 provider."""

    name = NAME_GITHUB
    display_name = "GitHub"

    default_auth_url = "https://github.com/login/oauth/authorize"
    default_token_url = "https://github.com/login/oauth/access_token"
    default_user_api_url = "https://api.github.com/user"
    default_scopes = ("read:user", "user:email")

    emails_api_url = "https://api.github.com/user/emails"

    schema = UserSchema(
        id=chain("$.id", convert=as_identifier),
        email=chain("$.email", convert=as_mailbox),
        # Display name is optional on GitHub; the login is always present.
        name=(chain("$.name", "$.login"),),
        username=chain("$.login"),
        avatar_url=chain("$.avatar_url"),
    )

    async def fetch_auth_user(self, token: Token) -> AuthUser:
        user = await super().fetch_auth_user(token)
        if user.email:
            return user

        email = await self._fetch_primary_email(token)
        if not email:
            return user
        return user.model_copy(update={"email": email})

    async def _fetch_primary_email(self, token: Token) -> str:
        """Return the primary verified address from ``/user/emails`` or ""."""
        try:
            data = await self._authorized_get(self.emails_api_url, token)
            emails = json.loads(data)
        except (UserFetchError, ValueError) as e:
            logger.warning(f"GitHub email lookup skipped: {e}")
            return ""

        if not isinstance(emails, list):
            return ""

        for entry in emails:
            if isinstance(entry, dict) and entry.get("primary") and entry.get("verified"):
                return as_mailbox(entry.get("email")) or ""
        return ""
