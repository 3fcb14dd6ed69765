"""Google provider (OAuth2 userinfo endpoint)."""

from percolate_identity.extraction import UserSchema, as_mailbox, chain
from percolate_identity.providers.base import BaseProvider

NAME_GOOGLE = "google"


class GoogleProvider(BaseProvider):
    """Google OAuth2 provider.

    Returned user info example:
    {
        "sub": "110169484474386276334",
        "name": "Ada Lovelace",
        "given_name": "Ada",
        "family_name": "Lovelace",
        "picture": "https://lh3.googleusercontent.com/a/...",
        "email": "ada@gmail.com",
        "email_verified": true
    }
    """

    name = NAME_GOOGLE
    display_name = "Google"

    default_auth_url = "https://accounts.google.com/o/oauth2/v2/auth"
    default_token_url = "https://oauth2.googleapis.com/token"
    default_user_api_url = "https://www.googleapis.com/oauth2/v3/userinfo"
    default_scopes = (
        "https://www.googleapis.com/auth/userinfo.profile",
        "https://www.googleapis.com/auth/userinfo.email",
    )

    schema = UserSchema(
        id=chain("$.sub"),
        email=chain("$.email", convert=as_mailbox),
        name=(
            chain("$.given_name"),
            chain("$.family_name"),
        ),
        avatar_url=chain("$.picture"),
    )
