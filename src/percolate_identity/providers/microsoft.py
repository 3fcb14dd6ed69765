"""Microsoft identity platform provider (Entra ID / personal accounts).

User info comes from the Graph profile resource, which spreads the identity
across collections:

{
    "id": "...",
    "account": [{"id": "...", "userPrincipalName": "ada@contoso.com", ...}],
    "names": [{"first": "Ada", "last": "Lovelace", "displayName": "Ada Lovelace"}],
    "emails": [{"address": "ada@contoso.com", "type": "main"}]
}

API reference:  https://learn.microsoft.com/en-us/graph/api/resources/profile
Graph explorer: https://developer.microsoft.com/en-us/graph/graph-explorer
"""

from percolate_identity.extraction import UserSchema, as_identifier, as_mailbox, chain
from percolate_identity.providers.base import BaseProvider

NAME_MICROSOFT = "microsoft"


class MicrosoftProvider(BaseProvider):
    """Microsoft OAuth2 provider.

    ``tenant`` selects the Entra ID authority: ``common`` (default, any
    account), ``organizations``, ``consumers`` or a tenant id/domain.
    """

    name = NAME_MICROSOFT
    display_name = "Microsoft"

    default_user_api_url = "https://graph.microsoft.com/beta/me/profile"
    default_scopes = ("User.Read",)

    schema = UserSchema(
        id=chain("$.id", convert=as_identifier),
        # Not every account has a mailbox; the UPN is the closest stand-in.
        email=chain(
            "$.emails[0].address",
            "$.account[0].userPrincipalName",
            convert=as_mailbox,
        ),
        name=(
            chain("$.names[0].first"),
            chain("$.names[0].last"),
        ),
    )

    def __init__(self, *args, tenant: str = "common", **kwargs):
        super().__init__(*args, **kwargs)
        self.tenant = tenant

    @property
    def auth_url(self) -> str:
        return f"https://login.microsoftonline.com/{self.tenant}/oauth2/v2.0/authorize"

    @property
    def token_url(self) -> str:
        return f"https://login.microsoftonline.com/{self.tenant}/oauth2/v2.0/token"
