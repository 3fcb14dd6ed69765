"""OAuth2 identity providers for percolate.

Authenticates users against third-party identity services and normalizes
their profiles into a single ``AuthUser`` record:

- Provider interface shared by every identity service
- Authorization URL, code exchange and user info fetch (authlib + httpx)
- Declarative path-query extraction with ordered fallback chains

Supported providers:
- Microsoft (Entra ID, personal accounts)
- Google
- GitHub
"""

from percolate_identity.errors import (
    IdentityProviderError,
    MalformedResponseError,
    PathQueryError,
    TokenExchangeError,
    UnknownProviderError,
    UserFetchError,
)
from percolate_identity.models import AuthUser, Token
from percolate_identity.providers import (
    BaseProvider,
    GitHubProvider,
    GoogleProvider,
    MicrosoftProvider,
    Provider,
    generate_code_verifier,
)
from percolate_identity.registry import (
    available_providers,
    get_provider,
    new_provider_by_name,
    register_provider,
)
from percolate_identity.version import __version__

__all__ = [
    "AuthUser",
    "Token",
    "Provider",
    "BaseProvider",
    "GitHubProvider",
    "GoogleProvider",
    "MicrosoftProvider",
    "generate_code_verifier",
    "available_providers",
    "get_provider",
    "new_provider_by_name",
    "register_provider",
    "IdentityProviderError",
    "TokenExchangeError",
    "UserFetchError",
    "MalformedResponseError",
    "UnknownProviderError",
    "PathQueryError",
    "__version__",
]
