"""Identity provider registry.

Maps configuration keys to provider classes and builds configured instances.
"""

from typing import Any

from loguru import logger

from percolate_identity.errors import UnknownProviderError
from percolate_identity.providers.base import BaseProvider
from percolate_identity.providers.github import GitHubProvider
from percolate_identity.providers.google import GoogleProvider
from percolate_identity.providers.microsoft import MicrosoftProvider
from percolate_identity.settings import settings

_providers: dict[str, type[BaseProvider]] = {
    provider.name: provider for provider in (GitHubProvider, GoogleProvider, MicrosoftProvider)
}


def register_provider(provider: type[BaseProvider]) -> None:
    """Register (or replace) a provider class under its ``name``."""
    if not provider.name:
        raise ValueError(f"{provider.__name__} has no provider name")
    _providers[provider.name] = provider


def available_providers() -> list[str]:
    """Names of all registered providers, sorted."""
    return sorted(_providers)


def new_provider_by_name(name: str, **options: Any) -> BaseProvider:
    """Create a provider instance by configuration key.

    Args:
        name: Provider key (e.g. 'microsoft', 'google', 'github')
        **options: Constructor arguments (client_id, client_secret, scopes, ...)

    Returns:
        Configured provider

    Raises:
        UnknownProviderError: No provider is registered under ``name``

    Example:
        >>> provider = new_provider_by_name("microsoft", client_id="...", tenant="organizations")
    """
    provider_class = _providers.get(name.lower())
    if provider_class is None:
        raise UnknownProviderError(name)
    return provider_class(**options)


def get_provider(name: str) -> BaseProvider:
    """Create a provider from the credentials configured in settings.

    Providers without configured credentials are still created (with empty
    client credentials), which is enough for fetching user info with an
    existing token.

    Raises:
        UnknownProviderError: No provider is registered under ``name``
    """
    credentials = settings.providers.get(name.lower())
    if credentials is None:
        logger.warning(f"No credentials configured for identity provider: {name}")
        return new_provider_by_name(name)

    logger.info(f"Initializing identity provider: {name}")
    return new_provider_by_name(
        name,
        client_id=credentials.client_id,
        client_secret=credentials.client_secret,
        redirect_url=credentials.redirect_url,
        scopes=credentials.scopes,
        pkce=credentials.pkce,
        **credentials.options,
    )
