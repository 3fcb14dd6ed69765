"""Identity provider implementations."""

from percolate_identity.providers.base import BaseProvider, Provider, generate_code_verifier
from percolate_identity.providers.github import NAME_GITHUB, GitHubProvider
from percolate_identity.providers.google import NAME_GOOGLE, GoogleProvider
from percolate_identity.providers.microsoft import NAME_MICROSOFT, MicrosoftProvider

__all__ = [
    "BaseProvider",
    "Provider",
    "generate_code_verifier",
    "NAME_GITHUB",
    "NAME_GOOGLE",
    "NAME_MICROSOFT",
    "GitHubProvider",
    "GoogleProvider",
    "MicrosoftProvider",
]
