"""Identity provider adapters (facebook, google, github, linkedin, twitter)."""

from tenantauth.infrastructure.external.identity.providers import (
    FacebookProvider,
    GitHubProvider,
    GoogleProvider,
    IdentityProvider,
    LinkedInProvider,
    ProviderProfile,
    TwitterProvider,
)
from tenantauth.infrastructure.external.identity.registry import IdentityProviderRegistry

__all__ = [
    "FacebookProvider",
    "GitHubProvider",
    "GoogleProvider",
    "IdentityProvider",
    "IdentityProviderRegistry",
    "LinkedInProvider",
    "ProviderProfile",
    "TwitterProvider",
]
