"""Registry of identity provider adapters by provider name."""

from __future__ import annotations

import httpx

from tenantauth.application.interfaces import IIdentityProvider, IObjectStore
from tenantauth.core.config import Settings
from tenantauth.infrastructure.external.identity.providers import (
    FacebookProvider,
    GitHubProvider,
    GoogleProvider,
    LinkedInProvider,
    TwitterProvider,
)
from tenantauth.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class IdentityProviderRegistry:
    """Maps provider names to adapters; unknown names resolve to None."""

    def __init__(self, providers: list[IIdentityProvider] | None = None) -> None:
        self._providers: dict[str, IIdentityProvider] = {}
        for provider in providers or []:
            self.register(provider)

    def register(self, provider: IIdentityProvider) -> None:
        self._providers[provider.name.lower()] = provider
        logger.debug("Registered identity provider: %s", provider.name)

    def get(self, name: str) -> IIdentityProvider | None:
        if not name:
            return None
        return self._providers.get(name.strip().lower())

    def list_providers(self) -> list[str]:
        return list(self._providers)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    @classmethod
    def default(
        cls,
        store: IObjectStore,
        http_client: httpx.AsyncClient,
        settings: Settings,
    ) -> IdentityProviderRegistry:
        """Registry with the built-in facebook, google, github, linkedin and twitter adapters."""
        return cls(
            [
                FacebookProvider(store, http_client),
                GoogleProvider(store, http_client),
                GitHubProvider(store, http_client),
                LinkedInProvider(store, http_client),
                TwitterProvider(
                    store,
                    http_client,
                    settings.twitter_consumer_key,
                    settings.twitter_consumer_secret.get_secret_value(),
                    timeout=settings.http_timeout_seconds,
                ),
            ]
        )
