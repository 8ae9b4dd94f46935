"""Identity provider adapters: reduce a provider token to a local user.

Each adapter fetches the provider profile and finds or creates the user
identified by '<provider>:<provider user id>' in the tenant's namespace.
Provider failures (HTTP errors, rejected tokens, unexpected payloads) are
logged and reported as None, never raised.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

import httpx
from authlib.integrations.httpx_client import AsyncOAuth1Client

from tenantauth.application.interfaces import IObjectStore
from tenantauth.core.constants import (
    ID_SEPARATOR,
    PROVIDER_FACEBOOK,
    PROVIDER_GITHUB,
    PROVIDER_GOOGLE,
    PROVIDER_LINKEDIN,
    PROVIDER_TWITTER,
)
from tenantauth.domain.entities import UserEntity
from tenantauth.shared.telemetry.logging import get_logger
from tenantauth.shared.utils.datetime import utc_now_ms
from tenantauth.shared.utils.generators import generate_cuid

logger = get_logger(__name__)


@dataclass
class ProviderProfile:
    """Normalized profile returned by a provider."""

    provider_user_id: str
    name: str | None = None
    email: str | None = None
    picture: str | None = None


class IdentityProvider(ABC):
    """Base adapter: profile fetch is provider specific, user resolution is shared."""

    PROVIDER_NAME: ClassVar[str]
    credential_parts: ClassVar[int] = 1

    def __init__(self, store: IObjectStore, http_client: httpx.AsyncClient) -> None:
        self.store = store
        self.http_client = http_client

    @property
    def name(self) -> str:
        return self.PROVIDER_NAME

    @abstractmethod
    async def fetch_profile(self, *credentials: str) -> ProviderProfile | None:
        """Return the provider profile for credentials, or None if rejected."""
        ...

    async def get_or_create_user(
        self, namespace: str, *credentials: str
    ) -> UserEntity | None:
        """Resolve the local user for credentials, creating it on first login."""
        if not namespace or len(credentials) != self.credential_parts:
            return None
        if not all(c and c.strip() for c in credentials):
            return None
        try:
            profile = await self.fetch_profile(*credentials)
        except (httpx.HTTPError, AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("%s profile lookup failed: %s", self.PROVIDER_NAME, e)
            return None
        if profile is None or not profile.provider_user_id:
            return None

        identifier = f"{self.PROVIDER_NAME}{ID_SEPARATOR}{profile.provider_user_id}"
        user = await self.store.find_user_by_identifier(namespace, identifier)
        if user is not None:
            if self._refresh_profile(user, profile):
                await self.store.overwrite(namespace, user)
            return user

        user = UserEntity(
            id=generate_cuid(),
            namespace=namespace,
            identifier=identifier,
            name=profile.name,
            email=profile.email,
            picture=profile.picture,
            created_at=utc_now_ms(),
        )
        if await self.store.create(namespace, user) is None:
            logger.warning("Could not create user %s in %s", identifier, namespace)
            return None
        logger.info("Created user %s (%s) in %s", user.id, identifier, namespace)
        return user

    @staticmethod
    def _refresh_profile(user: UserEntity, profile: ProviderProfile) -> bool:
        """Copy changed profile fields onto user; return True if anything changed."""
        changed = False
        for attr in ("name", "email", "picture"):
            value = getattr(profile, attr)
            if value and value != getattr(user, attr):
                setattr(user, attr, value)
                changed = True
        return changed

    async def _get_json(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> Any | None:
        response = await self.http_client.get(url, headers=headers, params=params)
        if response.status_code != 200:
            logger.info(
                "%s rejected token: status=%d", self.PROVIDER_NAME, response.status_code
            )
            return None
        return response.json()


class FacebookProvider(IdentityProvider):
    """Facebook Graph API profile."""

    PROVIDER_NAME = PROVIDER_FACEBOOK
    PROFILE_URL = "https://graph.facebook.com/me"

    async def fetch_profile(self, *credentials: str) -> ProviderProfile | None:
        data = await self._get_json(
            self.PROFILE_URL,
            params={
                "access_token": credentials[0],
                "fields": "id,name,email,picture.width(400).type(square).height(400)",
            },
        )
        if not data or not data.get("id"):
            return None
        picture = (data.get("picture") or {}).get("data", {}).get("url")
        return ProviderProfile(
            provider_user_id=str(data["id"]),
            name=data.get("name"),
            email=data.get("email"),
            picture=picture,
        )


class GoogleProvider(IdentityProvider):
    """Google OpenID Connect userinfo."""

    PROVIDER_NAME = PROVIDER_GOOGLE
    PROFILE_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

    async def fetch_profile(self, *credentials: str) -> ProviderProfile | None:
        data = await self._get_json(
            self.PROFILE_URL, headers={"Authorization": f"Bearer {credentials[0]}"}
        )
        if not data or not data.get("sub"):
            return None
        return ProviderProfile(
            provider_user_id=str(data["sub"]),
            name=data.get("name"),
            email=data.get("email"),
            picture=data.get("picture"),
        )


class GitHubProvider(IdentityProvider):
    """GitHub REST user profile; falls back to /user/emails for a private email."""

    PROVIDER_NAME = PROVIDER_GITHUB
    PROFILE_URL = "https://api.github.com/user"
    EMAILS_URL = "https://api.github.com/user/emails"

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
        }

    async def fetch_profile(self, *credentials: str) -> ProviderProfile | None:
        headers = self._headers(credentials[0])
        data = await self._get_json(self.PROFILE_URL, headers=headers)
        if not data or not data.get("id"):
            return None
        email = data.get("email")
        if not email:
            emails = await self._get_json(self.EMAILS_URL, headers=headers)
            if not isinstance(emails, list):
                emails = []
            primary = [
                e
                for e in emails
                if isinstance(e, dict) and e.get("primary") and e.get("verified")
            ]
            if primary:
                email = primary[0].get("email")
        return ProviderProfile(
            provider_user_id=str(data["id"]),
            name=data.get("name") or data.get("login"),
            email=email,
            picture=data.get("avatar_url"),
        )


class LinkedInProvider(IdentityProvider):
    """LinkedIn OpenID Connect userinfo."""

    PROVIDER_NAME = PROVIDER_LINKEDIN
    PROFILE_URL = "https://api.linkedin.com/v2/userinfo"

    async def fetch_profile(self, *credentials: str) -> ProviderProfile | None:
        data = await self._get_json(
            self.PROFILE_URL, headers={"Authorization": f"Bearer {credentials[0]}"}
        )
        if not data or not data.get("sub"):
            return None
        return ProviderProfile(
            provider_user_id=str(data["sub"]),
            name=data.get("name"),
            email=data.get("email"),
            picture=data.get("picture"),
        )


class TwitterProvider(IdentityProvider):
    """Twitter OAuth 1.0a: needs the user's token and token secret.

    verify_credentials is signed with the platform consumer key plus the
    user's token pair.
    """

    PROVIDER_NAME = PROVIDER_TWITTER
    PROFILE_URL = "https://api.twitter.com/1.1/account/verify_credentials.json"
    credential_parts = 2

    def __init__(
        self,
        store: IObjectStore,
        http_client: httpx.AsyncClient,
        consumer_key: str,
        consumer_secret: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ) -> None:
        super().__init__(store, http_client)
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.transport = transport
        self.timeout = timeout

    async def fetch_profile(self, *credentials: str) -> ProviderProfile | None:
        if not self.consumer_key or not self.consumer_secret:
            logger.warning("Twitter login attempted but consumer credentials are not set")
            return None
        token, token_secret = credentials
        async with AsyncOAuth1Client(
            client_id=self.consumer_key,
            client_secret=self.consumer_secret,
            token=token,
            token_secret=token_secret,
            transport=self.transport,
            timeout=self.timeout,
        ) as client:
            response = await client.get(
                self.PROFILE_URL,
                params={"include_email": "true", "skip_status": "true"},
            )
        if response.status_code != 200:
            logger.info("twitter rejected token: status=%d", response.status_code)
            return None
        data = response.json()
        if not data or not data.get("id_str"):
            return None
        return ProviderProfile(
            provider_user_id=str(data["id_str"]),
            name=data.get("name"),
            email=data.get("email"),
            picture=data.get("profile_image_url_https"),
        )
