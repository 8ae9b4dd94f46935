"""Tests for TokenLifecycleService: issue, refresh, revoke, authenticate."""

import pytest

from tenantauth.api.v1.dependencies import AuthContainer
from tenantauth.application.dtos import TenantCreationResult
from tenantauth.application.services import TokenLifecycleService
from tenantauth.core.constants import BEARER_CHALLENGE, INVALID_TOKEN_CHALLENGE
from tenantauth.domain.enums import TokenState
from tenantauth.domain.exceptions import (
    AuthenticationException,
    BadRequestException,
    TenantNotFoundException,
    UnauthorizedException,
)
from tests.conftest import SESSION_TIMEOUT_SECONDS, START_MS, FakeClock, FakeProvider


@pytest.fixture
def lifecycle(container: AuthContainer) -> TokenLifecycleService:
    return container.lifecycle


async def _issue(lifecycle: TokenLifecycleService, token: str = "gh-token") -> str:
    result = await lifecycle.issue("github", "app:my-app", token)
    assert result.ok, result.error
    return result.token.access_token


async def test_issue_returns_signed_token_for_tenant(
    lifecycle: TokenLifecycleService, tenant: TenantCreationResult
) -> None:
    result = await lifecycle.issue("github", "app:my-app", "gh-token")
    assert result.ok
    assert result.state is TokenState.VALID
    assert result.user.namespace == "my-app"
    assert result.user.identifier == "github:1001"
    assert result.token.claims.tenant_id == "app:my-app"
    assert result.token.claims.subject == result.user.id
    assert result.token.expires == START_MS + SESSION_TIMEOUT_SECONDS * 1000


async def test_issue_accepts_bare_tenant_name_and_provider_case(
    lifecycle: TokenLifecycleService, tenant: TenantCreationResult
) -> None:
    result = await lifecycle.issue("GitHub", "my-app", "gh-token")
    assert result.ok
    assert result.token.claims.tenant_id == "app:my-app"


@pytest.mark.parametrize(
    ("provider", "appid", "token"),
    [
        (None, "app:my-app", "gh-token"),
        ("github", None, "gh-token"),
        ("github", "app:my-app", None),
        ("github", "app:my-app", "  "),
        ("", "", ""),
    ],
)
async def test_issue_missing_fields_is_bad_request(
    lifecycle: TokenLifecycleService,
    tenant: TenantCreationResult,
    provider: str | None,
    appid: str | None,
    token: str | None,
) -> None:
    result = await lifecycle.issue(provider, appid, token)
    assert not result.ok
    assert isinstance(result.error, BadRequestException)


async def test_issue_unknown_provider_is_bad_request(
    lifecycle: TokenLifecycleService, tenant: TenantCreationResult
) -> None:
    result = await lifecycle.issue("myspace", "app:my-app", "x")
    assert isinstance(result.error, BadRequestException)
    assert result.error.details == {"field": "provider"}


async def test_issue_rejected_credential_is_authentication_error(
    lifecycle: TokenLifecycleService, tenant: TenantCreationResult
) -> None:
    result = await lifecycle.issue("github", "app:my-app", "wrong")
    assert isinstance(result.error, AuthenticationException)


async def test_issue_for_unknown_tenant(lifecycle: TokenLifecycleService) -> None:
    result = await lifecycle.issue("github", "app:nope", "gh-token")
    assert isinstance(result.error, TenantNotFoundException)


async def test_issue_splits_compound_credential(
    lifecycle: TokenLifecycleService,
    tenant: TenantCreationResult,
    twitter: FakeProvider,
) -> None:
    result = await lifecycle.issue("twitter", "app:my-app", "tw-token:tw-secret")
    assert result.ok
    assert twitter.calls == [("my-app", ("tw-token", "tw-secret"))]


@pytest.mark.parametrize("credential", ["tw-token", "tw-token:", ":tw-secret"])
async def test_issue_malformed_compound_credential_is_bad_request(
    lifecycle: TokenLifecycleService,
    tenant: TenantCreationResult,
    twitter: FakeProvider,
    credential: str,
) -> None:
    result = await lifecycle.issue("twitter", "app:my-app", credential)
    assert isinstance(result.error, BadRequestException)
    assert result.error.details == {"field": "token"}
    assert twitter.calls == []


async def test_refresh_valid_token_returns_same_token(
    lifecycle: TokenLifecycleService, tenant: TenantCreationResult
) -> None:
    token = await _issue(lifecycle)
    result = await lifecycle.refresh(token)
    assert result.ok
    assert result.state is TokenState.VALID
    assert result.token.access_token == token


async def test_refresh_expired_token_reissues(
    lifecycle: TokenLifecycleService, tenant: TenantCreationResult, clock: FakeClock
) -> None:
    token = await _issue(lifecycle)
    clock.advance(SESSION_TIMEOUT_SECONDS)
    assert await lifecycle.evaluate(token) is TokenState.EXPIRED

    result = await lifecycle.refresh(token)
    assert result.ok
    assert result.state is TokenState.EXPIRED
    assert result.token.access_token != token
    assert result.token.expires == clock() + SESSION_TIMEOUT_SECONDS * 1000
    assert await lifecycle.evaluate(result.token.access_token) is TokenState.VALID


async def test_revocation_at_issue_instant_does_not_revoke(
    lifecycle: TokenLifecycleService, tenant: TenantCreationResult
) -> None:
    """Only tokens issued strictly before the stamp are revoked."""
    token = await _issue(lifecycle)
    result = await lifecycle.revoke(token)
    assert result.revoke_tokens_at == START_MS
    assert await lifecycle.evaluate(token) is TokenState.VALID


async def test_revoke_then_token_is_rejected(
    lifecycle: TokenLifecycleService, tenant: TenantCreationResult, clock: FakeClock
) -> None:
    token = await _issue(lifecycle)
    clock.advance(1)
    revoked = await lifecycle.revoke(token)
    assert revoked.ok
    assert revoked.revoke_tokens_at == START_MS + 1000
    assert revoked.message.startswith("All tokens will be revoked at ")

    auth = await lifecycle.authenticate(token)
    assert auth.state is TokenState.REVOKED
    assert isinstance(auth.error, UnauthorizedException)
    assert auth.error.challenge == INVALID_TOKEN_CHALLENGE

    refreshed = await lifecycle.refresh(token)
    assert refreshed.state is TokenState.REVOKED
    assert not refreshed.ok


async def test_revoke_accepts_expired_token_and_explicit_stamp(
    lifecycle: TokenLifecycleService, tenant: TenantCreationResult, clock: FakeClock
) -> None:
    token = await _issue(lifecycle)
    clock.advance(SESSION_TIMEOUT_SECONDS + 10)
    stamp = clock() + 60_000
    result = await lifecycle.revoke(token, stamp)
    assert result.ok
    assert result.state is TokenState.EXPIRED
    assert result.revoke_tokens_at == stamp
    assert await lifecycle.evaluate(token) is TokenState.REVOKED


@pytest.mark.parametrize("stamp", [0, -5, None])
async def test_revoke_without_positive_stamp_uses_now(
    lifecycle: TokenLifecycleService,
    tenant: TenantCreationResult,
    clock: FakeClock,
    stamp: int | None,
) -> None:
    token = await _issue(lifecycle)
    clock.advance(5)
    result = await lifecycle.revoke(token, stamp)
    assert result.revoke_tokens_at == clock()


async def test_revoke_invalid_token_is_unauthorized_with_plain_challenge(
    lifecycle: TokenLifecycleService, tenant: TenantCreationResult
) -> None:
    result = await lifecycle.revoke("garbage")
    assert result.state is TokenState.INVALID
    assert isinstance(result.error, UnauthorizedException)
    assert result.error.challenge == BEARER_CHALLENGE
    assert result.error.message == "Invalid or expired token."


async def test_fresh_issue_clears_revocation(
    lifecycle: TokenLifecycleService,
    tenant: TenantCreationResult,
    container: AuthContainer,
    clock: FakeClock,
) -> None:
    token = await _issue(lifecycle)
    clock.advance(1)
    await lifecycle.revoke(token)

    clock.advance(1)
    result = await lifecycle.issue("github", "app:my-app", "gh-token")
    assert result.ok
    stored = await container.store.read("my-app", result.user.id)
    assert stored.revoke_tokens_at is None
    assert await lifecycle.evaluate(result.token.access_token) is TokenState.VALID


async def test_secret_rotation_invalidates_outstanding_tokens(
    lifecycle: TokenLifecycleService,
    tenant: TenantCreationResult,
    container: AuthContainer,
) -> None:
    token = await _issue(lifecycle)
    await container.tenants.rotate_secret("app:my-app")
    assert await lifecycle.evaluate(token) is TokenState.INVALID
    assert not (await lifecycle.refresh(token)).ok
    assert not (await lifecycle.revoke(token)).ok


async def test_token_is_bound_to_its_tenant(
    lifecycle: TokenLifecycleService,
    tenant: TenantCreationResult,
    container: AuthContainer,
) -> None:
    """Claims naming another tenant do not verify under that tenant's secret."""
    await container.tenants.create(container.tenants.register("Other"))
    issued = await lifecycle.issue("github", "app:my-app", "gh-token")
    forged_claims = container.codec.build_claims(
        issued.user.id, "app:other", START_MS // 1000, SESSION_TIMEOUT_SECONDS
    )
    forged = container.codec.sign(forged_claims, tenant.credentials.secret_key)
    assert await lifecycle.evaluate(forged) is TokenState.INVALID


async def test_inactive_user_token_is_invalid(
    lifecycle: TokenLifecycleService,
    tenant: TenantCreationResult,
    container: AuthContainer,
) -> None:
    issued = await lifecycle.issue("github", "app:my-app", "gh-token")
    user = await container.store.read("my-app", issued.user.id)
    user.active = False
    await container.store.overwrite("my-app", user)
    assert await lifecycle.evaluate(issued.token.access_token) is TokenState.INVALID


async def test_missing_token_is_unauthorized_with_plain_challenge(
    lifecycle: TokenLifecycleService,
) -> None:
    for result in (
        await lifecycle.refresh(None),
        await lifecycle.revoke(""),
        await lifecycle.authenticate(None),
    ):
        assert isinstance(result.error, UnauthorizedException)
        assert result.error.challenge == BEARER_CHALLENGE
    assert await lifecycle.evaluate(None) is TokenState.INVALID


async def test_revoke_with_unrepresentable_stamp_changes_nothing(
    lifecycle: TokenLifecycleService,
    tenant: TenantCreationResult,
    container: AuthContainer,
) -> None:
    """An out-of-range stamp is a bad request and is never persisted."""
    issued = await lifecycle.issue("github", "app:my-app", "gh-token")
    token = issued.token.access_token

    result = await lifecycle.revoke(token, 10**17)
    assert isinstance(result.error, BadRequestException)
    assert result.error.details == {"field": "revokeTokensAt"}

    stored = await container.store.read("my-app", issued.user.id)
    assert stored.revoke_tokens_at is None
    assert await lifecycle.evaluate(token) is TokenState.VALID
