"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Invalid combinations are rejected at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Every setting has a development default; validate_settings rejects
    values that would make token issuance or the cache unusable.
    """

    # App
    app_name: str = "tenantauth"
    app_version: str = "1.0.0"
    debug: bool = False

    # Session tokens
    session_timeout_seconds: int = 24 * 60 * 60
    jwt_algorithm: str = "HS256"
    # Secret length in bytes of randomness (encoded as url-safe text).
    tenant_secret_bytes: int = 40

    # Request authentication filter
    auth_management_path: str = "/api/v1/auth/jwt"
    protected_path_prefix: str = "/api/v1"
    token_query_param: str = "Authorization"

    # Tenants
    root_namespace: str = "tenantauth"
    # Protects POST /apps; registration is disabled while unset.
    create_tenant_secret: SecretStr | None = None

    # Identity providers
    credential_separator: str = ":"
    http_timeout_seconds: float = 30.0
    twitter_consumer_key: str = ""
    twitter_consumer_secret: SecretStr = SecretStr("")

    # Cache: "memory" (reference, single process, tests) or "redis"
    cache_backend: str = "memory"
    cache_default_namespace: str = "tenantauth"
    cache_key_prefix: str = "tenantauth"
    cache_ttl_tenants: int = 900
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None

    # CORS / middleware
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"
    request_id_header: str = "X-Request-ID"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate token lifetime, separators and cache backend."""
        if self.session_timeout_seconds <= 0:
            raise ValueError("SESSION_TIMEOUT_SECONDS must be a positive number of seconds")
        if self.tenant_secret_bytes < 40:
            raise ValueError("TENANT_SECRET_BYTES must be at least 40")
        if not self.credential_separator:
            raise ValueError("CREDENTIAL_SEPARATOR must not be empty")
        if not self.auth_management_path.startswith("/"):
            raise ValueError("AUTH_MANAGEMENT_PATH must start with '/'")
        if self.cache_backend == "redis":
            if not self.redis_host:
                raise ValueError("REDIS_HOST is required when cache_backend is 'redis'")
        elif self.cache_backend != "memory":
            raise ValueError(
                f"cache_backend must be 'memory' or 'redis', got: {self.cache_backend!r}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    In tests, call get_settings.cache_clear() before overriding env vars so
    the next get_settings() uses the new values.
    """
    return Settings()
