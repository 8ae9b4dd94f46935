"""Security infrastructure: session token signing and verification."""

from tenantauth.infrastructure.security.jwt import TokenCodec

__all__ = ["TokenCodec"]
