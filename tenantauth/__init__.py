"""tenantauth: multi-tenant bearer session tokens (issue, refresh, revoke)."""

__version__ = "1.0.0"
