"""Cache key builders. Single place for key format (DRY).

Namespaces must not contain CACHE_KEY_SEP or glob characters, otherwise
removing one namespace could match another namespace's keys. Entry keys
are the trailing component and may contain the separator.
"""

from tenantauth.core.constants import CACHE_KEY_SEP

_GLOB_CHARS = frozenset("*?[]\\")


def _validate_namespace(namespace: str) -> None:
    """Raise ValueError if namespace could collide with another namespace's keys."""
    if CACHE_KEY_SEP in namespace or _GLOB_CHARS.intersection(namespace):
        raise ValueError(
            f"Cache namespace {namespace!r} must not contain {CACHE_KEY_SEP!r} "
            "or glob characters"
        )


def namespaced_key(prefix: str, namespace: str, key: str) -> str:
    """Full backend key for (namespace, key), e.g. 'tenantauth:my-app:k1'."""
    _validate_namespace(namespace)
    return f"{prefix}{CACHE_KEY_SEP}{namespace}{CACHE_KEY_SEP}{key}"


def namespace_pattern(prefix: str, namespace: str) -> str:
    """SCAN match pattern covering every key of one namespace."""
    _validate_namespace(namespace)
    return f"{prefix}{CACHE_KEY_SEP}{namespace}{CACHE_KEY_SEP}*"

