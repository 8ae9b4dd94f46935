"""Core constants: claim names, challenge headers and shared literal values."""

# Tenant identifiers are always TENANT_ID_PREFIX + normalized name (e.g. app:my-app).
TENANT_TYPE = "app"
ID_SEPARATOR = ":"
TENANT_ID_PREFIX = f"{TENANT_TYPE}{ID_SEPARATOR}"

# Custom claim carrying the tenant identifier inside session tokens.
TENANT_CLAIM = "appid"

# WWW-Authenticate challenges: no credential vs. credential rejected.
BEARER_CHALLENGE = "Bearer"
INVALID_TOKEN_CHALLENGE = 'Bearer error="invalid_token"'

CREDENTIALS_INFO = "Save your secret key as it is showed only once!"

# Provider names accepted by the issuance endpoint.
PROVIDER_FACEBOOK = "facebook"
PROVIDER_GOOGLE = "google"
PROVIDER_GITHUB = "github"
PROVIDER_LINKEDIN = "linkedin"
PROVIDER_TWITTER = "twitter"

# Cache key prefix for tenant records (root namespace).
CACHE_PREFIX_TENANT = "tenant"

# Separator between cache key components (prefix:namespace:key).
CACHE_KEY_SEP = ":"
