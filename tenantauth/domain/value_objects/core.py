"""Domain value objects for tenantauth.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import unicodedata
from dataclasses import dataclass

# Unicode categories dropped from tenant names: punctuation, symbols, control.
_DROPPED_CATEGORIES = ("P", "S", "C")
_WORD_SEPARATORS = {"-", "_"}


def normalize_tenant_name(value: str | None) -> str:
    """Return the slug form of a human-chosen tenant name.

    Hyphens and underscores count as word breaks, other punctuation and
    symbols are removed, the result is lower-cased and whitespace runs are
    joined with '-' (e.g. 'My App!' -> 'my-app'). Blank input gives ''.
    """
    if not value:
        return ""
    kept = []
    for ch in value:
        if ch in _WORD_SEPARATORS:
            kept.append(" ")
        elif unicodedata.category(ch)[0] not in _DROPPED_CATEGORIES:
            kept.append(ch)
    return "-".join("".join(kept).lower().split())


@dataclass(frozen=True)
class CompoundCredential:
    """Two external tokens joined by a separator (e.g. 'token:token_secret').

    Used by providers whose protocol needs a token pair. Both parts must be
    non-blank; the value is split on the first separator only.
    """

    token: str
    secret: str

    def __post_init__(self) -> None:
        if not self.token or not self.token.strip():
            raise ValueError("Compound credential token part must be non-empty")
        if not self.secret or not self.secret.strip():
            raise ValueError("Compound credential secret part must be non-empty")

    @classmethod
    def parse(cls, raw: str, separator: str) -> "CompoundCredential":
        """Split raw on separator.

        Raises:
            ValueError: If the separator is missing or either part is blank.
        """
        if not raw or separator not in raw:
            raise ValueError(f"Compound credential must contain separator {separator!r}")
        token, secret = raw.split(separator, 1)
        return cls(token=token, secret=secret)
