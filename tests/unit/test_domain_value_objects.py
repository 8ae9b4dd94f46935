"""Tests for CompoundCredential (token pair for two-part providers)."""

import pytest

from tenantauth.domain.value_objects import CompoundCredential


def test_parse_splits_on_first_separator() -> None:
    """Only the first separator splits; the secret may contain it."""
    pair = CompoundCredential.parse("token:sec:ret", ":")
    assert pair.token == "token"
    assert pair.secret == "sec:ret"


def test_parse_custom_separator() -> None:
    pair = CompoundCredential.parse("token|secret", "|")
    assert (pair.token, pair.secret) == ("token", "secret")


@pytest.mark.parametrize("raw", ["no-separator", ":secret", "token:", "", " : "])
def test_parse_rejects_malformed(raw: str) -> None:
    """Missing separator or a blank part is an error."""
    with pytest.raises(ValueError):
        CompoundCredential.parse(raw, ":")


def test_is_immutable() -> None:
    pair = CompoundCredential("a", "b")
    with pytest.raises(AttributeError):
        pair.token = "c"  # type: ignore[misc]
