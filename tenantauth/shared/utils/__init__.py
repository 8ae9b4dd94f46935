"""Shared helpers: UTC time and identifier generation."""

from tenantauth.shared.utils.datetime import (
    from_timestamp_ms_utc,
    to_timestamp_ms,
    utc_now,
    utc_now_ms,
)
from tenantauth.shared.utils.generators import generate_cuid

__all__ = [
    "from_timestamp_ms_utc",
    "generate_cuid",
    "to_timestamp_ms",
    "utc_now",
    "utc_now_ms",
]
