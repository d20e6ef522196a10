"""Shared utilities: UTC datetimes and id/token generators."""

from taskboard.shared.utils.datetime import Clock, ensure_utc, utc_now
from taskboard.shared.utils.generators import (
    generate_approval_token,
    generate_cuid,
    hash_token,
)

__all__ = [
    "Clock",
    "ensure_utc",
    "generate_approval_token",
    "generate_cuid",
    "hash_token",
    "utc_now",
]
