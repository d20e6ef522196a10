"""ID and secret generators (CUID primary keys, approval tokens)."""

import hashlib
import secrets

from cuid2 import cuid_wrapper

from taskboard.core.constants import APPROVAL_TOKEN_BYTES

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2)."""
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_approval_token() -> str:
    """Return an opaque URL-safe approval token with 256 bits of CSPRNG entropy.

    The token carries no task id and no signature; it is only a lookup key.
    """
    return secrets.token_urlsafe(APPROVAL_TOKEN_BYTES)


def hash_token(token: str) -> str:
    """SHA-256 hex digest of a token. Only the digest is persisted."""
    return hashlib.sha256(token.encode()).hexdigest()
