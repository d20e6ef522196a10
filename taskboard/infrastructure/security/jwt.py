"""JWT verification for access tokens minted by the external identity provider.

Uses taskboard.core.config for secret and algorithm. This service never issues tokens.
"""

from typing import Any

from jose import JWTError, jwt

from taskboard.core.config import get_settings


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp and sub. Audience is not checked (identity
    providers set project-specific values).

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True, "verify_aud": False},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload
