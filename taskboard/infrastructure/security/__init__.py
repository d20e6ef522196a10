"""Security: access token verification."""
