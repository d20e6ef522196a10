"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. Limit strings live here only.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

# Unauthenticated approval link endpoints (token guessing / replay attempts).
PUBLIC_APPROVAL_LOOKUP_LIMIT = "30/minute"
PUBLIC_APPROVAL_RESPOND_LIMIT = "10/minute"
WRITE_ENDPOINT_LIMIT = "120/minute"
INVITE_LIMIT = "10/minute"

limit_public_lookup = limiter.limit(PUBLIC_APPROVAL_LOOKUP_LIMIT)
limit_public_respond = limiter.limit(PUBLIC_APPROVAL_RESPOND_LIMIT)
limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
limit_invite = limiter.limit(INVITE_LIMIT)
