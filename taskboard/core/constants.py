"""Core constants: cache key prefixes, pub/sub channel, and shared literal values."""

# Cache key prefixes
CACHE_PREFIX_PERMISSION_OVERRIDE = "permission_override"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Redis pub/sub channel for task/assignment/approval change notifications
CHANGES_CHANNEL = "taskboard:changes"

# Path segment of the shareable approval link: <public_base_url>/approve/<token>
APPROVAL_LINK_PATH = "approve"

# Bytes of CSPRNG entropy in an approval token (256 bits)
APPROVAL_TOKEN_BYTES = 32
