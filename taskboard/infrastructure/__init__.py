"""Infrastructure adapters: persistence, cache, messaging, security and external services."""
