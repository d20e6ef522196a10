"""Application use cases (task lifecycle, approvals, notes, users)."""
