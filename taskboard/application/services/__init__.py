"""Application services (authorization and permission settings)."""

from taskboard.application.services.after_commit import after_commit_or_now
from taskboard.application.services.authorization_service import AuthorizationService
from taskboard.application.services.permission_settings_service import (
    PermissionSettingsService,
)

__all__ = ["AuthorizationService", "PermissionSettingsService", "after_commit_or_now"]
