"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the caller's ActorContext and the application
use cases. Routes import from here only.
"""

from taskboard.api.v1.dependencies.auth import (
    get_authorization_service,
    get_bearer_token,
    get_current_actor,
    get_current_user_id,
)
from taskboard.api.v1.dependencies.services import (
    build_approval_service,
    build_task_service,
    get_approval_service,
    get_approval_service_for_write,
    get_bulk_approve_use_case,
    get_employee_service,
    get_invite_user_use_case,
    get_note_service,
    get_note_service_for_write,
    get_permission_settings_service,
    get_task_service,
    get_task_service_for_write,
)

__all__ = [
    "build_approval_service",
    "build_task_service",
    "get_approval_service",
    "get_approval_service_for_write",
    "get_authorization_service",
    "get_bearer_token",
    "get_bulk_approve_use_case",
    "get_current_actor",
    "get_current_user_id",
    "get_employee_service",
    "get_invite_user_use_case",
    "get_note_service",
    "get_note_service_for_write",
    "get_permission_settings_service",
    "get_task_service",
    "get_task_service_for_write",
]
