"""Persistence models: ORM entities and mixins.

Importing this package registers every table on Base.metadata (used by Alembic).
"""

from taskboard.infrastructure.persistence.models.approval_request import (
    TaskApprovalRequest,
)
from taskboard.infrastructure.persistence.models.employee import Employee, Profile
from taskboard.infrastructure.persistence.models.mixins import (
    BaseModel,
    CuidMixin,
    TimestampMixin,
    VersionedMixin,
)
from taskboard.infrastructure.persistence.models.permission import (
    PermissionSetting,
    UserRole,
)
from taskboard.infrastructure.persistence.models.task import (
    Task,
    TaskAssignee,
    TaskNote,
)

__all__ = [
    "BaseModel",
    "CuidMixin",
    "Employee",
    "PermissionSetting",
    "Profile",
    "Task",
    "TaskApprovalRequest",
    "TaskAssignee",
    "TaskNote",
    "TimestampMixin",
    "UserRole",
    "VersionedMixin",
]
