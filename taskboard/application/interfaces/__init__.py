"""Application ports (Protocols) implemented by the infrastructure layer."""

from taskboard.application.interfaces.repositories import (
    IApprovalRequestRepository,
    IAssignmentRepository,
    IEmployeeRepository,
    IPermissionOverrideRepository,
    IProfileRepository,
    ITaskNoteRepository,
    ITaskRepository,
    IUserRoleRepository,
)
from taskboard.application.interfaces.services import (
    IAfterCommit,
    ICacheService,
    IChangePublisher,
    INotificationService,
    IProvisioningClient,
)

__all__ = [
    "IAfterCommit",
    "IApprovalRequestRepository",
    "IAssignmentRepository",
    "ICacheService",
    "IChangePublisher",
    "IEmployeeRepository",
    "INotificationService",
    "IPermissionOverrideRepository",
    "IProfileRepository",
    "IProvisioningClient",
    "ITaskNoteRepository",
    "ITaskRepository",
    "IUserRoleRepository",
]
