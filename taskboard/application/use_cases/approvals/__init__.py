"""Approval use cases."""

from taskboard.application.use_cases.approvals.approval_operations import (
    ApprovalService,
)

__all__ = ["ApprovalService"]
