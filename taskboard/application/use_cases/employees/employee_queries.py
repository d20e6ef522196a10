"""Employee read-side queries."""

from __future__ import annotations

from taskboard.application.dtos.actor import ActorContext
from taskboard.application.dtos.employee import EmployeeResult
from taskboard.application.interfaces.repositories import IEmployeeRepository
from taskboard.application.services.authorization_service import AuthorizationService
from taskboard.domain.exceptions import ResourceNotFoundException


class EmployeeService:
    """List and get employees (requires can_view_team)."""

    def __init__(self, employee_repo: IEmployeeRepository) -> None:
        self.employee_repo = employee_repo

    async def list_employees(
        self, actor: ActorContext, active_only: bool = True
    ) -> list[EmployeeResult]:
        AuthorizationService.require_capability(actor, "can_view_team")
        return await self.employee_repo.list_employees(active_only=active_only)

    async def get_employee(self, actor: ActorContext, employee_id: str) -> EmployeeResult:
        AuthorizationService.require_capability(actor, "can_view_team")
        employee = await self.employee_repo.get_by_id(employee_id)
        if employee is None:
            raise ResourceNotFoundException("employee", employee_id)
        return employee
