"""Employee and profile repositories (read side)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.application.dtos.employee import EmployeeResult
from taskboard.infrastructure.persistence.models.employee import Employee, Profile
from taskboard.infrastructure.persistence.repositories.base import BaseRepository


def _to_result(e: Employee) -> EmployeeResult:
    """Map Employee ORM to EmployeeResult DTO."""
    return EmployeeResult(
        id=e.id,
        name=e.name,
        email=e.email,
        phone=e.phone,
        telegram_chat_id=e.telegram_chat_id,
        avatar_url=e.avatar_url,
        role=e.role,
        is_active=e.is_active,
        user_id=e.user_id,
    )


class EmployeeRepository(BaseRepository[Employee]):
    """Employee repository. Implements IEmployeeRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Employee)

    async def get_by_id(self, employee_id: str) -> EmployeeResult | None:
        employee = await self.get_entity_by_id(employee_id)
        return _to_result(employee) if employee else None

    async def get_by_user_id(self, user_id: str) -> EmployeeResult | None:
        """Return the employee linked to user_id (oldest if several)."""
        result = await self.db.execute(
            select(Employee)
            .where(Employee.user_id == user_id)
            .order_by(Employee.created_at)
            .limit(1)
        )
        employee = result.scalar_one_or_none()
        return _to_result(employee) if employee else None

    async def list_employees(self, active_only: bool = True) -> list[EmployeeResult]:
        stmt = select(Employee).order_by(Employee.name, Employee.id)
        if active_only:
            stmt = stmt.where(Employee.is_active.is_(True))
        result = await self.db.execute(stmt)
        return [_to_result(e) for e in result.scalars().all()]


class ProfileRepository:
    """Profile repository. Implements IProfileRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_display_name(self, user_id: str) -> str | None:
        result = await self.db.execute(
            select(Profile.full_name).where(Profile.id == user_id)
        )
        return result.scalar_one_or_none()
