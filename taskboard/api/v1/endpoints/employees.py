"""Employee directory (read-only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from taskboard.api.v1.dependencies import get_current_actor, get_employee_service
from taskboard.application.dtos.actor import ActorContext
from taskboard.application.use_cases.employees import EmployeeService
from taskboard.schemas.employee import EmployeeResponse

router = APIRouter()


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    employee_svc: Annotated[EmployeeService, Depends(get_employee_service)],
    active_only: Annotated[bool, Query()] = True,
):
    employees = await employee_svc.list_employees(actor, active_only=active_only)
    return [EmployeeResponse.model_validate(e) for e in employees]


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: str,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    employee_svc: Annotated[EmployeeService, Depends(get_employee_service)],
):
    return EmployeeResponse.model_validate(
        await employee_svc.get_employee(actor, employee_id)
    )
