"""Task API: thin routes delegating to TaskService, TaskNoteService and ApprovalService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from taskboard.api.v1.dependencies import (
    get_approval_service,
    get_approval_service_for_write,
    get_bulk_approve_use_case,
    get_current_actor,
    get_note_service,
    get_note_service_for_write,
    get_task_service,
    get_task_service_for_write,
)
from taskboard.application.dtos.actor import ActorContext
from taskboard.application.use_cases.approvals import ApprovalService
from taskboard.application.use_cases.notes import TaskNoteService
from taskboard.application.use_cases.tasks import BulkApproveUseCase, TaskService
from taskboard.core.limiter import limit_writes
from taskboard.schemas.approval import (
    ApprovalRequestCreate,
    ApprovalRequestResponse,
    IssuedApprovalResponse,
)
from taskboard.schemas.note import TaskNoteCreate, TaskNoteResponse
from taskboard.schemas.task import (
    ApproveTaskRequest,
    BulkApproveRequest,
    BulkApproveResponse,
    DirectApproveRequest,
    TaskCreateRequest,
    TaskResponse,
    TaskStatsResponse,
    TaskUpdateRequest,
    ToggleAssigneeResponse,
)

router = APIRouter()


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    task_svc: Annotated[TaskService, Depends(get_task_service)],
    status: Annotated[str | None, Query(description="Filter by status")] = None,
):
    """List tasks newest first, each with its assignees."""
    tasks = await task_svc.list_tasks(actor, status=status)
    return [TaskResponse.model_validate(t) for t in tasks]


@router.get("/stats", response_model=TaskStatsResponse)
async def get_task_stats(
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    task_svc: Annotated[TaskService, Depends(get_task_service)],
):
    """Dashboard counters: open, pending approval, completed, overdue."""
    return TaskStatsResponse.model_validate(await task_svc.get_stats(actor))


@router.post("", response_model=TaskResponse, status_code=201)
@limit_writes
async def create_task(
    request: Request,
    body: TaskCreateRequest,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    task_svc: Annotated[TaskService, Depends(get_task_service_for_write)],
):
    created = await task_svc.create_task(
        actor,
        title=body.title,
        topic=body.topic,
        description=body.description,
        priority=body.priority,
        deadline=body.deadline,
        project_id=body.project_id,
    )
    return TaskResponse.model_validate(created)


@router.post("/bulk-approve", response_model=BulkApproveResponse)
@limit_writes
async def bulk_approve_tasks(
    request: Request,
    body: BulkApproveRequest,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    use_case: Annotated[BulkApproveUseCase, Depends(get_bulk_approve_use_case)],
):
    """Approve many tasks; each in its own transaction. Per-item failures are reported, not raised."""
    result = await use_case.execute(actor, body.task_ids)
    return BulkApproveResponse.model_validate(result)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    task_svc: Annotated[TaskService, Depends(get_task_service)],
):
    return TaskResponse.model_validate(await task_svc.get_task(actor, task_id))


@router.patch("/{task_id}", response_model=TaskResponse)
@limit_writes
async def update_task(
    request: Request,
    task_id: str,
    body: TaskUpdateRequest,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    task_svc: Annotated[TaskService, Depends(get_task_service_for_write)],
):
    """Partial update; only fields present in the body change."""
    updated = await task_svc.update_task(actor, task_id, body.changes())
    return TaskResponse.model_validate(updated)


@router.delete("/{task_id}", status_code=204)
@limit_writes
async def delete_task(
    request: Request,
    task_id: str,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    task_svc: Annotated[TaskService, Depends(get_task_service_for_write)],
):
    """Delete a task; assignments, notes and approval requests go with it."""
    await task_svc.delete_task(actor, task_id)


@router.post("/{task_id}/approve", response_model=TaskResponse)
@limit_writes
async def approve_task(
    request: Request,
    task_id: str,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    task_svc: Annotated[TaskService, Depends(get_task_service_for_write)],
    body: ApproveTaskRequest | None = None,
):
    """Set status approved, optionally with a primary assignee."""
    updated = await task_svc.approve_task(
        actor, task_id, assigned_to=body.assigned_to if body else None
    )
    return TaskResponse.model_validate(updated)


@router.post("/{task_id}/direct-approve", response_model=TaskResponse)
@limit_writes
async def direct_approve_task(
    request: Request,
    task_id: str,
    body: DirectApproveRequest,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    task_svc: Annotated[TaskService, Depends(get_task_service_for_write)],
):
    """Approve and record the approver (explicit, or the caller's linked employee)."""
    updated = await task_svc.direct_approve(
        actor,
        task_id,
        approver_employee_id=body.approver_employee_id,
        note=body.note,
    )
    return TaskResponse.model_validate(updated)


@router.post(
    "/{task_id}/assignees/{employee_id}/toggle",
    response_model=ToggleAssigneeResponse,
)
@limit_writes
async def toggle_assignee(
    request: Request,
    task_id: str,
    employee_id: str,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    task_svc: Annotated[TaskService, Depends(get_task_service_for_write)],
):
    """Add the employee to the task, or remove them if already assigned."""
    result = await task_svc.toggle_assignee(actor, task_id, employee_id)
    return ToggleAssigneeResponse.model_validate(result)


@router.get("/{task_id}/notes", response_model=list[TaskNoteResponse])
async def list_task_notes(
    task_id: str,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    note_svc: Annotated[TaskNoteService, Depends(get_note_service)],
):
    notes = await note_svc.list_notes(actor, task_id)
    return [TaskNoteResponse.model_validate(n) for n in notes]


@router.post("/{task_id}/notes", response_model=TaskNoteResponse, status_code=201)
@limit_writes
async def add_task_note(
    request: Request,
    task_id: str,
    body: TaskNoteCreate,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    note_svc: Annotated[TaskNoteService, Depends(get_note_service_for_write)],
):
    note = await note_svc.add_note(actor, task_id, body.content)
    return TaskNoteResponse.model_validate(note)


@router.delete("/{task_id}/notes/{note_id}", status_code=204)
@limit_writes
async def delete_task_note(
    request: Request,
    task_id: str,
    note_id: str,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    note_svc: Annotated[TaskNoteService, Depends(get_note_service_for_write)],
):
    await note_svc.delete_note(actor, task_id, note_id)


@router.get(
    "/{task_id}/approval-requests", response_model=list[ApprovalRequestResponse]
)
async def list_approval_requests(
    task_id: str,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    approval_svc: Annotated[ApprovalService, Depends(get_approval_service)],
):
    """All approval requests of the task, newest first."""
    requests = await approval_svc.list_for_task(actor, task_id)
    return [ApprovalRequestResponse.model_validate(r) for r in requests]


@router.post(
    "/{task_id}/approval-requests",
    response_model=IssuedApprovalResponse,
    status_code=201,
)
@limit_writes
async def issue_approval_request(
    request: Request,
    task_id: str,
    body: ApprovalRequestCreate,
    actor: Annotated[ActorContext, Depends(get_current_actor)],
    approval_svc: Annotated[ApprovalService, Depends(get_approval_service_for_write)],
):
    """Issue a one-time approval link. The link is returned only here."""
    issued = await approval_svc.issue_request(
        actor, task_id, body.requested_from, message=body.message
    )
    return IssuedApprovalResponse(
        request=ApprovalRequestResponse.model_validate(issued.request),
        magic_link=issued.magic_link,
    )
