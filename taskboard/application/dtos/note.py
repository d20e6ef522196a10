"""DTOs for task notes (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TaskNoteResult:
    id: str
    task_id: str
    content: str
    created_by: str | None
    created_at: datetime
