"""Task note API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TaskNoteCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=10000)


class TaskNoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    task_id: str
    content: str
    created_by: str | None
    created_at: datetime
