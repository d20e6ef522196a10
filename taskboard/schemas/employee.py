"""Employee API schemas (read-only)."""

from pydantic import BaseModel, ConfigDict


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str | None
    phone: str | None
    telegram_chat_id: str | None
    avatar_url: str | None
    role: str | None
    is_active: bool
    user_id: str | None
