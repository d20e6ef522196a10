"""DTOs for employees (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EmployeeResult:
    """Employee read-model. role is a free-text job title, not an access role."""

    id: str
    name: str
    email: str | None
    phone: str | None
    telegram_chat_id: str | None
    avatar_url: str | None
    role: str | None
    is_active: bool
    user_id: str | None
