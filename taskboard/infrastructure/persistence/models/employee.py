"""Employee and Profile ORM models."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from taskboard.infrastructure.persistence.database import Base
from taskboard.infrastructure.persistence.models.mixins import BaseModel, TimestampMixin


class Employee(BaseModel, Base):
    """Team member. Table: employee. role is a display title, not an access role."""

    __tablename__ = "employee"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    telegram_chat_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )
    user_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)


class Profile(TimestampMixin, Base):
    """Display data of an authenticated user. Table: profile. id is the user id."""

    __tablename__ = "profile"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
