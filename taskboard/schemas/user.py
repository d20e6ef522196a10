"""User invitation API schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class InviteUserRequest(BaseModel):
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=255)
    role: str = Field(default="viewer")


class InvitedUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: str | None


class InviteUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    success: bool
    user: InvitedUserResponse | None
    message: str | None = None
