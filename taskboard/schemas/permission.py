"""Permission override API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from taskboard.application.dtos.permission import RolePermissions


class PermissionOverrideUpdate(BaseModel):
    """Partial override: only flags present are written; null clears back to the default."""

    flags: dict[str, bool | None] = Field(..., min_length=1)


class PermissionOverrideResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    role: str
    flags: dict[str, bool | None]
    version: int
    updated_at: datetime | None = None


class RolePermissionsResponse(BaseModel):
    """A role's override record next to the capabilities it resolves to."""

    role: str
    override: PermissionOverrideResponse | None
    effective: dict[str, bool]

    @classmethod
    def from_result(cls, result: RolePermissions) -> "RolePermissionsResponse":
        return cls(
            role=result.role,
            override=(
                PermissionOverrideResponse.model_validate(result.override)
                if result.override
                else None
            ),
            effective=result.effective.to_dict(),
        )


class MyPermissionsResponse(BaseModel):
    """Caller's resolved role and capabilities (GET /me/permissions)."""

    user_id: str
    role: str
    capabilities: dict[str, bool]
