"""Permission API schemas."""

from pydantic import BaseModel, ConfigDict, Field


class EffectivePermissionsResponse(BaseModel):
    """Effective permission keys of the caller in a center."""

    center_id: str
    permissions: list[str] = Field(default_factory=list, description="Sorted keys")


class PermissionCheckResponse(BaseModel):
    """Result of a single permission check."""

    key: str
    allowed: bool


class OverrideUpsert(BaseModel):
    """Request body for setting a membership override."""

    allowed: bool = Field(..., description="True grants the permission, False revokes it")


class OverrideResponse(BaseModel):
    """Membership override row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    membership_id: str
    permission_id: str
    allowed: bool
