from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from schoolhub.core.permissions import split_permission


class PermissionResponse(BaseModel):
    id: int
    name: str
    resource: str
    action: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


def _check_permission_names(names: Optional[List[str]]) -> Optional[List[str]]:
    if names is None:
        return names
    for name in names:
        split_permission(name)
    return sorted(set(names))


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    permissions: List[str] = []

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, v):
        return _check_permission_names(v)


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    permissions: Optional[List[str]] = None

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, v):
        return _check_permission_names(v)


class RoleResponse(BaseModel):
    id: int
    tenant_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    is_system: bool
    permissions: List[PermissionResponse] = []

    class Config:
        from_attributes = True


class RoleAssignment(BaseModel):
    user_id: int
