from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from schoolhub.database import get_db
from schoolhub.dependencies import require_permissions
from schoolhub.core.tenant_context import get_tenant_id
from schoolhub.core.logging_config import logger
from schoolhub.models.user import User
from schoolhub.schemas.common import ApiResponse, MessageResponse
from schoolhub.schemas.role import RoleCreate, RoleUpdate, RoleResponse, RoleAssignment, PermissionResponse
from schoolhub.services import role_service

router = APIRouter()


@router.get("", response_model=ApiResponse[List[RoleResponse]])
def get_roles(
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("roles:read"))
):
    return {"success": True, "data": role_service.get_roles(db, tenant_id)}


@router.get("/permissions", response_model=ApiResponse[List[PermissionResponse]])
def get_permissions(
    db: Session = Depends(get_db),
    _user: User = Depends(require_permissions("roles:read"))
):
    """The global permission catalogue roles can be built from."""
    return {"success": True, "data": role_service.get_permissions(db)}


@router.post("", response_model=ApiResponse[RoleResponse], status_code=status.HTTP_201_CREATED)
def create_role(
    role_data: RoleCreate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("roles:create"))
):
    role = role_service.create_role(db, role_data, tenant_id)
    logger.info(f"Role created: id={role.id}, name={role.name}, tenant_id={tenant_id}")
    return {"success": True, "message": "Role created successfully", "data": role}


@router.put("/{role_id}", response_model=ApiResponse[RoleResponse])
def update_role(
    role_id: int,
    role_data: RoleUpdate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("roles:update"))
):
    role = role_service.update_role(db, role_id, role_data, tenant_id)
    logger.info(f"Role updated: id={role.id}, tenant_id={tenant_id}")
    return {"success": True, "message": "Role updated successfully", "data": role}


@router.delete("/{role_id}", response_model=MessageResponse)
def delete_role(
    role_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("roles:delete"))
):
    role_service.delete_role(db, role_id, tenant_id)
    logger.info(f"Role deleted: id={role_id}, tenant_id={tenant_id}")
    return {"success": True, "message": "Role deleted successfully"}


@router.post("/{role_id}/users", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def assign_role(
    role_id: int,
    assignment: RoleAssignment,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("roles:update"))
):
    role_service.assign_user(db, role_id, assignment.user_id, tenant_id)
    logger.info(f"Role assigned: role_id={role_id}, user_id={assignment.user_id}, tenant_id={tenant_id}")
    return {"success": True, "message": "Role assigned successfully"}


@router.delete("/{role_id}/users/{user_id}", response_model=MessageResponse)
def unassign_role(
    role_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("roles:update"))
):
    role_service.unassign_user(db, role_id, user_id, tenant_id)
    logger.info(f"Role unassigned: role_id={role_id}, user_id={user_id}, tenant_id={tenant_id}")
    return {"success": True, "message": "Role removed from user"}
