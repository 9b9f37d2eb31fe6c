from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from schoolhub.database import get_db
from schoolhub.dependencies import require_permissions
from schoolhub.core.tenant_context import get_tenant_id
from schoolhub.core.logging_config import logger
from schoolhub.models.user import User, UserStatus
from schoolhub.schemas.common import ApiResponse, PaginatedResponse, Pagination
from schoolhub.schemas.user import UserCreate, UserUpdate, UserResponse
from schoolhub.services import user_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[UserResponse])
def get_users(
    search: Optional[str] = None,
    status_filter: Optional[UserStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("users:read"))
):
    users, total = user_service.get_users(
        db, tenant_id, search=search, status=status_filter, page=page, limit=limit
    )
    return {"success": True, "data": users, "pagination": Pagination.build(page, limit, total)}


@router.post("", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("users:create"))
):
    try:
        logger.info(f"Creating user: tenant_id={tenant_id}")
        user = user_service.create_user(db, user_data, tenant_id)
        logger.info(f"User created successfully: id={user.id}")
        return {"success": True, "message": "User created successfully", "data": user}
    except Exception as e:
        logger.error(f"Error creating user: {type(e).__name__}: {str(e)}")
        raise


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("users:read"))
):
    return {"success": True, "data": user_service.get_user(db, user_id, tenant_id)}


@router.put("/{user_id}", response_model=ApiResponse[UserResponse])
def update_user(
    user_id: int,
    user_data: UserUpdate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("users:update"))
):
    user = user_service.update_user(db, user_id, user_data, tenant_id)
    logger.info(f"User updated: id={user.id}, tenant_id={tenant_id}")
    return {"success": True, "message": "User updated successfully", "data": user}


@router.post("/{user_id}/deactivate", response_model=ApiResponse[UserResponse])
def deactivate_user(
    user_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("users:update"))
):
    user = user_service.deactivate_user(db, user_id, tenant_id)
    logger.info(f"User deactivated: id={user.id}, tenant_id={tenant_id}")
    return {"success": True, "message": "User deactivated", "data": user}
