from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from schoolhub.database import get_db
from schoolhub.dependencies import require_permissions
from schoolhub.models.tenant import TenantStatus
from schoolhub.models.user import User
from schoolhub.schemas.common import ApiResponse, PaginatedResponse, Pagination
from schoolhub.schemas.tenant import TenantCreate, TenantUpdate, TenantResponse, TenantBootstrapResponse
from schoolhub.services import tenant_service
from schoolhub.core.logging_config import logger

router = APIRouter()


@router.get("", response_model=PaginatedResponse[TenantResponse])
def get_tenants(
    search: Optional[str] = None,
    status_filter: Optional[TenantStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    _user: User = Depends(require_permissions("tenants:read"))
):
    """
    List every school on the platform.

    Only platform roles hold ``tenants:read``; tenant admins do not.
    """
    tenants, total = tenant_service.get_tenants(
        db, search=search, status=status_filter, page=page, limit=limit
    )
    return {"success": True, "data": tenants, "pagination": Pagination.build(page, limit, total)}


@router.get("/{tenant_id}", response_model=ApiResponse[TenantResponse])
def get_tenant(
    tenant_id: int,
    db: Session = Depends(get_db),
    _user: User = Depends(require_permissions("tenants:read"))
):
    return {"success": True, "data": tenant_service.get_tenant(db, tenant_id)}


@router.post("", response_model=ApiResponse[TenantBootstrapResponse], status_code=status.HTTP_201_CREATED)
def create_tenant(
    tenant_data: TenantCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permissions("tenants:create"))
):
    """
    Onboard a school.

    Creates the tenant, its default roles (Tenant Admin, Teacher, Parent)
    and the first admin account in a single transaction.
    """
    try:
        logger.info(f"Creating tenant: domain={tenant_data.domain}, requested_by={current_user.id}")
        result = tenant_service.create_tenant(db, tenant_data)
        return {"success": True, "message": "Tenant created successfully", "data": result}
    except Exception as e:
        logger.error(f"Error creating tenant: {type(e).__name__}: {str(e)}")
        raise


@router.put("/{tenant_id}", response_model=ApiResponse[TenantResponse])
def update_tenant(
    tenant_id: int,
    tenant_data: TenantUpdate,
    db: Session = Depends(get_db),
    _user: User = Depends(require_permissions("tenants:update"))
):
    tenant = tenant_service.update_tenant(db, tenant_id, tenant_data)
    logger.info(f"Tenant updated: id={tenant.id}")
    return {"success": True, "message": "Tenant updated successfully", "data": tenant}
