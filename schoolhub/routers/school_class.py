from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from schoolhub.database import get_db
from schoolhub.dependencies import require_permissions
from schoolhub.core.tenant_context import get_tenant_id
from schoolhub.core.logging_config import logger
from schoolhub.models.user import User
from schoolhub.schemas.common import ApiResponse, PaginatedResponse, Pagination
from schoolhub.schemas.school_class import SchoolClassCreate, SchoolClassResponse
from schoolhub.services import school_class_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[SchoolClassResponse])
def get_classes(
    grade_level: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("classes:read"))
):
    classes, total = school_class_service.get_classes(
        db, tenant_id, grade_level=grade_level, page=page, limit=limit
    )
    return {"success": True, "data": classes, "pagination": Pagination.build(page, limit, total)}


@router.post("", response_model=ApiResponse[SchoolClassResponse], status_code=status.HTTP_201_CREATED)
def create_class(
    class_data: SchoolClassCreate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("classes:create"))
):
    school_class = school_class_service.create_class(db, class_data, tenant_id)
    logger.info(f"Class created: id={school_class.id}, tenant_id={tenant_id}")
    return {"success": True, "message": "Class created successfully", "data": school_class}
