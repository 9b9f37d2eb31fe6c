from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from schoolhub.database import get_db
from schoolhub.dependencies import require_permissions
from schoolhub.core.tenant_context import get_tenant_id
from schoolhub.core.logging_config import logger
from schoolhub.models.user import User
from schoolhub.schemas.common import ApiResponse, PaginatedResponse, Pagination
from schoolhub.schemas.subject import SubjectCreate, SubjectResponse
from schoolhub.services import subject_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[SubjectResponse])
def get_subjects(
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("subjects:read"))
):
    subjects, total = subject_service.get_subjects(db, tenant_id, search=search, page=page, limit=limit)
    return {"success": True, "data": subjects, "pagination": Pagination.build(page, limit, total)}


@router.post("", response_model=ApiResponse[SubjectResponse], status_code=status.HTTP_201_CREATED)
def create_subject(
    subject_data: SubjectCreate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("subjects:create"))
):
    subject = subject_service.create_subject(db, subject_data, tenant_id)
    logger.info(f"Subject created: id={subject.id}, code={subject.subject_code}, tenant_id={tenant_id}")
    return {"success": True, "message": "Subject created successfully", "data": subject}
