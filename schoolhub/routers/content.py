from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session
from schoolhub.database import get_db
from schoolhub.dependencies import require_permissions
from schoolhub.core.tenant_context import get_tenant_id
from schoolhub.core.logging_config import logger
from schoolhub.models.content import ContentType, ContentStatus
from schoolhub.models.user import User
from schoolhub.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, Pagination
from schoolhub.schemas.content import ContentUpdate, ContentResponse
from schoolhub.services import content_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[ContentResponse])
def get_contents(
    content_type: Optional[ContentType] = None,
    status_filter: Optional[ContentStatus] = Query(None, alias="status"),
    subject_id: Optional[int] = None,
    grade_level: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("content:read"))
):
    contents, total = content_service.get_contents(
        db, tenant_id, page=page, limit=limit, content_type=content_type, status=status_filter,
        subject_id=subject_id, grade_level=grade_level, search=search,
    )
    return {"success": True, "data": contents, "pagination": Pagination.build(page, limit, total)}


@router.post("", response_model=ApiResponse[ContentResponse], status_code=status.HTTP_201_CREATED)
def create_content(
    title: str = Form(...),
    content_type: ContentType = Form(ContentType.DOCUMENT),
    description: Optional[str] = Form(None),
    subject_id: Optional[int] = Form(None),
    grade_level: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    current_user: User = Depends(require_permissions("content:create"))
):
    """
    Create a content item, optionally with a file (multipart form).

    Files are capped at 100MB and limited to common document, image and
    video types. ``tags`` is a comma separated list.
    """
    logger.info(f"Creating content: title={title}, tenant_id={tenant_id}, file={file.filename if file else None}")
    file_info = content_service.store_upload(file) if file else None
    content = content_service.create_content(
        db,
        tenant_id=tenant_id,
        created_by=current_user.id,
        title=title,
        content_type=content_type,
        description=description,
        subject_id=subject_id,
        grade_level=grade_level,
        tags=tags,
        file_info=file_info,
    )
    logger.info(f"Content created successfully: id={content.id}")
    return {"success": True, "message": "Content created successfully", "data": content}


@router.get("/{content_id}", response_model=ApiResponse[ContentResponse])
def get_content(
    content_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("content:read"))
):
    return {"success": True, "data": content_service.get_content(db, content_id, tenant_id)}


@router.put("/{content_id}", response_model=ApiResponse[ContentResponse])
def update_content(
    content_id: int,
    content_data: ContentUpdate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("content:update"))
):
    content = content_service.update_content(db, content_id, content_data, tenant_id)
    logger.info(f"Content updated: id={content.id}, tenant_id={tenant_id}")
    return {"success": True, "message": "Content updated successfully", "data": content}


@router.delete("/{content_id}", response_model=MessageResponse)
def delete_content(
    content_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("content:delete"))
):
    content_service.delete_content(db, content_id, tenant_id)
    logger.info(f"Content deleted: id={content_id}, tenant_id={tenant_id}")
    return {"success": True, "message": "Content deleted successfully"}
