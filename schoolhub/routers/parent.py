from datetime import date as date_type
from typing import List, Optional, Set
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from schoolhub.database import get_db
from schoolhub.dependencies import get_user_permissions, require_permissions
from schoolhub.core.tenant_context import get_tenant_id
from schoolhub.core.logging_config import logger
from schoolhub.models.parent import ParentStatus, RelationshipType
from schoolhub.models.user import User
from schoolhub.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, Pagination
from schoolhub.schemas.parent import (
    ParentCreate,
    ParentUpdate,
    ParentResponse,
    ParentRelationCreate,
    ParentRelationUpdate,
    ParentRelationResponse,
    ParentStatistics,
    AcademicRecordResponse,
    AttendanceResponse,
    GradeResponse,
    HealthRecordResponse,
)
from schoolhub.schemas.schedule import ScheduleResponse
from schoolhub.services import parent_service

router = APIRouter()

CHILD_ACCESS_DENIED = "Access denied to this student's records"


def get_parent_scope(
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    current_user: User = Depends(require_permissions("parents:read")),
    granted: Set[str] = Depends(get_user_permissions)
) -> Optional[int]:
    """
    Require ``parents:read`` and resolve which parent the caller may see.

    None means every parent of the school; a parent caller is pinned to
    their own profile id.
    """
    return parent_service.resolve_scope(db, current_user.id, tenant_id, granted)


@router.get("", response_model=PaginatedResponse[ParentResponse])
def get_parents(
    search: Optional[str] = None,
    status_filter: Optional[ParentStatus] = Query(None, alias="status"),
    relationship: Optional[RelationshipType] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    scope: Optional[int] = Depends(get_parent_scope)
):
    parents, total = parent_service.get_parents(
        db, tenant_id, search=search, status=status_filter,
        relationship_type=relationship, scope=scope, page=page, limit=limit
    )
    return {"success": True, "data": parents, "pagination": Pagination.build(page, limit, total)}


@router.post("", response_model=ApiResponse[ParentResponse], status_code=status.HTTP_201_CREATED)
def create_parent(
    parent_data: ParentCreate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("parents:create"))
):
    try:
        logger.info(f"Creating parent: user_id={parent_data.user_id}, tenant_id={tenant_id}")
        parent = parent_service.create_parent(db, parent_data, tenant_id)
        logger.info(f"Parent created successfully: id={parent.id}")
        return {"success": True, "message": "Parent created successfully", "data": parent}
    except Exception as e:
        logger.error(f"Error creating parent: {type(e).__name__}: {str(e)}")
        raise


@router.get("/{parent_id}", response_model=ApiResponse[ParentResponse])
def get_parent(
    parent_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    scope: Optional[int] = Depends(get_parent_scope)
):
    parent_service.ensure_in_scope(scope, parent_id)
    return {"success": True, "data": parent_service.get_parent(db, parent_id, tenant_id)}


@router.put("/{parent_id}", response_model=ApiResponse[ParentResponse])
def update_parent(
    parent_id: int,
    parent_data: ParentUpdate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("parents:update"))
):
    parent = parent_service.update_parent(db, parent_id, parent_data, tenant_id)
    logger.info(f"Parent updated: id={parent.id}, tenant_id={tenant_id}")
    return {"success": True, "message": "Parent updated successfully", "data": parent}


@router.delete("/{parent_id}", response_model=MessageResponse)
def delete_parent(
    parent_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("parents:delete"))
):
    parent_service.delete_parent(db, parent_id, tenant_id)
    logger.info(f"Parent deleted: id={parent_id}, tenant_id={tenant_id}")
    return {"success": True, "message": "Parent deleted successfully"}


@router.get("/{parent_id}/statistics", response_model=ApiResponse[ParentStatistics])
def get_parent_statistics(
    parent_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    scope: Optional[int] = Depends(get_parent_scope)
):
    parent_service.ensure_in_scope(scope, parent_id)
    return {"success": True, "data": parent_service.get_parent_statistics(db, parent_id, tenant_id)}


# Parent-student relations

@router.get("/{parent_id}/students", response_model=ApiResponse[List[ParentRelationResponse]])
def get_parent_relations(
    parent_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    scope: Optional[int] = Depends(get_parent_scope)
):
    parent_service.ensure_in_scope(scope, parent_id)
    return {"success": True, "data": parent_service.get_parent_relations(db, parent_id, tenant_id)}


@router.post(
    "/{parent_id}/students",
    response_model=ApiResponse[ParentRelationResponse],
    status_code=status.HTTP_201_CREATED
)
def create_parent_relation(
    parent_id: int,
    relation_data: ParentRelationCreate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("parents:update"))
):
    """
    Link a parent to a student of the same school.

    A second link for the same parent and student fails with 409; use
    the update endpoint instead.
    """
    relation = parent_service.create_parent_relation(db, parent_id, relation_data, tenant_id)
    logger.info(f"Parent relation created: id={relation.id}, parent_id={parent_id}, student_id={relation.student_id}")
    return {"success": True, "message": "Relation created successfully", "data": relation}


@router.put("/{parent_id}/students/{relation_id}", response_model=ApiResponse[ParentRelationResponse])
def update_parent_relation(
    parent_id: int,
    relation_id: int,
    relation_data: ParentRelationUpdate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("parents:update"))
):
    relation = parent_service.update_parent_relation(db, parent_id, relation_id, relation_data, tenant_id)
    return {"success": True, "message": "Relation updated successfully", "data": relation}


@router.delete("/{parent_id}/students/{relation_id}", response_model=MessageResponse)
def delete_parent_relation(
    parent_id: int,
    relation_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("parents:update"))
):
    parent_service.delete_parent_relation(db, parent_id, relation_id, tenant_id)
    logger.info(f"Parent relation deleted: id={relation_id}, parent_id={parent_id}")
    return {"success": True, "message": "Relation deleted successfully"}


# Child data; every call re-checks the parent-student relation

@router.get(
    "/{parent_id}/children/{student_id}/academic-records",
    response_model=ApiResponse[List[AcademicRecordResponse]]
)
def get_child_academic_records(
    parent_id: int,
    student_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    scope: Optional[int] = Depends(get_parent_scope)
):
    parent_service.ensure_in_scope(scope, parent_id, CHILD_ACCESS_DENIED)
    records = parent_service.get_child_academic_records(db, parent_id, student_id, tenant_id)
    return {"success": True, "data": records}


@router.get(
    "/{parent_id}/children/{student_id}/attendance",
    response_model=ApiResponse[List[AttendanceResponse]]
)
def get_child_attendance(
    parent_id: int,
    student_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    scope: Optional[int] = Depends(get_parent_scope)
):
    parent_service.ensure_in_scope(scope, parent_id, CHILD_ACCESS_DENIED)
    records = parent_service.get_child_attendance(db, parent_id, student_id, tenant_id)
    return {"success": True, "data": records}


@router.get(
    "/{parent_id}/children/{student_id}/grades",
    response_model=ApiResponse[List[GradeResponse]]
)
def get_child_grades(
    parent_id: int,
    student_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    scope: Optional[int] = Depends(get_parent_scope)
):
    parent_service.ensure_in_scope(scope, parent_id, CHILD_ACCESS_DENIED)
    return {"success": True, "data": parent_service.get_child_grades(db, parent_id, student_id, tenant_id)}


@router.get(
    "/{parent_id}/children/{student_id}/schedule",
    response_model=ApiResponse[List[ScheduleResponse]]
)
def get_child_schedule(
    parent_id: int,
    student_id: int,
    start_date: Optional[date_type] = None,
    end_date: Optional[date_type] = None,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    scope: Optional[int] = Depends(get_parent_scope)
):
    parent_service.ensure_in_scope(scope, parent_id, CHILD_ACCESS_DENIED)
    schedules = parent_service.get_child_schedule(
        db, parent_id, student_id, tenant_id, start_date=start_date, end_date=end_date
    )
    return {"success": True, "data": schedules}


@router.get(
    "/{parent_id}/children/{student_id}/health-records",
    response_model=ApiResponse[List[HealthRecordResponse]]
)
def get_child_health_records(
    parent_id: int,
    student_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    scope: Optional[int] = Depends(get_parent_scope)
):
    parent_service.ensure_in_scope(scope, parent_id, CHILD_ACCESS_DENIED)
    records = parent_service.get_child_health_records(db, parent_id, student_id, tenant_id)
    return {"success": True, "data": records}
