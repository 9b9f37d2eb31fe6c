from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from schoolhub.database import get_db
from schoolhub.dependencies import require_permissions
from schoolhub.core.tenant_context import get_tenant_id
from schoolhub.core.logging_config import logger
from schoolhub.models.student import StudentStatus
from schoolhub.models.user import User
from schoolhub.schemas.common import ApiResponse, PaginatedResponse, Pagination
from schoolhub.schemas.student import StudentCreate, StudentResponse, EnrollmentCreate, EnrollmentResponse
from schoolhub.services import student_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[StudentResponse])
def get_students(
    search: Optional[str] = None,
    status_filter: Optional[StudentStatus] = Query(None, alias="status"),
    class_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("students:read"))
):
    students, total = student_service.get_students(
        db, tenant_id, search=search, status=status_filter, class_id=class_id, page=page, limit=limit
    )
    return {"success": True, "data": students, "pagination": Pagination.build(page, limit, total)}


@router.post("", response_model=ApiResponse[StudentResponse], status_code=status.HTTP_201_CREATED)
def create_student(
    student_data: StudentCreate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("students:create"))
):
    try:
        logger.info(f"Creating student: admission_number={student_data.admission_number}, tenant_id={tenant_id}")
        student = student_service.create_student(db, student_data, tenant_id)
        logger.info(f"Student created successfully: id={student.id}")
        return {"success": True, "message": "Student created successfully", "data": student}
    except Exception as e:
        logger.error(f"Error creating student: {type(e).__name__}: {str(e)}")
        raise


@router.get("/{student_id}", response_model=ApiResponse[StudentResponse])
def get_student(
    student_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("students:read"))
):
    return {"success": True, "data": student_service.get_student(db, student_id, tenant_id)}


@router.get("/{student_id}/enrollments", response_model=ApiResponse[List[EnrollmentResponse]])
def get_student_enrollments(
    student_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("students:read"))
):
    return {"success": True, "data": student_service.get_enrollments(db, student_id, tenant_id)}


@router.post(
    "/{student_id}/enrollments",
    response_model=ApiResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED
)
def enroll_student(
    student_id: int,
    enrollment_data: EnrollmentCreate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("students:update"))
):
    enrollment = student_service.enroll(db, student_id, enrollment_data, tenant_id)
    logger.info(f"Student enrolled: student_id={student_id}, class_id={enrollment.class_id}")
    return {"success": True, "message": "Student enrolled successfully", "data": enrollment}
