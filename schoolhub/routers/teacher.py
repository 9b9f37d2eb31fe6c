from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from schoolhub.database import get_db
from schoolhub.dependencies import require_permissions
from schoolhub.core.tenant_context import get_tenant_id
from schoolhub.core.logging_config import logger
from schoolhub.models.teacher import Gender
from schoolhub.models.user import User
from schoolhub.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, Pagination
from schoolhub.schemas.teacher import (
    TeacherCreate,
    TeacherUpdate,
    TeacherResponse,
    SubjectAssignment,
    TeacherSubjectResponse,
    QualificationCreate,
    QualificationUpdate,
    QualificationResponse,
)
from schoolhub.services import teacher_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[TeacherResponse])
def get_teachers(
    search: Optional[str] = None,
    gender: Optional[Gender] = None,
    subject_id: Optional[int] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("teachers:read"))
):
    """
    List teachers of your school.

    ``search`` matches name, email, teacher ID and specialization.
    """
    teachers, total = teacher_service.get_teachers(
        db, tenant_id, search=search, gender=gender, subject_id=subject_id, page=page, limit=limit
    )
    return {"success": True, "data": teachers, "pagination": Pagination.build(page, limit, total)}


@router.post("", response_model=ApiResponse[TeacherResponse], status_code=status.HTTP_201_CREATED)
def create_teacher(
    teacher_data: TeacherCreate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    current_user: User = Depends(require_permissions("teachers:create"))
):
    """
    Create a teacher account and profile.

    Leave ``teacher_code`` empty to have one generated. An explicit code
    that is already taken in your school fails with 409.
    """
    try:
        logger.info(f"Creating teacher: email={teacher_data.email}, tenant_id={tenant_id}")
        teacher = teacher_service.create_teacher(db, teacher_data, tenant_id, created_by=current_user.id)
        logger.info(f"Teacher created successfully: id={teacher.id}, teacher_code={teacher.teacher_code}")
        return {"success": True, "message": "Teacher created successfully", "data": teacher}
    except Exception as e:
        logger.error(f"Error creating teacher: {type(e).__name__}: {str(e)}")
        raise


@router.get("/{teacher_id}", response_model=ApiResponse[TeacherResponse])
def get_teacher(
    teacher_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("teachers:read"))
):
    return {"success": True, "data": teacher_service.get_teacher(db, teacher_id, tenant_id)}


@router.put("/{teacher_id}", response_model=ApiResponse[TeacherResponse])
def update_teacher(
    teacher_id: int,
    teacher_data: TeacherUpdate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("teachers:update"))
):
    teacher = teacher_service.update_teacher(db, teacher_id, teacher_data, tenant_id)
    logger.info(f"Teacher updated: id={teacher.id}, tenant_id={tenant_id}")
    return {"success": True, "message": "Teacher updated successfully", "data": teacher}


@router.delete("/{teacher_id}", response_model=MessageResponse)
def delete_teacher(
    teacher_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("teachers:delete"))
):
    teacher_service.delete_teacher(db, teacher_id, tenant_id)
    logger.info(f"Teacher deleted: id={teacher_id}, tenant_id={tenant_id}")
    return {"success": True, "message": "Teacher deleted successfully"}


@router.get("/{teacher_id}/subjects", response_model=ApiResponse[List[TeacherSubjectResponse]])
def get_teacher_subjects(
    teacher_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("teachers:read"))
):
    return {"success": True, "data": teacher_service.get_subjects(db, teacher_id, tenant_id)}


@router.post(
    "/{teacher_id}/subjects",
    response_model=ApiResponse[TeacherSubjectResponse],
    status_code=status.HTTP_201_CREATED
)
def assign_teacher_subject(
    teacher_id: int,
    assignment: SubjectAssignment,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    current_user: User = Depends(require_permissions("teachers:update"))
):
    result = teacher_service.assign_subject(
        db, teacher_id, assignment.subject_id, tenant_id, assigned_by=current_user.id
    )
    logger.info(f"Subject assigned: teacher_id={teacher_id}, subject_id={assignment.subject_id}")
    return {"success": True, "message": "Subject assigned successfully", "data": result}


@router.delete("/{teacher_id}/subjects/{subject_id}", response_model=MessageResponse)
def remove_teacher_subject(
    teacher_id: int,
    subject_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("teachers:update"))
):
    teacher_service.remove_subject(db, teacher_id, subject_id, tenant_id)
    return {"success": True, "message": "Subject removed from teacher"}


@router.get("/{teacher_id}/qualifications", response_model=ApiResponse[List[QualificationResponse]])
def get_teacher_qualifications(
    teacher_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("teachers:read"))
):
    return {"success": True, "data": teacher_service.get_qualifications(db, teacher_id, tenant_id)}


@router.post(
    "/{teacher_id}/qualifications",
    response_model=ApiResponse[QualificationResponse],
    status_code=status.HTTP_201_CREATED
)
def add_teacher_qualification(
    teacher_id: int,
    qualification_data: QualificationCreate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    current_user: User = Depends(require_permissions("teachers:update"))
):
    qualification = teacher_service.add_qualification(
        db, teacher_id, qualification_data, tenant_id, created_by=current_user.id
    )
    logger.info(f"Qualification added: id={qualification.id}, teacher_id={teacher_id}")
    return {"success": True, "message": "Qualification added successfully", "data": qualification}


@router.put(
    "/{teacher_id}/qualifications/{qualification_id}",
    response_model=ApiResponse[QualificationResponse]
)
def update_teacher_qualification(
    teacher_id: int,
    qualification_id: int,
    qualification_data: QualificationUpdate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    current_user: User = Depends(require_permissions("teachers:update"))
):
    qualification = teacher_service.update_qualification(
        db, teacher_id, qualification_id, qualification_data, tenant_id, updated_by=current_user.id
    )
    return {"success": True, "message": "Qualification updated successfully", "data": qualification}


@router.delete("/{teacher_id}/qualifications/{qualification_id}", response_model=MessageResponse)
def delete_teacher_qualification(
    teacher_id: int,
    qualification_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("teachers:update"))
):
    teacher_service.delete_qualification(db, teacher_id, qualification_id, tenant_id)
    return {"success": True, "message": "Qualification deleted successfully"}
