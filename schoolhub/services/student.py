import secrets
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from schoolhub.crud import (
    student as student_crud,
    enrollment as enrollment_crud,
    school_class as school_class_crud,
    user as user_crud,
)
from schoolhub.models.student import Student, StudentEnrollment, StudentStatus
from schoolhub.schemas.student import StudentCreate, EnrollmentCreate
from schoolhub.core.exceptions import ConflictError, NotFoundError


class StudentService:
    """
    Students are User accounts with a tenant-unique admission number.
    """

    def __init__(self):
        self.crud = student_crud

    def get_student(self, db: Session, student_id: int, tenant_id: int) -> Student:
        student = self.crud.get(db=db, id=student_id, tenant_id=tenant_id)
        if not student:
            raise NotFoundError("Student")
        return student

    def get_students(
        self,
        db: Session,
        tenant_id: int,
        search: Optional[str] = None,
        status: Optional[StudentStatus] = None,
        class_id: Optional[int] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Student], int]:
        return self.crud.get_filtered(
            db, tenant_id=tenant_id, search=search, status=status,
            class_id=class_id, page=page, limit=limit
        )

    def create_student(self, db: Session, student_data: StudentCreate, tenant_id: int) -> Student:
        if user_crud.get_by_email(db, email=student_data.email, tenant_id=tenant_id):
            raise ConflictError(f"User with email {student_data.email} already exists")
        if self.crud.get_by_admission_number(
            db, admission_number=student_data.admission_number, tenant_id=tenant_id
        ):
            raise ConflictError(f"Admission number '{student_data.admission_number}' already exists")

        try:
            user = user_crud.create_account(
                db,
                tenant_id=tenant_id,
                email=student_data.email,
                password=student_data.password or secrets.token_urlsafe(16),
                first_name=student_data.first_name,
                last_name=student_data.last_name,
                phone=student_data.phone,
                commit=False,
            )
            student = self.crud.create(
                db,
                obj_in={
                    "admission_number": student_data.admission_number,
                    "date_of_birth": student_data.date_of_birth,
                    "gender": student_data.gender,
                },
                tenant_id=tenant_id,
                user_id=user.id,
                commit=False,
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        return self.get_student(db, student.id, tenant_id)

    def get_enrollments(self, db: Session, student_id: int, tenant_id: int) -> List[StudentEnrollment]:
        self.get_student(db, student_id, tenant_id)
        return enrollment_crud.get_for_student(db, student_id=student_id, tenant_id=tenant_id)

    def enroll(self, db: Session, student_id: int, data: EnrollmentCreate, tenant_id: int) -> StudentEnrollment:
        student = self.get_student(db, student_id, tenant_id)
        if not school_class_crud.get(db=db, id=data.class_id, tenant_id=tenant_id):
            raise NotFoundError("Class")
        if enrollment_crud.get_pair(db, student_id=student.id, class_id=data.class_id, tenant_id=tenant_id):
            raise ConflictError("Student is already enrolled in this class")
        enrollment_data = data.model_dump(exclude_none=True)
        return enrollment_crud.create(db, obj_in=enrollment_data, tenant_id=tenant_id, student_id=student.id)


student_service = StudentService()
