from typing import Optional, List, Tuple, Type
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, or_
from schoolhub.crud.base import CRUDBase
from schoolhub.models.student import Student, StudentEnrollment, StudentStatus, EnrollmentStatus
from schoolhub.models.student_record import AcademicRecord, AttendanceRecord, Grade, HealthRecord
from schoolhub.models.user import User
from schoolhub.schemas.student import StudentCreate, EnrollmentCreate


class CRUDStudent(CRUDBase[Student, StudentCreate, StudentCreate]):

    def get(self, db: Session, id: int, tenant_id: int) -> Optional[Student]:
        stmt = select(Student).where(
            Student.id == id,
            Student.tenant_id == tenant_id
        ).options(selectinload(Student.user))
        return db.execute(stmt).scalar_one_or_none()

    def get_by_admission_number(self, db: Session, *, admission_number: str, tenant_id: int) -> Optional[Student]:
        stmt = select(Student).where(
            Student.admission_number == admission_number,
            Student.tenant_id == tenant_id
        )
        return db.execute(stmt).scalar_one_or_none()

    def get_filtered(
        self,
        db: Session,
        *,
        tenant_id: int,
        search: Optional[str] = None,
        status: Optional[StudentStatus] = None,
        class_id: Optional[int] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Student], int]:
        stmt = select(Student).join(User, User.id == Student.user_id).where(Student.tenant_id == tenant_id)
        if status:
            stmt = stmt.where(Student.status == status)
        if class_id:
            stmt = stmt.where(Student.enrollments.any(StudentEnrollment.class_id == class_id))
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                Student.admission_number.ilike(pattern),
            ))
        stmt = stmt.options(selectinload(Student.user)).order_by(User.last_name, User.first_name, Student.id)
        return self.paginate(db, stmt, page=page, limit=limit)


class CRUDEnrollment(CRUDBase[StudentEnrollment, EnrollmentCreate, EnrollmentCreate]):

    def get_for_student(self, db: Session, *, student_id: int, tenant_id: int) -> List[StudentEnrollment]:
        stmt = select(StudentEnrollment).where(
            StudentEnrollment.student_id == student_id,
            StudentEnrollment.tenant_id == tenant_id
        ).order_by(StudentEnrollment.enrollment_date.desc(), StudentEnrollment.id)
        return list(db.execute(stmt).scalars().all())

    def get_pair(self, db: Session, *, student_id: int, class_id: int, tenant_id: int) -> Optional[StudentEnrollment]:
        stmt = select(StudentEnrollment).where(
            StudentEnrollment.student_id == student_id,
            StudentEnrollment.class_id == class_id,
            StudentEnrollment.tenant_id == tenant_id
        )
        return db.execute(stmt).scalar_one_or_none()

    def get_active_class_ids(self, db: Session, *, student_id: int, tenant_id: int) -> List[int]:
        stmt = select(StudentEnrollment.class_id).where(
            StudentEnrollment.student_id == student_id,
            StudentEnrollment.tenant_id == tenant_id,
            StudentEnrollment.status == EnrollmentStatus.ACTIVE
        )
        return list(db.execute(stmt).scalars().all())


class CRUDStudentRecords:
    """
    Read-only access to per-student record tables.

    These rows are written by other school workflows; here they are only
    listed, newest first, for one student in one tenant.
    """

    def _list(self, db: Session, model: Type, order_col, *, student_id: int, tenant_id: int,
              limit: Optional[int] = None, options=()):
        stmt = select(model).where(
            model.student_id == student_id,
            model.tenant_id == tenant_id
        ).options(*options).order_by(order_col.desc(), model.id.desc())
        if limit:
            stmt = stmt.limit(limit)
        return list(db.execute(stmt).scalars().all())

    def academic_records(self, db: Session, *, student_id: int, tenant_id: int) -> List[AcademicRecord]:
        return self._list(db, AcademicRecord, AcademicRecord.academic_year,
                          student_id=student_id, tenant_id=tenant_id,
                          options=(selectinload(AcademicRecord.subject),))

    def attendance(self, db: Session, *, student_id: int, tenant_id: int, limit: int = 30) -> List[AttendanceRecord]:
        return self._list(db, AttendanceRecord, AttendanceRecord.date,
                          student_id=student_id, tenant_id=tenant_id, limit=limit)

    def grades(self, db: Session, *, student_id: int, tenant_id: int) -> List[Grade]:
        return self._list(db, Grade, Grade.recorded_on,
                          student_id=student_id, tenant_id=tenant_id,
                          options=(selectinload(Grade.subject),))

    def health_records(self, db: Session, *, student_id: int, tenant_id: int) -> List[HealthRecord]:
        return self._list(db, HealthRecord, HealthRecord.recorded_on,
                          student_id=student_id, tenant_id=tenant_id)


# Create singleton instances
student = CRUDStudent(Student)
enrollment = CRUDEnrollment(StudentEnrollment)
student_records = CRUDStudentRecords()
