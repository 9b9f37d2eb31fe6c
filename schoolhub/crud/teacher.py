from typing import Optional, List, Tuple
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, or_
from schoolhub.crud.base import CRUDBase
from schoolhub.models.teacher import Teacher, TeacherSubject, TeacherQualification, Gender
from schoolhub.models.user import User
from schoolhub.schemas.teacher import (
    TeacherCreate, TeacherUpdate, QualificationCreate, QualificationUpdate,
)


def _with_profile(stmt):
    return stmt.options(
        selectinload(Teacher.user),
        selectinload(Teacher.teacher_subjects).selectinload(TeacherSubject.subject),
    )


class CRUDTeacher(CRUDBase[Teacher, TeacherCreate, TeacherUpdate]):
    """
    CRUD operations for Teacher profiles.

    A teacher is a User plus this profile row; the user fields live on
    the joined User and are searched through the join.
    """

    def get(self, db: Session, id: int, tenant_id: int) -> Optional[Teacher]:
        stmt = _with_profile(select(Teacher).where(
            Teacher.id == id,
            Teacher.tenant_id == tenant_id
        ))
        return db.execute(stmt).scalar_one_or_none()

    def get_for_update(self, db: Session, *, id: int, tenant_id: int) -> Optional[Teacher]:
        """
        Fetch and row-lock a teacher.

        Writes that must not interleave for one teacher (schedule booking)
        serialize on this lock until the transaction ends. SQLite ignores
        FOR UPDATE.
        """
        stmt = select(Teacher).where(
            Teacher.id == id,
            Teacher.tenant_id == tenant_id
        ).with_for_update()
        return db.execute(stmt).scalar_one_or_none()

    def get_by_code(self, db: Session, *, teacher_code: str, tenant_id: int) -> Optional[Teacher]:
        stmt = select(Teacher).where(
            Teacher.teacher_code == teacher_code,
            Teacher.tenant_id == tenant_id
        )
        return db.execute(stmt).scalar_one_or_none()

    def get_by_user(self, db: Session, *, user_id: int, tenant_id: int) -> Optional[Teacher]:
        stmt = select(Teacher).where(
            Teacher.user_id == user_id,
            Teacher.tenant_id == tenant_id
        )
        return db.execute(stmt).scalar_one_or_none()

    def get_filtered(
        self,
        db: Session,
        *,
        tenant_id: int,
        search: Optional[str] = None,
        gender: Optional[Gender] = None,
        subject_id: Optional[int] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Teacher], int]:
        stmt = select(Teacher).join(User, User.id == Teacher.user_id).where(Teacher.tenant_id == tenant_id)
        if gender:
            stmt = stmt.where(Teacher.gender == gender)
        if subject_id:
            stmt = stmt.where(Teacher.teacher_subjects.any(TeacherSubject.subject_id == subject_id))
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.email.ilike(pattern),
                Teacher.teacher_code.ilike(pattern),
                Teacher.specialization.ilike(pattern),
            ))
        stmt = _with_profile(stmt.order_by(User.last_name, User.first_name, Teacher.id))
        return self.paginate(db, stmt, page=page, limit=limit)


class CRUDTeacherSubject(CRUDBase[TeacherSubject, TeacherSubject, TeacherSubject]):

    def get_for_teacher(self, db: Session, *, teacher_id: int, tenant_id: int) -> List[TeacherSubject]:
        stmt = select(TeacherSubject).where(
            TeacherSubject.teacher_id == teacher_id,
            TeacherSubject.tenant_id == tenant_id
        ).options(selectinload(TeacherSubject.subject)).order_by(TeacherSubject.id)
        return list(db.execute(stmt).scalars().all())

    def get_pair(self, db: Session, *, teacher_id: int, subject_id: int, tenant_id: int) -> Optional[TeacherSubject]:
        stmt = select(TeacherSubject).where(
            TeacherSubject.teacher_id == teacher_id,
            TeacherSubject.subject_id == subject_id,
            TeacherSubject.tenant_id == tenant_id
        )
        return db.execute(stmt).scalar_one_or_none()


class CRUDTeacherQualification(CRUDBase[TeacherQualification, QualificationCreate, QualificationUpdate]):

    def get_for_teacher(self, db: Session, *, teacher_id: int, tenant_id: int) -> List[TeacherQualification]:
        stmt = select(TeacherQualification).where(
            TeacherQualification.teacher_id == teacher_id,
            TeacherQualification.tenant_id == tenant_id
        ).order_by(TeacherQualification.date_obtained.desc())
        return list(db.execute(stmt).scalars().all())


# Create singleton instances
teacher = CRUDTeacher(Teacher)
teacher_subject = CRUDTeacherSubject(TeacherSubject)
teacher_qualification = CRUDTeacherQualification(TeacherQualification)
