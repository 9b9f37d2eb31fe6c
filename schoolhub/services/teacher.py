import random
import secrets
import time
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from schoolhub.crud import (
    teacher as teacher_crud,
    teacher_subject as teacher_subject_crud,
    teacher_qualification as qualification_crud,
    subject as subject_crud,
    user as user_crud,
    role as role_crud,
)
from schoolhub.models.teacher import Teacher, TeacherSubject, TeacherQualification, Gender
from schoolhub.models.user import User, UserStatus
from schoolhub.schemas.teacher import (
    TeacherCreate, TeacherUpdate, QualificationCreate, QualificationUpdate,
)
from schoolhub.core.config import settings
from schoolhub.core.exceptions import ConflictError, NotFoundError
from schoolhub.core.logging_config import logger
from schoolhub.core.permissions import TEACHER_ROLE

USER_FIELDS = {"first_name", "last_name", "email", "phone", "password"}


def generate_teacher_code() -> str:
    """``TCH`` + epoch milliseconds + 3 random digits."""
    return f"TCH{int(time.time() * 1000)}{random.randint(0, 999):03d}"


class TeacherService:
    """
    Service layer for teacher profiles.

    Creating a teacher writes three things in one transaction: the User
    account, its Teacher role assignment and the profile row.
    """

    def __init__(self):
        self.crud = teacher_crud

    def get_teacher(self, db: Session, teacher_id: int, tenant_id: int) -> Teacher:
        teacher = self.crud.get(db=db, id=teacher_id, tenant_id=tenant_id)
        if not teacher:
            raise NotFoundError("Teacher")
        return teacher

    def get_teachers(
        self,
        db: Session,
        tenant_id: int,
        search: Optional[str] = None,
        gender: Optional[Gender] = None,
        subject_id: Optional[int] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Teacher], int]:
        return self.crud.get_filtered(
            db, tenant_id=tenant_id, search=search, gender=gender,
            subject_id=subject_id, page=page, limit=limit
        )

    def create_teacher(
        self,
        db: Session,
        teacher_data: TeacherCreate,
        tenant_id: int,
        created_by: int
    ) -> Teacher:
        """
        Create the account, role assignment and profile together.

        Raises:
            ConflictError: Email already used in the tenant, explicit
                teacher code already taken, or no free generated code
                within the attempt budget
        """
        if user_crud.get_by_email(db, email=teacher_data.email, tenant_id=tenant_id):
            raise ConflictError(f"User with email {teacher_data.email} already exists")
        if teacher_data.teacher_code and self.crud.get_by_code(
            db, teacher_code=teacher_data.teacher_code, tenant_id=tenant_id
        ):
            raise ConflictError(f"Teacher ID '{teacher_data.teacher_code}' already exists")

        profile = teacher_data.model_dump(exclude=USER_FIELDS | {"teacher_code"}, exclude_none=True)
        try:
            user = user_crud.create_account(
                db,
                tenant_id=tenant_id,
                email=teacher_data.email,
                password=teacher_data.password or secrets.token_urlsafe(16),
                first_name=teacher_data.first_name,
                last_name=teacher_data.last_name,
                phone=teacher_data.phone,
                commit=False,
            )
            teacher_role = role_crud.get_by_name(db, name=TEACHER_ROLE, tenant_id=tenant_id)
            if teacher_role:
                role_crud.assign_user(
                    db, user_id=user.id, role_id=teacher_role.id, tenant_id=tenant_id, commit=False
                )

            if teacher_data.teacher_code:
                teacher = self.crud.create(
                    db, obj_in=profile, tenant_id=tenant_id, commit=False,
                    user_id=user.id, teacher_code=teacher_data.teacher_code, created_by=created_by,
                )
            else:
                teacher = self._create_with_generated_code(db, profile, tenant_id, user, created_by)
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Teacher ID or email already exists")
        except Exception:
            db.rollback()
            raise

        return self.get_teacher(db, teacher.id, tenant_id)

    def _create_with_generated_code(
        self,
        db: Session,
        profile: dict,
        tenant_id: int,
        user: User,
        created_by: int
    ) -> Teacher:
        """
        Insert the profile under a fresh generated code.

        A code already present is skipped; an insert that loses a race on
        the unique index is rolled back to its savepoint and retried. Both
        count against the same attempt budget.
        """
        attempts = settings.TEACHER_CODE_MAX_ATTEMPTS
        for attempt in range(1, attempts + 1):
            code = generate_teacher_code()
            if self.crud.get_by_code(db, teacher_code=code, tenant_id=tenant_id):
                logger.warning(f"Teacher code collision: code={code}, attempt={attempt}/{attempts}")
                continue
            try:
                with db.begin_nested():
                    return self.crud.create(
                        db, obj_in=profile, tenant_id=tenant_id, commit=False,
                        user_id=user.id, teacher_code=code, created_by=created_by,
                    )
            except IntegrityError:
                logger.warning(f"Teacher code insert collided: code={code}, attempt={attempt}/{attempts}")

        raise ConflictError("Failed to generate a unique teacher ID, please retry")

    def update_teacher(
        self,
        db: Session,
        teacher_id: int,
        teacher_data: TeacherUpdate,
        tenant_id: int
    ) -> Teacher:
        teacher = self.get_teacher(db, teacher_id, tenant_id)
        update_data = teacher_data.model_dump(exclude_unset=True)
        user_updates = {k: update_data.pop(k) for k in list(update_data) if k in USER_FIELDS}

        if user_updates.get("email"):
            user_updates["email"] = user_updates["email"].lower()
            if user_updates["email"] != teacher.user.email and user_crud.get_by_email(
                db, email=user_updates["email"], tenant_id=tenant_id
            ):
                raise ConflictError(f"User with email {user_updates['email']} already exists")

        try:
            for field, value in user_updates.items():
                setattr(teacher.user, field, value)
            self.crud.update(db=db, db_obj=teacher, obj_in=update_data, commit=False)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return self.get_teacher(db, teacher.id, tenant_id)

    def delete_teacher(self, db: Session, teacher_id: int, tenant_id: int) -> None:
        """Remove the profile and deactivate its account; users are never deleted."""
        teacher = self.get_teacher(db, teacher_id, tenant_id)
        try:
            teacher.user.status = UserStatus.INACTIVE
            db.delete(teacher)
            db.commit()
        except Exception:
            db.rollback()
            raise

    # Subjects

    def get_subjects(self, db: Session, teacher_id: int, tenant_id: int) -> List[TeacherSubject]:
        self.get_teacher(db, teacher_id, tenant_id)
        return teacher_subject_crud.get_for_teacher(db, teacher_id=teacher_id, tenant_id=tenant_id)

    def assign_subject(
        self,
        db: Session,
        teacher_id: int,
        subject_id: int,
        tenant_id: int,
        assigned_by: int
    ) -> TeacherSubject:
        teacher = self.get_teacher(db, teacher_id, tenant_id)
        subject = subject_crud.get(db=db, id=subject_id, tenant_id=tenant_id)
        if not subject:
            raise NotFoundError("Subject")
        if teacher_subject_crud.get_pair(db, teacher_id=teacher.id, subject_id=subject.id, tenant_id=tenant_id):
            raise ConflictError("Subject already assigned to this teacher")
        return teacher_subject_crud.create(
            db,
            obj_in={"teacher_id": teacher.id, "subject_id": subject.id, "assigned_by": assigned_by},
            tenant_id=tenant_id,
        )

    def remove_subject(self, db: Session, teacher_id: int, subject_id: int, tenant_id: int) -> None:
        self.get_teacher(db, teacher_id, tenant_id)
        assignment = teacher_subject_crud.get_pair(
            db, teacher_id=teacher_id, subject_id=subject_id, tenant_id=tenant_id
        )
        if not assignment:
            raise NotFoundError("Subject assignment")
        teacher_subject_crud.delete(db=db, id=assignment.id, tenant_id=tenant_id)

    # Qualifications

    def get_qualifications(self, db: Session, teacher_id: int, tenant_id: int) -> List[TeacherQualification]:
        self.get_teacher(db, teacher_id, tenant_id)
        return qualification_crud.get_for_teacher(db, teacher_id=teacher_id, tenant_id=tenant_id)

    def _get_qualification(
        self, db: Session, teacher_id: int, qualification_id: int, tenant_id: int
    ) -> TeacherQualification:
        qualification = qualification_crud.get(db=db, id=qualification_id, tenant_id=tenant_id)
        if not qualification or qualification.teacher_id != teacher_id:
            raise NotFoundError("Qualification")
        return qualification

    def add_qualification(
        self,
        db: Session,
        teacher_id: int,
        data: QualificationCreate,
        tenant_id: int,
        created_by: int
    ) -> TeacherQualification:
        teacher = self.get_teacher(db, teacher_id, tenant_id)
        return qualification_crud.create(
            db, obj_in=data, tenant_id=tenant_id,
            teacher_id=teacher.id, created_by=created_by, updated_by=created_by,
        )

    def update_qualification(
        self,
        db: Session,
        teacher_id: int,
        qualification_id: int,
        data: QualificationUpdate,
        tenant_id: int,
        updated_by: int
    ) -> TeacherQualification:
        self.get_teacher(db, teacher_id, tenant_id)
        qualification = self._get_qualification(db, teacher_id, qualification_id, tenant_id)
        update_data = data.model_dump(exclude_unset=True)
        update_data["updated_by"] = updated_by
        return qualification_crud.update(db=db, db_obj=qualification, obj_in=update_data)

    def delete_qualification(self, db: Session, teacher_id: int, qualification_id: int, tenant_id: int) -> None:
        self.get_teacher(db, teacher_id, tenant_id)
        qualification = self._get_qualification(db, teacher_id, qualification_id, tenant_id)
        qualification_crud.delete(db=db, id=qualification.id, tenant_id=tenant_id)


teacher_service = TeacherService()
