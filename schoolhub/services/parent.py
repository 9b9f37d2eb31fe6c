from datetime import date
from typing import List, Optional, Set, Tuple
from sqlalchemy.orm import Session
from schoolhub.crud import (
    parent as parent_crud,
    parent_relation as relation_crud,
    student as student_crud,
    enrollment as enrollment_crud,
    student_records as records_crud,
    schedule as schedule_crud,
    user as user_crud,
    role as role_crud,
)
from schoolhub.models.parent import Parent, ParentStudentRelation, ParentStatus, RelationshipType
from schoolhub.models.schedule import Schedule
from schoolhub.schemas.parent import ParentCreate, ParentUpdate, ParentRelationCreate, ParentRelationUpdate
from schoolhub.core.exceptions import AuthorizationError, ConflictError, NotFoundError
from schoolhub.core.logging_config import logger
from schoolhub.core.permissions import PARENT_ROLE, PARENT_MANAGER_PERMISSION

ATTENDANCE_HISTORY_LIMIT = 30


def _map_relationship(data: dict) -> dict:
    """API field ``relationship`` is stored on ``relationship_type``."""
    if "relationship" in data:
        data["relationship_type"] = data.pop("relationship")
    return data


class ParentService:
    """
    Parents, their links to students, and the child-data portal.

    Every child-data read re-checks the parent-student link at call time.
    Holding ``parents:read`` alone never exposes a student's records.
    """

    def __init__(self):
        self.crud = parent_crud

    def get_parent(self, db: Session, parent_id: int, tenant_id: int) -> Parent:
        parent = self.crud.get(db=db, id=parent_id, tenant_id=tenant_id)
        if not parent:
            raise NotFoundError("Parent")
        return parent

    def get_parents(
        self,
        db: Session,
        tenant_id: int,
        search: Optional[str] = None,
        status: Optional[ParentStatus] = None,
        relationship_type: Optional[RelationshipType] = None,
        scope: Optional[int] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Parent], int]:
        return self.crud.get_filtered(
            db, tenant_id=tenant_id, search=search, status=status,
            relationship_type=relationship_type, parent_id=scope, page=page, limit=limit
        )

    def resolve_scope(self, db: Session, user_id: int, tenant_id: int, granted: Set[str]) -> Optional[int]:
        """
        Which parent profile a caller may read.

        Returns None when the caller is unrestricted: staff without a parent
        profile, or anyone holding the parent-manager permission. A parent
        gets their own profile id.
        """
        if PARENT_MANAGER_PERMISSION in granted:
            return None
        own = self.crud.get_by_user(db, user_id=user_id, tenant_id=tenant_id)
        return own.id if own else None

    @staticmethod
    def ensure_in_scope(scope: Optional[int], parent_id: int, message: str = "Access denied to this parent") -> None:
        if scope is not None and scope != parent_id:
            logger.warning(f"Parent scope denied: own_parent_id={scope}, requested_parent_id={parent_id}")
            raise AuthorizationError(message)

    def create_parent(self, db: Session, parent_data: ParentCreate, tenant_id: int) -> Parent:
        """
        Attach a parent profile to an existing user of the tenant and grant
        the tenant's Parent role when the user does not hold it yet.
        """
        user = user_crud.get(db=db, id=parent_data.user_id, tenant_id=tenant_id)
        if not user:
            raise NotFoundError("User")
        if self.crud.get_by_user(db, user_id=user.id, tenant_id=tenant_id):
            raise ConflictError("Parent profile already exists for this user")

        try:
            parent = self.crud.create(
                db, obj_in=_map_relationship(parent_data.model_dump()), tenant_id=tenant_id, commit=False
            )
            parent_role = role_crud.get_by_name(db, name=PARENT_ROLE, tenant_id=tenant_id)
            if parent_role and not role_crud.get_assignment(db, user_id=user.id, role_id=parent_role.id):
                role_crud.assign_user(db, user_id=user.id, role_id=parent_role.id, tenant_id=tenant_id, commit=False)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return self.get_parent(db, parent.id, tenant_id)

    def update_parent(self, db: Session, parent_id: int, parent_data: ParentUpdate, tenant_id: int) -> Parent:
        parent = self.get_parent(db, parent_id, tenant_id)
        update_data = _map_relationship(parent_data.model_dump(exclude_unset=True))
        self.crud.update(db=db, db_obj=parent, obj_in=update_data)
        return self.get_parent(db, parent.id, tenant_id)

    def delete_parent(self, db: Session, parent_id: int, tenant_id: int) -> None:
        parent = self.get_parent(db, parent_id, tenant_id)
        self.crud.delete(db=db, id=parent.id, tenant_id=tenant_id)

    # Relations

    def create_parent_relation(
        self,
        db: Session,
        parent_id: int,
        relation_data: ParentRelationCreate,
        tenant_id: int
    ) -> ParentStudentRelation:
        """
        Link a parent to a student.

        Raises:
            NotFoundError: Parent or student not in the tenant
            ConflictError: The pair is already linked
        """
        parent = self.get_parent(db, parent_id, tenant_id)
        student = student_crud.get(db=db, id=relation_data.student_id, tenant_id=tenant_id)
        if not student:
            raise NotFoundError("Student")
        if relation_crud.get_pair(db, parent_id=parent.id, student_id=student.id, tenant_id=tenant_id):
            raise ConflictError("Relation already exists between this parent and student")

        relation = relation_crud.create(
            db,
            obj_in=_map_relationship(relation_data.model_dump()),
            tenant_id=tenant_id,
            parent_id=parent.id,
        )
        return relation_crud.get(db=db, id=relation.id, tenant_id=tenant_id)

    def get_parent_relations(self, db: Session, parent_id: int, tenant_id: int) -> List[ParentStudentRelation]:
        self.get_parent(db, parent_id, tenant_id)
        return relation_crud.get_for_parent(db, parent_id=parent_id, tenant_id=tenant_id)

    def _get_relation(self, db: Session, parent_id: int, relation_id: int, tenant_id: int) -> ParentStudentRelation:
        relation = relation_crud.get(db=db, id=relation_id, tenant_id=tenant_id)
        if not relation or relation.parent_id != parent_id:
            raise NotFoundError("Relation")
        return relation

    def update_parent_relation(
        self,
        db: Session,
        parent_id: int,
        relation_id: int,
        relation_data: ParentRelationUpdate,
        tenant_id: int
    ) -> ParentStudentRelation:
        relation = self._get_relation(db, parent_id, relation_id, tenant_id)
        update_data = _map_relationship(relation_data.model_dump(exclude_unset=True))
        relation_crud.update(db=db, db_obj=relation, obj_in=update_data)
        return relation_crud.get(db=db, id=relation.id, tenant_id=tenant_id)

    def delete_parent_relation(self, db: Session, parent_id: int, relation_id: int, tenant_id: int) -> None:
        relation = self._get_relation(db, parent_id, relation_id, tenant_id)
        relation_crud.delete(db=db, id=relation.id, tenant_id=tenant_id)

    def get_parent_statistics(self, db: Session, parent_id: int, tenant_id: int) -> dict:
        relations = self.get_parent_relations(db, parent_id, tenant_id)
        return {
            "total_children": len(relations),
            "primary_for": sum(1 for r in relations if r.is_primary),
            "emergency_contact_for": sum(1 for r in relations if r.is_emergency),
            "can_pickup": sum(1 for r in relations if r.can_pickup),
        }

    # Child data, gated by the relation

    def _require_relation(self, db: Session, parent_id: int, student_id: int, tenant_id: int) -> None:
        """
        Deny unless (tenant, parent, student) is linked.

        The student is not looked up: a missing student and an unrelated
        student both answer 403.
        """
        if not relation_crud.get_pair(db, parent_id=parent_id, student_id=student_id, tenant_id=tenant_id):
            logger.warning(
                f"Child data denied: parent_id={parent_id}, student_id={student_id}, tenant_id={tenant_id}"
            )
            raise AuthorizationError("Access denied to this student's records")

    def get_child_academic_records(self, db: Session, parent_id: int, student_id: int, tenant_id: int):
        self._require_relation(db, parent_id, student_id, tenant_id)
        return records_crud.academic_records(db, student_id=student_id, tenant_id=tenant_id)

    def get_child_attendance(self, db: Session, parent_id: int, student_id: int, tenant_id: int):
        """Most recent attendance entries, newest first."""
        self._require_relation(db, parent_id, student_id, tenant_id)
        return records_crud.attendance(
            db, student_id=student_id, tenant_id=tenant_id, limit=ATTENDANCE_HISTORY_LIMIT
        )

    def get_child_grades(self, db: Session, parent_id: int, student_id: int, tenant_id: int):
        self._require_relation(db, parent_id, student_id, tenant_id)
        return records_crud.grades(db, student_id=student_id, tenant_id=tenant_id)

    def get_child_health_records(self, db: Session, parent_id: int, student_id: int, tenant_id: int):
        self._require_relation(db, parent_id, student_id, tenant_id)
        return records_crud.health_records(db, student_id=student_id, tenant_id=tenant_id)

    def get_child_schedule(
        self,
        db: Session,
        parent_id: int,
        student_id: int,
        tenant_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[Schedule]:
        """Schedules of the classes the student is actively enrolled in."""
        self._require_relation(db, parent_id, student_id, tenant_id)
        class_ids = enrollment_crud.get_active_class_ids(db, student_id=student_id, tenant_id=tenant_id)
        if not class_ids:
            return []
        return schedule_crud.get_for_export(
            db, tenant_id=tenant_id, class_ids=class_ids, start_date=start_date, end_date=end_date
        )


parent_service = ParentService()
