from typing import Optional, List, Tuple
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, or_
from schoolhub.crud.base import CRUDBase
from schoolhub.models.parent import Parent, ParentStudentRelation, ParentStatus, RelationshipType
from schoolhub.models.student import Student
from schoolhub.models.user import User
from schoolhub.schemas.parent import ParentCreate, ParentUpdate, ParentRelationCreate, ParentRelationUpdate


def _relation_options():
    return selectinload(ParentStudentRelation.student).selectinload(Student.user)


class CRUDParent(CRUDBase[Parent, ParentCreate, ParentUpdate]):

    def get(self, db: Session, id: int, tenant_id: int) -> Optional[Parent]:
        stmt = select(Parent).where(
            Parent.id == id,
            Parent.tenant_id == tenant_id
        ).options(
            selectinload(Parent.user),
            selectinload(Parent.student_relations).options(_relation_options()),
        )
        return db.execute(stmt).scalar_one_or_none()

    def get_by_user(self, db: Session, *, user_id: int, tenant_id: int) -> Optional[Parent]:
        stmt = select(Parent).where(
            Parent.user_id == user_id,
            Parent.tenant_id == tenant_id
        )
        return db.execute(stmt).scalar_one_or_none()

    def get_filtered(
        self,
        db: Session,
        *,
        tenant_id: int,
        search: Optional[str] = None,
        status: Optional[ParentStatus] = None,
        relationship_type: Optional[RelationshipType] = None,
        parent_id: Optional[int] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Parent], int]:
        stmt = select(Parent).join(User, User.id == Parent.user_id).where(Parent.tenant_id == tenant_id)
        if parent_id is not None:
            stmt = stmt.where(Parent.id == parent_id)
        if status:
            stmt = stmt.where(Parent.status == status)
        if relationship_type:
            stmt = stmt.where(Parent.relationship_type == relationship_type)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.email.ilike(pattern),
                Parent.occupation.ilike(pattern),
            ))
        stmt = stmt.options(
            selectinload(Parent.user),
            selectinload(Parent.student_relations).options(_relation_options()),
        ).order_by(User.last_name, User.first_name, Parent.id)
        return self.paginate(db, stmt, page=page, limit=limit)


class CRUDParentRelation(CRUDBase[ParentStudentRelation, ParentRelationCreate, ParentRelationUpdate]):

    def get(self, db: Session, id: int, tenant_id: int) -> Optional[ParentStudentRelation]:
        stmt = select(ParentStudentRelation).where(
            ParentStudentRelation.id == id,
            ParentStudentRelation.tenant_id == tenant_id
        ).options(_relation_options())
        return db.execute(stmt).scalar_one_or_none()

    def get_pair(self, db: Session, *, parent_id: int, student_id: int, tenant_id: int) -> Optional[ParentStudentRelation]:
        """The (tenant, parent, student) lookup that gates every child-data read."""
        stmt = select(ParentStudentRelation).where(
            ParentStudentRelation.parent_id == parent_id,
            ParentStudentRelation.student_id == student_id,
            ParentStudentRelation.tenant_id == tenant_id
        )
        return db.execute(stmt).scalar_one_or_none()

    def get_for_parent(self, db: Session, *, parent_id: int, tenant_id: int) -> List[ParentStudentRelation]:
        stmt = select(ParentStudentRelation).where(
            ParentStudentRelation.parent_id == parent_id,
            ParentStudentRelation.tenant_id == tenant_id
        ).options(_relation_options()).order_by(ParentStudentRelation.id)
        return list(db.execute(stmt).scalars().all())


# Create singleton instances
parent = CRUDParent(Parent)
parent_relation = CRUDParentRelation(ParentStudentRelation)
