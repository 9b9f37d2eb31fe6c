from typing import Optional, List, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import select
from schoolhub.crud.base import CRUDBase
from schoolhub.models.school_class import SchoolClass
from schoolhub.schemas.school_class import SchoolClassCreate


class CRUDSchoolClass(CRUDBase[SchoolClass, SchoolClassCreate, SchoolClassCreate]):

    def get_by_name(self, db: Session, *, class_name: str, tenant_id: int) -> Optional[SchoolClass]:
        stmt = select(SchoolClass).where(
            SchoolClass.class_name == class_name,
            SchoolClass.tenant_id == tenant_id
        )
        return db.execute(stmt).scalar_one_or_none()

    def get_filtered(
        self,
        db: Session,
        *,
        tenant_id: int,
        grade_level: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[SchoolClass], int]:
        stmt = select(SchoolClass).where(SchoolClass.tenant_id == tenant_id)
        if grade_level:
            stmt = stmt.where(SchoolClass.grade_level == grade_level)
        stmt = stmt.order_by(SchoolClass.class_name, SchoolClass.id)
        return self.paginate(db, stmt, page=page, limit=limit)


school_class = CRUDSchoolClass(SchoolClass)
