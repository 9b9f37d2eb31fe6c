from typing import Optional, List, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import select, or_
from schoolhub.crud.base import CRUDBase
from schoolhub.models.subject import Subject
from schoolhub.schemas.subject import SubjectCreate


class CRUDSubject(CRUDBase[Subject, SubjectCreate, SubjectCreate]):

    def get_by_code(self, db: Session, *, subject_code: str, tenant_id: int) -> Optional[Subject]:
        stmt = select(Subject).where(
            Subject.subject_code == subject_code,
            Subject.tenant_id == tenant_id
        )
        return db.execute(stmt).scalar_one_or_none()

    def get_filtered(
        self,
        db: Session,
        *,
        tenant_id: int,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Subject], int]:
        stmt = select(Subject).where(Subject.tenant_id == tenant_id)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(Subject.subject_name.ilike(pattern), Subject.subject_code.ilike(pattern)))
        stmt = stmt.order_by(Subject.subject_name, Subject.id)
        return self.paginate(db, stmt, page=page, limit=limit)


subject = CRUDSubject(Subject)
