from typing import Optional, List, Tuple
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, or_
from schoolhub.crud.base import CRUDBase
from schoolhub.models.content import Content, ContentType, ContentStatus
from schoolhub.schemas.content import ContentUpdate


class CRUDContent(CRUDBase[Content, ContentUpdate, ContentUpdate]):

    def get(self, db: Session, id: int, tenant_id: int) -> Optional[Content]:
        stmt = select(Content).where(
            Content.id == id,
            Content.tenant_id == tenant_id
        ).options(selectinload(Content.subject))
        return db.execute(stmt).scalar_one_or_none()

    def get_filtered(
        self,
        db: Session,
        *,
        tenant_id: int,
        content_type: Optional[ContentType] = None,
        status: Optional[ContentStatus] = None,
        subject_id: Optional[int] = None,
        grade_level: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Content], int]:
        stmt = select(Content).where(Content.tenant_id == tenant_id)
        if content_type:
            stmt = stmt.where(Content.content_type == content_type)
        if status:
            stmt = stmt.where(Content.status == status)
        if subject_id:
            stmt = stmt.where(Content.subject_id == subject_id)
        if grade_level:
            stmt = stmt.where(Content.grade_level == grade_level)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(Content.title.ilike(pattern), Content.description.ilike(pattern)))
        stmt = stmt.options(selectinload(Content.subject)).order_by(Content.created_at.desc(), Content.id.desc())
        return self.paginate(db, stmt, page=page, limit=limit)


content = CRUDContent(Content)
