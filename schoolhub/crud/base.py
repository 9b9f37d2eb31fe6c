from typing import Generic, TypeVar, Type, Optional, List, Any, Dict, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import select, func, Select
from pydantic import BaseModel
from schoolhub.database import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


def paginate(db: Session, stmt: Select, *, page: int = 1, limit: int = 10) -> Tuple[List[Any], int]:
    """
    Run a filtered select for one page.

    Args:
        db: Database session
        stmt: Select already carrying its filters and ordering
        page: 1-based page number
        limit: Page size

    Returns:
        Tuple of (records on the page, total matching records)
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = db.execute(count_stmt).scalar_one()
    page_stmt = stmt.offset((page - 1) * limit).limit(limit)
    items = list(db.execute(page_stmt).scalars().unique().all())
    return items, total


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Shared persistence for school-owned rows.

    Every read filters on ``tenant_id``; a record that exists in another
    school is indistinguishable from one that does not exist at all.

    Write methods take ``commit``. Multi-entity operations pass
    ``commit=False`` so each step only flushes and the caller commits once.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get(self, db: Session, id: int, tenant_id: int) -> Optional[ModelType]:
        """Fetch one row of the school, or None when the id belongs elsewhere."""
        stmt = select(self.model).where(
            self.model.tenant_id == tenant_id,
            self.model.id == id
        )
        return db.execute(stmt).scalar_one_or_none()

    def paginate(
        self,
        db: Session,
        stmt: Select,
        *,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[ModelType], int]:
        return paginate(db, stmt, page=page, limit=limit)

    def create(
        self,
        db: Session,
        *,
        obj_in: CreateSchemaType | Dict[str, Any],
        tenant_id: int,
        commit: bool = True,
        **extra: Any
    ) -> ModelType:
        """
        Insert a row owned by ``tenant_id``.

        Args:
            obj_in: Validated schema or plain column values
            commit: False to flush only, leaving the transaction open
            **extra: Server-side columns the request cannot set (created_by, parent_id, ...)
        """
        values = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(tenant_id=tenant_id, **values, **extra)
        db.add(db_obj)
        self._save(db, db_obj, commit)
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: UpdateSchemaType | Dict[str, Any],
        commit: bool = True
    ) -> ModelType:
        """
        Apply a partial update to a row already fetched through ``get``.

        Schemas contribute only the fields the client actually sent.
        """
        if isinstance(obj_in, dict):
            changes = obj_in
        else:
            changes = obj_in.model_dump(exclude_unset=True)

        for field, value in changes.items():
            setattr(db_obj, field, value)

        db.add(db_obj)
        self._save(db, db_obj, commit)
        return db_obj

    def delete(self, db: Session, *, id: int, tenant_id: int) -> Optional[ModelType]:
        obj = self.get(db=db, id=id, tenant_id=tenant_id)
        if obj is not None:
            db.delete(obj)
            db.commit()
        return obj

    @staticmethod
    def _save(db: Session, db_obj: Any, commit: bool) -> None:
        if commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
