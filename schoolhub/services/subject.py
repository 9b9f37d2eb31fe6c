from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from schoolhub.crud import subject as subject_crud
from schoolhub.models.subject import Subject
from schoolhub.schemas.subject import SubjectCreate
from schoolhub.core.exceptions import ConflictError


class SubjectService:

    def __init__(self):
        self.crud = subject_crud

    def get_subjects(
        self,
        db: Session,
        tenant_id: int,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[Subject], int]:
        return self.crud.get_filtered(db, tenant_id=tenant_id, search=search, page=page, limit=limit)

    def create_subject(self, db: Session, subject_data: SubjectCreate, tenant_id: int) -> Subject:
        if self.crud.get_by_code(db, subject_code=subject_data.subject_code, tenant_id=tenant_id):
            raise ConflictError(f"Subject with code '{subject_data.subject_code}' already exists")
        return self.crud.create(db, obj_in=subject_data, tenant_id=tenant_id)


subject_service = SubjectService()
