from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from schoolhub.crud import school_class as school_class_crud, teacher as teacher_crud
from schoolhub.models.school_class import SchoolClass
from schoolhub.schemas.school_class import SchoolClassCreate
from schoolhub.core.exceptions import ConflictError, NotFoundError


class SchoolClassService:

    def __init__(self):
        self.crud = school_class_crud

    def get_classes(
        self,
        db: Session,
        tenant_id: int,
        grade_level: Optional[str] = None,
        page: int = 1,
        limit: int = 10
    ) -> Tuple[List[SchoolClass], int]:
        return self.crud.get_filtered(db, tenant_id=tenant_id, grade_level=grade_level, page=page, limit=limit)

    def create_class(self, db: Session, class_data: SchoolClassCreate, tenant_id: int) -> SchoolClass:
        if self.crud.get_by_name(db, class_name=class_data.class_name, tenant_id=tenant_id):
            raise ConflictError(f"Class '{class_data.class_name}' already exists")
        if class_data.class_teacher_id and not teacher_crud.get(
            db=db, id=class_data.class_teacher_id, tenant_id=tenant_id
        ):
            raise NotFoundError("Teacher")
        return self.crud.create(db, obj_in=class_data, tenant_id=tenant_id)


school_class_service = SchoolClassService()
