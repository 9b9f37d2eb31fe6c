from pydantic import BaseModel, Field
from typing import Optional


class SchoolClassCreate(BaseModel):
    class_name: str = Field(..., min_length=1, max_length=100)
    class_code: Optional[str] = Field(None, max_length=50)
    grade_level: Optional[str] = Field(None, max_length=50)
    capacity: Optional[int] = Field(None, ge=1)
    class_teacher_id: Optional[int] = None


class SchoolClassResponse(SchoolClassCreate):
    id: int
    tenant_id: int

    class Config:
        from_attributes = True
