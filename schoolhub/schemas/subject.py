from pydantic import BaseModel, Field
from typing import Optional


class SubjectSummary(BaseModel):
    id: int
    subject_name: str
    subject_code: str
    subject_level: Optional[str] = None
    subject_type: Optional[str] = None

    class Config:
        from_attributes = True


class SubjectCreate(BaseModel):
    subject_name: str = Field(..., min_length=1, max_length=255)
    subject_code: str = Field(..., min_length=1, max_length=50)
    subject_level: Optional[str] = Field(None, max_length=50)
    subject_type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)


class SubjectResponse(SubjectSummary):
    tenant_id: int
    description: Optional[str] = None
