from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from schoolhub.models.content import ContentType, ContentStatus
from schoolhub.schemas.subject import SubjectSummary


class ContentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    content_type: Optional[ContentType] = None
    status: Optional[ContentStatus] = None
    subject_id: Optional[int] = None
    grade_level: Optional[str] = Field(None, max_length=50)
    tags: Optional[List[str]] = None


class ContentResponse(BaseModel):
    id: int
    tenant_id: int
    title: str
    description: Optional[str] = None
    content_type: ContentType
    status: ContentStatus
    subject: Optional[SubjectSummary] = None
    grade_level: Optional[str] = None
    tags: Optional[List[str]] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
