from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date as date_type, datetime
from schoolhub.models.parent import RelationshipType, ParentStatus
from schoolhub.models.student_record import AttendanceStatus
from schoolhub.schemas.common import UserSummary
from schoolhub.schemas.student import StudentSummary
from schoolhub.schemas.subject import SubjectSummary


class ParentCreate(BaseModel):
    user_id: int
    relationship: RelationshipType
    occupation: Optional[str] = Field(None, max_length=255)
    workplace: Optional[str] = Field(None, max_length=255)
    work_phone: Optional[str] = Field(None, max_length=20)
    education: Optional[str] = Field(None, max_length=255)
    is_primary: bool = False
    is_emergency: bool = False


class ParentUpdate(BaseModel):
    relationship: Optional[RelationshipType] = None
    occupation: Optional[str] = Field(None, max_length=255)
    workplace: Optional[str] = Field(None, max_length=255)
    work_phone: Optional[str] = Field(None, max_length=20)
    education: Optional[str] = Field(None, max_length=255)
    is_primary: Optional[bool] = None
    is_emergency: Optional[bool] = None
    status: Optional[ParentStatus] = None


class ParentRelationCreate(BaseModel):
    student_id: int
    relationship: RelationshipType
    is_primary: bool = False
    is_emergency: bool = False
    can_pickup: bool = False
    notes: Optional[str] = Field(None, max_length=1000)


class ParentRelationUpdate(BaseModel):
    relationship: Optional[RelationshipType] = None
    is_primary: Optional[bool] = None
    is_emergency: Optional[bool] = None
    can_pickup: Optional[bool] = None
    notes: Optional[str] = Field(None, max_length=1000)


class ParentRelationResponse(BaseModel):
    id: int
    parent_id: int
    student_id: int
    relationship: RelationshipType = Field(validation_alias="relationship_type")
    is_primary: bool
    is_emergency: bool
    can_pickup: bool
    notes: Optional[str] = None
    student: StudentSummary
    created_at: datetime

    class Config:
        from_attributes = True


class ParentResponse(BaseModel):
    id: int
    tenant_id: int
    relationship: RelationshipType = Field(validation_alias="relationship_type")
    occupation: Optional[str] = None
    workplace: Optional[str] = None
    work_phone: Optional[str] = None
    education: Optional[str] = None
    is_primary: bool
    is_emergency: bool
    status: ParentStatus
    user: UserSummary
    student_relations: List[ParentRelationResponse] = []
    created_at: datetime

    class Config:
        from_attributes = True


class ParentStatistics(BaseModel):
    total_children: int
    primary_for: int
    emergency_contact_for: int
    can_pickup: int


class AcademicRecordResponse(BaseModel):
    id: int
    academic_year: str
    term: Optional[str] = None
    class_id: Optional[int] = None
    subject: Optional[SubjectSummary] = None
    average_score: Optional[float] = None
    position: Optional[int] = None
    remarks: Optional[str] = None

    class Config:
        from_attributes = True


class AttendanceResponse(BaseModel):
    id: int
    date: date_type
    status: AttendanceStatus
    class_id: Optional[int] = None
    subject_id: Optional[int] = None
    remarks: Optional[str] = None

    class Config:
        from_attributes = True


class GradeResponse(BaseModel):
    id: int
    assessment: str
    subject: Optional[SubjectSummary] = None
    score: float
    max_score: float
    grade: Optional[str] = None
    recorded_on: date_type

    class Config:
        from_attributes = True


class HealthRecordResponse(BaseModel):
    id: int
    record_type: str
    description: str
    recorded_on: date_type
    follow_up: Optional[str] = None

    class Config:
        from_attributes = True
