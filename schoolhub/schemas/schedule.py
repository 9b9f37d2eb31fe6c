from pydantic import BaseModel, Field
from typing import Dict, Optional
from datetime import date as date_type, time as time_type, datetime
from schoolhub.models.schedule import ScheduleType, ScheduleStatus, RecurrenceType
from schoolhub.schemas.common import UserSummary
from schoolhub.schemas.subject import SubjectSummary
from schoolhub.schemas.teacher import TeacherSummary


class ScheduleBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    type: ScheduleType
    date: date_type
    start_time: time_type
    end_time: time_type
    status: ScheduleStatus = ScheduleStatus.ACTIVE
    subject_id: Optional[int] = None
    teacher_id: Optional[int] = None
    class_id: Optional[int] = None
    location: Optional[str] = Field(None, max_length=255)
    recurring: bool = False
    recurrence_type: Optional[RecurrenceType] = None
    recurrence_end: Optional[date_type] = None
    recurrence_pattern: Optional[str] = Field(None, max_length=255)


class ScheduleCreate(ScheduleBase):
    pass


class ScheduleUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    type: Optional[ScheduleType] = None
    date: Optional[date_type] = None
    start_time: Optional[time_type] = None
    end_time: Optional[time_type] = None
    status: Optional[ScheduleStatus] = None
    subject_id: Optional[int] = None
    teacher_id: Optional[int] = None
    class_id: Optional[int] = None
    location: Optional[str] = Field(None, max_length=255)
    recurring: Optional[bool] = None
    recurrence_type: Optional[RecurrenceType] = None
    recurrence_end: Optional[date_type] = None
    recurrence_pattern: Optional[str] = Field(None, max_length=255)


class ScheduleResponse(ScheduleBase):
    id: int
    tenant_id: int
    subject: Optional[SubjectSummary] = None
    teacher: Optional[TeacherSummary] = None
    created_by_user: Optional[UserSummary] = None
    updated_by_user: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ScheduleStats(BaseModel):
    total: int
    active: int
    today: int
    upcoming: int
    by_type: Dict[str, int]
    by_status: Dict[str, int]
