from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import date as date_type, datetime
from schoolhub.models.student import StudentStatus, EnrollmentStatus
from schoolhub.models.teacher import Gender
from schoolhub.schemas.common import UserSummary


class StudentCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    admission_number: str = Field(..., min_length=1, max_length=50)
    date_of_birth: Optional[date_type] = None
    gender: Optional[Gender] = None


class StudentResponse(BaseModel):
    id: int
    tenant_id: int
    admission_number: str
    date_of_birth: Optional[date_type] = None
    gender: Optional[Gender] = None
    status: StudentStatus
    user: UserSummary
    created_at: datetime

    class Config:
        from_attributes = True


class StudentSummary(BaseModel):
    id: int
    admission_number: str
    user: UserSummary

    class Config:
        from_attributes = True


class EnrollmentCreate(BaseModel):
    class_id: int
    status: EnrollmentStatus = EnrollmentStatus.ACTIVE
    enrollment_date: Optional[date_type] = None


class EnrollmentResponse(BaseModel):
    id: int
    student_id: int
    class_id: int
    status: EnrollmentStatus
    enrollment_date: date_type

    class Config:
        from_attributes = True
