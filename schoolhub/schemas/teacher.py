from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import date as date_type, datetime
from schoolhub.models.teacher import Gender
from schoolhub.schemas.common import UserSummary
from schoolhub.schemas.subject import SubjectSummary


class TeacherProfileFields(BaseModel):
    employee_number: Optional[str] = Field(None, max_length=50)
    nationality: Optional[str] = Field(None, max_length=100)
    qualification: Optional[str] = Field(None, max_length=255)
    experience: Optional[int] = Field(None, ge=0, le=80)
    specialization: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    region: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    emergency_contact: Optional[str] = Field(None, min_length=1, max_length=255)
    emergency_phone: Optional[str] = Field(None, min_length=1, max_length=20)
    emergency_relation: Optional[str] = Field(None, max_length=50)
    joining_date: Optional[date_type] = None
    previous_school: Optional[str] = Field(None, max_length=255)
    teaching_license: Optional[str] = Field(None, max_length=100)
    license_expiry: Optional[date_type] = None


class TeacherCreate(TeacherProfileFields):
    # User account
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    # Teacher profile
    teacher_code: Optional[str] = Field(None, min_length=1, max_length=50)
    date_of_birth: date_type
    gender: Gender


class TeacherUpdate(TeacherProfileFields):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    date_of_birth: Optional[date_type] = None
    gender: Optional[Gender] = None


class TeacherResponse(TeacherProfileFields):
    id: int
    tenant_id: int
    teacher_code: str
    date_of_birth: date_type
    gender: Gender
    experience: int = 0
    user: UserSummary
    subjects: List[SubjectSummary] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TeacherSummary(BaseModel):
    id: int
    teacher_code: str
    user: UserSummary

    class Config:
        from_attributes = True


class SubjectAssignment(BaseModel):
    subject_id: int


class TeacherSubjectResponse(BaseModel):
    id: int
    teacher_id: int
    subject: SubjectSummary
    assigned_by: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class QualificationBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    institution: str = Field(..., min_length=1, max_length=255)
    date_obtained: date_type
    expiry_date: Optional[date_type] = None
    certificate_number: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)


class QualificationCreate(QualificationBase):
    pass


class QualificationUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    institution: Optional[str] = Field(None, min_length=1, max_length=255)
    date_obtained: Optional[date_type] = None
    expiry_date: Optional[date_type] = None
    certificate_number: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)


class QualificationResponse(QualificationBase):
    id: int
    teacher_id: int
    created_at: datetime

    class Config:
        from_attributes = True
