from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import datetime
from schoolhub.models.user import UserStatus


class UserBase(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)


class UserCreate(UserBase):
    password: str = Field(..., min_length=8, max_length=128)
    role_ids: List[int] = []


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    status: Optional[UserStatus] = None


class UserResponse(UserBase):
    id: int
    tenant_id: int
    status: UserStatus
    last_login: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    email: EmailStr
    password: str
    tenant_domain: Optional[str] = None  # required when the email exists in several schools


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
    roles: List[str]
    permissions: List[str]


class ProfileResponse(BaseModel):
    user: UserResponse
    roles: List[str]
    permissions: List[str]
