from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from schoolhub.models.tenant import TenantStatus


class TenantBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    domain: str = Field(..., min_length=3, max_length=255, pattern=r"^[a-z0-9][a-z0-9.-]*[a-z0-9]$")
    address: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=20)
    subscription_plan: str = "basic"
    max_users: int = Field(100, ge=1)
    currency: str = Field("TZS", min_length=3, max_length=3)
    timezone: str = "Africa/Dar_es_Salaam"


class TenantCreate(TenantBase):
    """New school plus its first administrator, created in one transaction."""
    admin_first_name: str = Field(..., min_length=1, max_length=100)
    admin_last_name: str = Field(..., min_length=1, max_length=100)
    admin_email: EmailStr
    admin_password: str = Field(..., min_length=8, max_length=128)


class TenantUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=20)
    status: Optional[TenantStatus] = None
    subscription_plan: Optional[str] = None
    max_users: Optional[int] = Field(None, ge=1)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    timezone: Optional[str] = None


class TenantResponse(BaseModel):
    id: int
    name: str
    email: str
    domain: str
    address: Optional[str] = None
    phone: Optional[str] = None
    status: TenantStatus
    subscription_plan: str
    max_users: int
    currency: str
    timezone: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TenantBootstrapResponse(BaseModel):
    tenant: TenantResponse
    admin_user_id: int
    admin_email: str
    roles: list[str]
