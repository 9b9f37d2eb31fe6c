import enum
from sqlalchemy import Column, Integer, String, Enum
from sqlalchemy.orm import relationship
from schoolhub.database import Base, TimestampMixin


class TenantStatus(str, enum.Enum):
    TRIAL = "TRIAL"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class Tenant(Base, TimestampMixin):
    __tablename__ = "tenant"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    domain = Column(String, unique=True, index=True, nullable=False)
    address = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    status = Column(Enum(TenantStatus), nullable=False, default=TenantStatus.TRIAL)
    subscription_plan = Column(String, nullable=False, default="basic")
    max_users = Column(Integer, nullable=False, default=100)
    currency = Column(String(3), nullable=False, default="TZS")
    timezone = Column(String, nullable=False, default="Africa/Dar_es_Salaam")

    users = relationship("User", back_populates="tenant")
    roles = relationship("Role", back_populates="tenant")
