from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from schoolhub.database import Base, TimestampMixin


class Permission(Base, TimestampMixin):
    """
    Global capability descriptor, named ``resource:action``.

    Not tenant-scoped: permissions are defined once and granted to roles of
    any tenant through RolePermission.
    """
    __tablename__ = "permission"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    resource = Column(String, nullable=False)
    action = Column(String, nullable=False)
    description = Column(String, nullable=True)

    role_permissions = relationship("RolePermission", back_populates="permission")
