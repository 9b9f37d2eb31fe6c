import enum
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from schoolhub.database import Base, TimestampMixin


class RelationshipType(str, enum.Enum):
    FATHER = "FATHER"
    MOTHER = "MOTHER"
    GUARDIAN = "GUARDIAN"
    OTHER = "OTHER"


class ParentStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Parent(Base, TimestampMixin):
    __tablename__ = "parent"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), unique=True, nullable=False)
    occupation = Column(String, nullable=True)
    workplace = Column(String, nullable=True)
    work_phone = Column(String, nullable=True)
    education = Column(String, nullable=True)
    relationship_type = Column("relationship", Enum(RelationshipType), nullable=False)
    is_primary = Column(Boolean, nullable=False, default=False)
    is_emergency = Column(Boolean, nullable=False, default=False)
    status = Column(Enum(ParentStatus), nullable=False, default=ParentStatus.ACTIVE)

    user = relationship("User")
    student_relations = relationship(
        "ParentStudentRelation",
        back_populates="parent",
        cascade="all, delete-orphan"
    )


class ParentStudentRelation(Base, TimestampMixin):
    """Grants a parent visibility into one student's records."""
    __tablename__ = "parent_student_relation"
    __table_args__ = (
        UniqueConstraint("tenant_id", "parent_id", "student_id", name="uq_parent_student"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("parent.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(Integer, ForeignKey("student.id", ondelete="CASCADE"), nullable=False)
    relationship_type = Column("relationship", Enum(RelationshipType), nullable=False)
    is_primary = Column(Boolean, nullable=False, default=False)
    is_emergency = Column(Boolean, nullable=False, default=False)
    can_pickup = Column(Boolean, nullable=False, default=False)
    notes = Column(String, nullable=True)

    parent = relationship("Parent", back_populates="student_relations")
    student = relationship("Student")
