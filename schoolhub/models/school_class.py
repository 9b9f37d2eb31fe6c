from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from schoolhub.database import Base, TimestampMixin


class SchoolClass(Base, TimestampMixin):
    __tablename__ = "school_class"
    __table_args__ = (
        UniqueConstraint("tenant_id", "class_name", name="uq_class_tenant_name"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    class_name = Column(String, nullable=False)
    class_code = Column(String, nullable=True)
    grade_level = Column(String, nullable=True)
    capacity = Column(Integer, nullable=True)
    class_teacher_id = Column(Integer, ForeignKey("teacher.id", ondelete="SET NULL"), nullable=True)
