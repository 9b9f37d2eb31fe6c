from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from schoolhub.database import Base, TimestampMixin


class Subject(Base, TimestampMixin):
    __tablename__ = "subject"
    __table_args__ = (
        UniqueConstraint("tenant_id", "subject_code", name="uq_subject_tenant_code"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_name = Column(String, nullable=False)
    subject_code = Column(String, nullable=False)
    subject_level = Column(String, nullable=True)  # e.g. PRIMARY, O_LEVEL, A_LEVEL
    subject_type = Column(String, nullable=True)   # e.g. CORE, ELECTIVE
    description = Column(String, nullable=True)
