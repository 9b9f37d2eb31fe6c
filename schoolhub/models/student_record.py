"""Per-student records surfaced read-only through the parent portal."""
import enum
from sqlalchemy import Column, Integer, String, Float, ForeignKey, Date, Enum
from sqlalchemy.orm import relationship
from schoolhub.database import Base, TimestampMixin


class AttendanceStatus(str, enum.Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"


class AcademicRecord(Base, TimestampMixin):
    __tablename__ = "academic_record"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("student.id", ondelete="CASCADE"), nullable=False, index=True)
    academic_year = Column(String, nullable=False)  # e.g. "2025/2026"
    term = Column(String, nullable=True)
    class_id = Column(Integer, ForeignKey("school_class.id", ondelete="SET NULL"), nullable=True)
    subject_id = Column(Integer, ForeignKey("subject.id", ondelete="SET NULL"), nullable=True)
    average_score = Column(Float, nullable=True)
    position = Column(Integer, nullable=True)
    remarks = Column(String, nullable=True)

    subject = relationship("Subject")


class AttendanceRecord(Base, TimestampMixin):
    __tablename__ = "attendance_record"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("student.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("school_class.id", ondelete="SET NULL"), nullable=True)
    subject_id = Column(Integer, ForeignKey("subject.id", ondelete="SET NULL"), nullable=True)
    date = Column(Date, nullable=False)
    status = Column(Enum(AttendanceStatus), nullable=False)
    remarks = Column(String, nullable=True)


class Grade(Base, TimestampMixin):
    __tablename__ = "grade"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("student.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(Integer, ForeignKey("subject.id", ondelete="SET NULL"), nullable=True)
    assessment = Column(String, nullable=False)  # exam / test / assignment title
    score = Column(Float, nullable=False)
    max_score = Column(Float, nullable=False, default=100)
    grade = Column(String(4), nullable=True)
    recorded_on = Column(Date, nullable=False)

    subject = relationship("Subject")


class HealthRecord(Base, TimestampMixin):
    __tablename__ = "health_record"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("student.id", ondelete="CASCADE"), nullable=False, index=True)
    record_type = Column(String, nullable=False)  # ALLERGY, VACCINATION, VISIT, ...
    description = Column(String, nullable=False)
    recorded_on = Column(Date, nullable=False)
    follow_up = Column(String, nullable=True)
