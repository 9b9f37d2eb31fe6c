import enum
from datetime import date
from sqlalchemy import Column, Integer, String, ForeignKey, Date, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from schoolhub.database import Base, TimestampMixin
from schoolhub.models.teacher import Gender


class StudentStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    GRADUATED = "GRADUATED"
    TRANSFERRED = "TRANSFERRED"


class EnrollmentStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    COMPLETED = "COMPLETED"
    WITHDRAWN = "WITHDRAWN"


class Student(Base, TimestampMixin):
    __tablename__ = "student"
    __table_args__ = (
        UniqueConstraint("tenant_id", "admission_number", name="uq_student_tenant_admission"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), unique=True, nullable=False)
    admission_number = Column(String, nullable=False)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(Enum(Gender), nullable=True)
    status = Column(Enum(StudentStatus), nullable=False, default=StudentStatus.ACTIVE)

    user = relationship("User")
    enrollments = relationship("StudentEnrollment", back_populates="student", cascade="all, delete-orphan")


class StudentEnrollment(Base, TimestampMixin):
    __tablename__ = "student_enrollment"
    __table_args__ = (
        UniqueConstraint("student_id", "class_id", name="uq_student_class_enrollment"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("student.id", ondelete="CASCADE"), nullable=False)
    class_id = Column(Integer, ForeignKey("school_class.id", ondelete="CASCADE"), nullable=False)
    status = Column(Enum(EnrollmentStatus), nullable=False, default=EnrollmentStatus.ACTIVE)
    enrollment_date = Column(Date, nullable=False, default=date.today)

    student = relationship("Student", back_populates="enrollments")
    school_class = relationship("SchoolClass")
