import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Date, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from schoolhub.database import Base, TimestampMixin


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class Teacher(Base, TimestampMixin):
    __tablename__ = "teacher"
    __table_args__ = (
        UniqueConstraint("tenant_id", "teacher_code", name="uq_teacher_tenant_code"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("user.id", ondelete="CASCADE"), unique=True, nullable=False)
    teacher_code = Column(String, nullable=False)
    employee_number = Column(String, nullable=True)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(Enum(Gender), nullable=False)
    nationality = Column(String, nullable=True)
    qualification = Column(String, nullable=True)
    experience = Column(Integer, nullable=False, default=0)  # years
    specialization = Column(String, nullable=True)
    address = Column(String, nullable=True)
    city = Column(String, nullable=True)
    region = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    emergency_contact = Column(String, nullable=True)
    emergency_phone = Column(String, nullable=True)
    emergency_relation = Column(String, nullable=True)
    joining_date = Column(Date, nullable=True)
    previous_school = Column(String, nullable=True)
    teaching_license = Column(String, nullable=True)
    license_expiry = Column(Date, nullable=True)
    created_by = Column(Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)

    user = relationship("User", foreign_keys=[user_id])
    teacher_subjects = relationship("TeacherSubject", back_populates="teacher", cascade="all, delete-orphan")
    qualifications = relationship("TeacherQualification", back_populates="teacher", cascade="all, delete-orphan")

    @property
    def subjects(self):
        return [ts.subject for ts in self.teacher_subjects]


class TeacherSubject(Base, TimestampMixin):
    __tablename__ = "teacher_subject"
    __table_args__ = (
        UniqueConstraint("teacher_id", "subject_id", name="uq_teacher_subject"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("teacher.id", ondelete="CASCADE"), nullable=False)
    subject_id = Column(Integer, ForeignKey("subject.id", ondelete="CASCADE"), nullable=False)
    assigned_by = Column(Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)

    teacher = relationship("Teacher", back_populates="teacher_subjects")
    subject = relationship("Subject")


class TeacherQualification(Base, TimestampMixin):
    __tablename__ = "teacher_qualification"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("teacher.id", ondelete="CASCADE"), nullable=False)
    title = Column(String, nullable=False)
    institution = Column(String, nullable=False)
    date_obtained = Column(Date, nullable=False)
    expiry_date = Column(Date, nullable=True)
    certificate_number = Column(String, nullable=True)
    description = Column(String, nullable=True)
    created_by = Column(Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    updated_by = Column(Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)

    teacher = relationship("Teacher", back_populates="qualifications")
