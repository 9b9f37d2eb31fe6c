import enum
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Date, Time, Enum, Index
from sqlalchemy.orm import relationship
from schoolhub.database import Base, TimestampMixin


class ScheduleType(str, enum.Enum):
    CLASS = "CLASS"
    EXAM = "EXAM"
    EVENT = "EVENT"
    MEETING = "MEETING"


class ScheduleStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    DRAFT = "DRAFT"


class RecurrenceType(str, enum.Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


# Only these statuses occupy a teacher's time
BLOCKING_STATUSES = (ScheduleStatus.ACTIVE, ScheduleStatus.DRAFT)


class Schedule(Base, TimestampMixin):
    """
    A bookable interval on a calendar date.

    The interval is half-open: [start_time, end_time). Two entries that merely
    touch (one ends at 10:00, the next starts at 10:00) do not overlap.
    """
    __tablename__ = "schedule"
    __table_args__ = (
        Index("ix_schedule_teacher_date", "tenant_id", "teacher_id", "date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    type = Column(Enum(ScheduleType), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(Enum(ScheduleStatus), nullable=False, default=ScheduleStatus.ACTIVE)
    subject_id = Column(Integer, ForeignKey("subject.id", ondelete="SET NULL"), nullable=True)
    teacher_id = Column(Integer, ForeignKey("teacher.id", ondelete="SET NULL"), nullable=True)
    class_id = Column(Integer, ForeignKey("school_class.id", ondelete="SET NULL"), nullable=True)
    location = Column(String, nullable=True)
    recurring = Column(Boolean, nullable=False, default=False)
    recurrence_type = Column(Enum(RecurrenceType), nullable=True)
    recurrence_end = Column(Date, nullable=True)
    recurrence_pattern = Column(String, nullable=True)
    created_by = Column(Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    updated_by = Column(Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)

    subject = relationship("Subject")
    teacher = relationship("Teacher")
    school_class = relationship("SchoolClass")
    created_by_user = relationship("User", foreign_keys=[created_by])
    updated_by_user = relationship("User", foreign_keys=[updated_by])
