import csv
from datetime import date, timedelta
from typing import List, Optional, Tuple
import pandas as pd
from sqlalchemy.orm import Session
from schoolhub.crud import (
    schedule as schedule_crud,
    teacher as teacher_crud,
    subject as subject_crud,
    school_class as school_class_crud,
)
from schoolhub.models.schedule import Schedule, ScheduleStatus, ScheduleType, BLOCKING_STATUSES
from schoolhub.schemas.schedule import ScheduleCreate, ScheduleUpdate
from schoolhub.core.exceptions import ConflictError, NotFoundError, ValidationError
from schoolhub.core.logging_config import logger

EXPORT_COLUMNS = [
    "Title", "Type", "Date", "Start Time", "End Time",
    "Subject", "Teacher", "Location", "Status", "Description",
]

# Fields whose change can create or remove an overlap
CONFLICT_FIELDS = {"date", "start_time", "end_time", "teacher_id", "status"}

UPCOMING_DAYS = 7


class ScheduleService:
    """
    Service layer for timetable entries.

    Teacher time is booked in half-open intervals [start, end) per date.
    Creating an entry for a teacher, or moving one, fails with 409 when it
    overlaps another ACTIVE or DRAFT entry of the same teacher on that date.
    """

    def __init__(self):
        self.crud = schedule_crud

    def get_schedule(self, db: Session, schedule_id: int, tenant_id: int) -> Schedule:
        schedule = self.crud.get(db=db, id=schedule_id, tenant_id=tenant_id)
        if not schedule:
            raise NotFoundError("Schedule")
        return schedule

    def get_schedules(
        self,
        db: Session,
        tenant_id: int,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "date",
        sort_order: str = "asc",
        **filters
    ) -> Tuple[List[Schedule], int]:
        return self.crud.get_filtered(
            db, tenant_id=tenant_id, page=page, limit=limit,
            sort_by=sort_by, sort_order=sort_order, **filters
        )

    @staticmethod
    def _validate_times(start_time, end_time) -> None:
        if start_time >= end_time:
            raise ValidationError(
                "End time must be after start time",
                errors=[{"field": "end_time", "message": "End time must be after start time"}],
            )

    def _validate_references(
        self,
        db: Session,
        tenant_id: int,
        subject_id: Optional[int],
        class_id: Optional[int],
        teacher_id: Optional[int] = None
    ) -> None:
        if teacher_id and not teacher_crud.get(db=db, id=teacher_id, tenant_id=tenant_id):
            raise NotFoundError("Teacher")
        if subject_id and not subject_crud.get(db=db, id=subject_id, tenant_id=tenant_id):
            raise NotFoundError("Subject")
        if class_id and not school_class_crud.get(db=db, id=class_id, tenant_id=tenant_id):
            raise NotFoundError("Class")

    def check_conflicts(
        self,
        db: Session,
        *,
        tenant_id: int,
        teacher_id: int,
        on_date: date,
        start_time,
        end_time,
        exclude_id: Optional[int] = None
    ) -> None:
        """
        Reject a booking that overlaps the teacher's existing bookings.

        The teacher row is locked first, so two transactions booking the same
        teacher run the scan and the insert one after the other. The lock is
        held until the caller commits or rolls back.

        Raises:
            NotFoundError: Teacher not in the tenant
            ConflictError: An ACTIVE/DRAFT entry overlaps [start_time, end_time)
        """
        teacher = teacher_crud.get_for_update(db, id=teacher_id, tenant_id=tenant_id)
        if not teacher:
            raise NotFoundError("Teacher")

        conflicts = self.crud.find_conflicts(
            db,
            tenant_id=tenant_id,
            teacher_id=teacher_id,
            on_date=on_date,
            start_time=start_time,
            end_time=end_time,
            exclude_id=exclude_id,
        )
        if conflicts:
            clash = conflicts[0]
            logger.info(
                f"Schedule conflict: teacher_id={teacher_id}, date={on_date}, "
                f"conflicting_id={clash.id}, tenant_id={tenant_id}"
            )
            raise ConflictError(
                f"Schedule conflicts with '{clash.title}' "
                f"({clash.start_time:%H:%M}-{clash.end_time:%H:%M}) on {clash.date.isoformat()}",
                errors=[
                    {
                        "schedule_id": c.id,
                        "title": c.title,
                        "date": c.date.isoformat(),
                        "start_time": c.start_time.strftime("%H:%M"),
                        "end_time": c.end_time.strftime("%H:%M"),
                    }
                    for c in conflicts
                ],
            )

    def create_schedule(
        self,
        db: Session,
        schedule_data: ScheduleCreate,
        tenant_id: int,
        user_id: int
    ) -> Schedule:
        """
        Validate, conflict-check and persist a schedule entry.

        Entries without a teacher are never conflict-checked.
        """
        self._validate_times(schedule_data.start_time, schedule_data.end_time)
        self._validate_references(db, tenant_id, schedule_data.subject_id, schedule_data.class_id)

        try:
            if schedule_data.teacher_id:
                self.check_conflicts(
                    db,
                    tenant_id=tenant_id,
                    teacher_id=schedule_data.teacher_id,
                    on_date=schedule_data.date,
                    start_time=schedule_data.start_time,
                    end_time=schedule_data.end_time,
                )
            schedule = self.crud.create(
                db, obj_in=schedule_data, tenant_id=tenant_id,
                created_by=user_id, updated_by=user_id,
            )
        except Exception:
            db.rollback()
            raise
        return self.get_schedule(db, schedule.id, tenant_id)

    def update_schedule(
        self,
        db: Session,
        schedule_id: int,
        schedule_data: ScheduleUpdate,
        tenant_id: int,
        user_id: int
    ) -> Schedule:
        """
        Apply a partial update.

        The patch is merged over the stored row before validation. If a
        time, date, teacher or status field changes and the merged entry is
        still ACTIVE or DRAFT, the overlap scan runs again with the entry
        itself excluded.
        """
        schedule = self.get_schedule(db, schedule_id, tenant_id)
        update_data = schedule_data.model_dump(exclude_unset=True)

        merged = {field: getattr(schedule, field) for field in CONFLICT_FIELDS}
        merged.update({k: v for k, v in update_data.items() if k in CONFLICT_FIELDS})
        for field in ("date", "start_time", "end_time", "status"):
            if merged[field] is None:
                raise ValidationError(
                    f"{field} cannot be empty",
                    errors=[{"field": field, "message": "Field cannot be null"}],
                )

        self._validate_times(merged["start_time"], merged["end_time"])
        self._validate_references(
            db, tenant_id,
            update_data.get("subject_id"), update_data.get("class_id"), update_data.get("teacher_id")
        )

        changed = any(
            field in update_data and update_data[field] != getattr(schedule, field)
            for field in CONFLICT_FIELDS
        )
        try:
            if changed and merged["teacher_id"] and merged["status"] in BLOCKING_STATUSES:
                self.check_conflicts(
                    db,
                    tenant_id=tenant_id,
                    teacher_id=merged["teacher_id"],
                    on_date=merged["date"],
                    start_time=merged["start_time"],
                    end_time=merged["end_time"],
                    exclude_id=schedule.id,
                )
            update_data["updated_by"] = user_id
            self.crud.update(db=db, db_obj=schedule, obj_in=update_data)
        except Exception:
            db.rollback()
            raise
        return self.get_schedule(db, schedule.id, tenant_id)

    def delete_schedule(self, db: Session, schedule_id: int, tenant_id: int) -> None:
        schedule = self.get_schedule(db, schedule_id, tenant_id)
        self.crud.delete(db=db, id=schedule.id, tenant_id=tenant_id)

    def get_schedule_stats(
        self,
        db: Session,
        tenant_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> dict:
        today = date.today()
        scope = {"start_date": start_date, "end_date": end_date}
        upcoming = self.crud.count(
            db, tenant_id=tenant_id, status=ScheduleStatus.ACTIVE,
            start_date=max(today + timedelta(days=1), start_date or today),
            end_date=min(today + timedelta(days=UPCOMING_DAYS), end_date or date.max),
        )
        in_range = (start_date is None or start_date <= today) and (end_date is None or today <= end_date)
        return {
            "total": self.crud.count(db, tenant_id=tenant_id, **scope),
            "active": self.crud.count(db, tenant_id=tenant_id, status=ScheduleStatus.ACTIVE, **scope),
            "today": self.crud.count(db, tenant_id=tenant_id, on_date=today) if in_range else 0,
            "upcoming": upcoming,
            "by_type": {
                t.value: 0 for t in ScheduleType
            } | self.crud.count_by(db, "type", tenant_id=tenant_id, **scope),
            "by_status": {
                s.value: 0 for s in ScheduleStatus
            } | self.crud.count_by(db, "status", tenant_id=tenant_id, **scope),
        }

    def export_schedules(self, db: Session, tenant_id: int, **filters) -> List[Schedule]:
        return self.crud.get_for_export(db, tenant_id=tenant_id, **filters)

    @staticmethod
    def to_csv(schedules: List[Schedule]) -> str:
        """Render schedules as CSV with every field quoted."""
        rows = [
            {
                "Title": s.title,
                "Type": s.type.value,
                "Date": s.date.isoformat(),
                "Start Time": s.start_time.strftime("%H:%M"),
                "End Time": s.end_time.strftime("%H:%M"),
                "Subject": s.subject.subject_name if s.subject else "",
                "Teacher": s.teacher.user.full_name if s.teacher else "",
                "Location": s.location or "",
                "Status": s.status.value,
                "Description": s.description or "",
            }
            for s in schedules
        ]
        df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
        return df.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


schedule_service = ScheduleService()
