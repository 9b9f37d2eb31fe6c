from datetime import date, time
from typing import Optional, List, Tuple, Dict
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, or_, func
from schoolhub.crud.base import CRUDBase
from schoolhub.models.schedule import Schedule, ScheduleStatus, ScheduleType, BLOCKING_STATUSES
from schoolhub.models.teacher import Teacher
from schoolhub.schemas.schedule import ScheduleCreate, ScheduleUpdate

SORTABLE_COLUMNS = {
    "date": Schedule.date,
    "start_time": Schedule.start_time,
    "end_time": Schedule.end_time,
    "title": Schedule.title,
    "type": Schedule.type,
    "status": Schedule.status,
    "created_at": Schedule.created_at,
}


def _with_relations(stmt):
    return stmt.options(
        selectinload(Schedule.subject),
        selectinload(Schedule.teacher).selectinload(Teacher.user),
        selectinload(Schedule.created_by_user),
        selectinload(Schedule.updated_by_user),
    )


class CRUDSchedule(CRUDBase[Schedule, ScheduleCreate, ScheduleUpdate]):

    def get(self, db: Session, id: int, tenant_id: int) -> Optional[Schedule]:
        stmt = _with_relations(select(Schedule).where(
            Schedule.id == id,
            Schedule.tenant_id == tenant_id
        ))
        return db.execute(stmt).scalar_one_or_none()

    def find_conflicts(
        self,
        db: Session,
        *,
        tenant_id: int,
        teacher_id: int,
        on_date: date,
        start_time: time,
        end_time: time,
        exclude_id: Optional[int] = None
    ) -> List[Schedule]:
        """
        Schedules of one teacher on one date that overlap [start_time, end_time).

        Half-open intervals: ``existing.start < new.end AND new.start < existing.end``.
        Touching boundaries do not overlap. Only ACTIVE and DRAFT entries count.
        """
        stmt = select(Schedule).where(
            Schedule.tenant_id == tenant_id,
            Schedule.teacher_id == teacher_id,
            Schedule.date == on_date,
            Schedule.status.in_(BLOCKING_STATUSES),
            Schedule.start_time < end_time,
            Schedule.end_time > start_time,
        )
        if exclude_id is not None:
            stmt = stmt.where(Schedule.id != exclude_id)
        stmt = stmt.order_by(Schedule.start_time)
        return list(db.execute(stmt).scalars().all())

    def _filtered_stmt(
        self,
        *,
        tenant_id: int,
        type: Optional[ScheduleType] = None,
        status: Optional[ScheduleStatus] = None,
        on_date: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        teacher_id: Optional[int] = None,
        subject_id: Optional[int] = None,
        class_id: Optional[int] = None,
        class_ids: Optional[List[int]] = None,
        search: Optional[str] = None
    ):
        stmt = select(Schedule).where(Schedule.tenant_id == tenant_id)
        if type:
            stmt = stmt.where(Schedule.type == type)
        if status:
            stmt = stmt.where(Schedule.status == status)
        # A date range takes precedence over a single date
        if start_date or end_date:
            if start_date:
                stmt = stmt.where(Schedule.date >= start_date)
            if end_date:
                stmt = stmt.where(Schedule.date <= end_date)
        elif on_date:
            stmt = stmt.where(Schedule.date == on_date)
        if teacher_id:
            stmt = stmt.where(Schedule.teacher_id == teacher_id)
        if subject_id:
            stmt = stmt.where(Schedule.subject_id == subject_id)
        if class_id:
            stmt = stmt.where(Schedule.class_id == class_id)
        if class_ids is not None:
            stmt = stmt.where(Schedule.class_id.in_(class_ids))
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(
                Schedule.title.ilike(pattern),
                Schedule.description.ilike(pattern),
                Schedule.location.ilike(pattern),
            ))
        return stmt

    def get_filtered(
        self,
        db: Session,
        *,
        tenant_id: int,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "date",
        sort_order: str = "asc",
        **filters
    ) -> Tuple[List[Schedule], int]:
        stmt = self._filtered_stmt(tenant_id=tenant_id, **filters)
        column = SORTABLE_COLUMNS.get(sort_by, Schedule.date)
        primary = column.desc() if sort_order == "desc" else column.asc()
        stmt = _with_relations(stmt.order_by(primary, Schedule.start_time, Schedule.id))
        return self.paginate(db, stmt, page=page, limit=limit)

    def get_for_export(self, db: Session, *, tenant_id: int, **filters) -> List[Schedule]:
        stmt = self._filtered_stmt(tenant_id=tenant_id, **filters)
        stmt = _with_relations(stmt.order_by(Schedule.date, Schedule.start_time, Schedule.id))
        return list(db.execute(stmt).scalars().all())

    def count(self, db: Session, *, tenant_id: int, **filters) -> int:
        stmt = self._filtered_stmt(tenant_id=tenant_id, **filters)
        return db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()

    def count_by(self, db: Session, column, *, tenant_id: int, **filters) -> Dict[str, int]:
        base = self._filtered_stmt(tenant_id=tenant_id, **filters).subquery()
        stmt = select(base.c[column], func.count()).group_by(base.c[column])
        return {
            (key.value if hasattr(key, "value") else str(key)): total
            for key, total in db.execute(stmt).all()
        }


schedule = CRUDSchedule(Schedule)
