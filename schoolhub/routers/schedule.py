from datetime import date as date_type
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from schoolhub.database import get_db
from schoolhub.dependencies import require_permissions
from schoolhub.core.tenant_context import get_tenant_id
from schoolhub.core.logging_config import logger
from schoolhub.models.schedule import ScheduleType, ScheduleStatus
from schoolhub.models.user import User
from schoolhub.schemas.common import ApiResponse, MessageResponse, PaginatedResponse, Pagination
from schoolhub.schemas.schedule import ScheduleCreate, ScheduleUpdate, ScheduleResponse, ScheduleStats
from schoolhub.services import schedule_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[ScheduleResponse])
def get_schedules(
    type: Optional[ScheduleType] = None,
    status_filter: Optional[ScheduleStatus] = Query(None, alias="status"),
    date: Optional[date_type] = None,
    start_date: Optional[date_type] = None,
    end_date: Optional[date_type] = None,
    teacher_id: Optional[int] = None,
    subject_id: Optional[int] = None,
    class_id: Optional[int] = None,
    search: Optional[str] = None,
    sort_by: str = Query("date", pattern="^(date|start_time|end_time|title|type|status|created_at)$"),
    sort_order: str = Query("asc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("schedules:read"))
):
    """
    List schedule entries of your school.

    ``start_date``/``end_date`` take precedence over ``date``. ``search``
    matches title, description and location, case-insensitively.
    """
    schedules, total = schedule_service.get_schedules(
        db,
        tenant_id,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        type=type,
        status=status_filter,
        on_date=date,
        start_date=start_date,
        end_date=end_date,
        teacher_id=teacher_id,
        subject_id=subject_id,
        class_id=class_id,
        search=search,
    )
    return {"success": True, "data": schedules, "pagination": Pagination.build(page, limit, total)}


@router.post("", response_model=ApiResponse[ScheduleResponse], status_code=status.HTTP_201_CREATED)
def create_schedule(
    schedule_data: ScheduleCreate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    current_user: User = Depends(require_permissions("schedules:create"))
):
    """
    Book a schedule entry.

    Fails with 400 when end_time is not after start_time, and with 409 when
    the teacher already has an ACTIVE or DRAFT entry overlapping the slot.
    """
    try:
        logger.info(
            f"Creating schedule: teacher_id={schedule_data.teacher_id}, date={schedule_data.date}, "
            f"tenant_id={tenant_id}"
        )
        schedule = schedule_service.create_schedule(db, schedule_data, tenant_id, current_user.id)
        logger.info(f"Schedule created successfully: id={schedule.id}")
        return {"success": True, "message": "Schedule created successfully", "data": schedule}
    except Exception as e:
        logger.error(f"Error creating schedule: {type(e).__name__}: {str(e)}")
        raise


@router.get("/stats", response_model=ApiResponse[ScheduleStats])
def get_schedule_stats(
    start_date: Optional[date_type] = None,
    end_date: Optional[date_type] = None,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("schedules:read"))
):
    stats = schedule_service.get_schedule_stats(db, tenant_id, start_date=start_date, end_date=end_date)
    return {"success": True, "data": stats}


@router.get("/export")
def export_schedules(
    format: str = Query("csv", pattern="^(csv|json)$"),
    start_date: Optional[date_type] = None,
    end_date: Optional[date_type] = None,
    type: Optional[ScheduleType] = None,
    status_filter: Optional[ScheduleStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("schedules:read"))
):
    """Download schedules ordered by date and start time, as CSV or JSON."""
    schedules = schedule_service.export_schedules(
        db, tenant_id, start_date=start_date, end_date=end_date, type=type, status=status_filter
    )
    logger.info(f"Exporting {len(schedules)} schedules as {format}: tenant_id={tenant_id}")
    if format == "json":
        return {
            "success": True,
            "data": [ScheduleResponse.model_validate(s) for s in schedules],
        }
    filename = f"schedules-{date_type.today().isoformat()}.csv"
    return Response(
        content=schedule_service.to_csv(schedules),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{schedule_id}", response_model=ApiResponse[ScheduleResponse])
def get_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("schedules:read"))
):
    return {"success": True, "data": schedule_service.get_schedule(db, schedule_id, tenant_id)}


@router.put("/{schedule_id}", response_model=ApiResponse[ScheduleResponse])
def update_schedule(
    schedule_id: int,
    schedule_data: ScheduleUpdate,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    current_user: User = Depends(require_permissions("schedules:update"))
):
    schedule = schedule_service.update_schedule(db, schedule_id, schedule_data, tenant_id, current_user.id)
    logger.info(f"Schedule updated: id={schedule.id}, tenant_id={tenant_id}")
    return {"success": True, "message": "Schedule updated successfully", "data": schedule}


@router.delete("/{schedule_id}", response_model=MessageResponse)
def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    tenant_id: int = Depends(get_tenant_id),
    _user: User = Depends(require_permissions("schedules:delete"))
):
    schedule_service.delete_schedule(db, schedule_id, tenant_id)
    logger.info(f"Schedule deleted: id={schedule_id}, tenant_id={tenant_id}")
    return {"success": True, "message": "Schedule deleted successfully"}
