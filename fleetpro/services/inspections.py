"""
Inspection scheduling rules.

The endpoints stay thin; the date arithmetic, the list views and the
completion checks live here so they can be tested without HTTP.
"""
from datetime import date, timedelta
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from fleetpro.models.inspection import InspectionSchedule, InspectionCompletion
from fleetpro.models.defect import VehicleDefect, DefectType, UNRESOLVED_DEFECT_STATUSES
from fleetpro.core.exceptions import InvalidInputError

VIEWS = ("all", "overdue", "this_week", "scheduled", "completed", "failed")


def next_inspection_date(
    db: Session,
    tenant_id: str,
    vehicle_id: str,
    inspection_type: str,
    frequency_weeks: int,
    today: Optional[date] = None,
) -> date:
    """
    Date of the next recurring inspection.

    Counts on from the latest active schedule of the same type for the
    vehicle, or from today when there is none.
    """
    latest = db.query(func.max(InspectionSchedule.scheduled_date)).filter(
        InspectionSchedule.tenant_id == tenant_id,
        InspectionSchedule.vehicle_id == vehicle_id,
        InspectionSchedule.inspection_type == inspection_type,
        InspectionSchedule.is_active.is_(True),
    ).scalar()
    base = latest or today or date.today()
    return base + timedelta(weeks=frequency_weeks)


def apply_view(query: Query, view: str, today: Optional[date] = None) -> Query:
    """Narrow a schedule query to one of the VIEWS."""
    today = today or date.today()
    not_completed = ~InspectionSchedule.completion.has()

    if view == "overdue":
        return query.filter(
            InspectionSchedule.is_active.is_(True),
            InspectionSchedule.scheduled_date < today,
            not_completed,
        )
    if view == "this_week":
        return query.filter(
            not_completed,
            InspectionSchedule.scheduled_date >= today,
            InspectionSchedule.scheduled_date <= today + timedelta(days=6),
        )
    if view == "scheduled":
        return query.filter(not_completed, InspectionSchedule.scheduled_date >= today)
    if view == "completed":
        return query.filter(InspectionSchedule.completion.has())
    if view == "failed":
        return query.filter(
            InspectionSchedule.completion.has(InspectionCompletion.inspection_passed.is_(False))
        )
    return query


def count_unresolved_defects(db: Session, tenant_id: str, vehicle_id: str) -> int:
    return db.query(VehicleDefect).filter(
        VehicleDefect.tenant_id == tenant_id,
        VehicleDefect.vehicle_id == vehicle_id,
        VehicleDefect.status.in_(UNRESOLVED_DEFECT_STATUSES),
    ).count()


def validate_completion(
    schedule: InspectionSchedule,
    inspection_passed: bool,
    new_defect_types: Iterable[str],
    unresolved_defects: int,
) -> None:
    """
    Raise InvalidInputError if the inspection can't be closed as submitted.

    - an inspection is completed once
    - critical defects block completion
    - a pass can't carry major defects
    - outstanding defects on the vehicle must be resolved first
    """
    if schedule.completion is not None:
        raise InvalidInputError("Inspection has already been completed")

    types = {DefectType(t) for t in new_defect_types}
    if DefectType.CRITICAL in types:
        raise InvalidInputError("Inspection cannot be completed with critical defects")
    if inspection_passed and DefectType.MAJOR in types:
        raise InvalidInputError("Inspection cannot pass with major defects")
    if unresolved_defects:
        raise InvalidInputError(
            f"Vehicle has {unresolved_defects} unresolved defect(s); resolve them before completing"
        )
