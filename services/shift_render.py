from typing import List, Optional, Sequence

from sqlmodel import Session, select

from models.location import Location, LocationSummary
from models.shift import Shift
from models.shift_views import ShiftView
from models.worker import WorkerSummary
from services.worker_service import WorkerDirectory
from utils.datetime_helpers import format_time_string


def render_shift(
    shift: Shift,
    worker: Optional[WorkerSummary],
    location: Optional[Location],
) -> ShiftView:
    """
    Project a stored shift into its response shape. Pure read-side: the
    shift record is not touched.

    A worker missing from the directory is rendered with its id only.
    """
    return ShiftView(
        id=shift.id,
        title=shift.title,
        role=shift.role,
        type_of_shift=list(shift.type_of_shift or []),
        start_time=format_time_string(shift.start_time),
        finish_time=format_time_string(shift.finish_time),
        num_of_shifts_per_day=shift.num_of_shifts_per_day,
        date=shift.date,
        status=shift.status,
        clock_in_time=format_time_string(shift.clock_in_time),
        clock_out_time=format_time_string(shift.clock_out_time),
        created_at=shift.created_at,
        updated_at=shift.updated_at,
        user=worker or WorkerSummary(id=shift.user_id),
        location=LocationSummary.from_location(location) if location else None,
    )


def render_shifts(
    session: Session,
    workers: WorkerDirectory,
    shifts: Sequence[Shift],
) -> List[ShiftView]:
    """Render a page of shifts with one worker lookup and one location query."""
    if not shifts:
        return []

    worker_map = workers.get_workers(shift.user_id for shift in shifts)

    location_ids = {shift.location_id for shift in shifts}
    locations = session.exec(select(Location).where(Location.id.in_(location_ids))).all()
    location_map = {location.id: location for location in locations}

    return [
        render_shift(shift, worker_map.get(shift.user_id), location_map.get(shift.location_id))
        for shift in shifts
    ]
