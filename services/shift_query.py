import logging
import math
from typing import Optional, Sequence

from sqlmodel import Session, func, select

from models.shift import Shift, ShiftQueryOptions
from models.shift_views import PaginationMeta, ShiftPage
from services.shift_render import render_shifts
from services.worker_service import WorkerDirectory

logger = logging.getLogger(__name__)

# API sort keys (camelCase as sent by clients, snake_case accepted too)
SORTABLE_COLUMNS = {
    "date": Shift.date,
    "startTime": Shift.start_time,
    "start_time": Shift.start_time,
    "finishTime": Shift.finish_time,
    "finish_time": Shift.finish_time,
    "title": Shift.title,
    "role": Shift.role,
    "status": Shift.status,
    "numOfShiftsPerDay": Shift.num_of_shifts_per_day,
    "num_of_shifts_per_day": Shift.num_of_shifts_per_day,
    "clockInTime": Shift.clock_in_time,
    "clock_in_time": Shift.clock_in_time,
    "clockOutTime": Shift.clock_out_time,
    "clock_out_time": Shift.clock_out_time,
    "createdAt": Shift.created_at,
    "created_at": Shift.created_at,
    "updatedAt": Shift.updated_at,
    "updated_at": Shift.updated_at,
}


class ShiftQueryEngine:
    """
    Filtered, sorted, paginated shift listings.

    No caching: every call re-queries the store. Rows with equal sort keys
    come back in whatever order the store returns them.
    """

    def __init__(self, session: Session, workers: WorkerDirectory):
        self.session = session
        self.workers = workers

    def get_shifts_with_pagination(
        self,
        options: Optional[ShiftQueryOptions] = None,
        base_conditions: Sequence = (),
    ) -> ShiftPage:
        options = options or ShiftQueryOptions()

        conditions = list(base_conditions)
        if options.status is not None:
            conditions.append(Shift.status == options.status)

        sort_column = SORTABLE_COLUMNS.get(options.sort_by)
        if sort_column is None:
            logger.warning("Unknown sortBy %r, falling back to date", options.sort_by)
            sort_column = Shift.date
        order = sort_column.desc() if options.sort_order == "desc" else sort_column.asc()

        skip = (options.page - 1) * options.limit

        stmt = select(Shift)
        count_stmt = select(func.count(Shift.id))
        if conditions:
            stmt = stmt.where(*conditions)
            count_stmt = count_stmt.where(*conditions)

        shifts = self.session.exec(stmt.order_by(order).offset(skip).limit(options.limit)).all()
        total_count = self.session.exec(count_stmt).one()

        total_pages = math.ceil(total_count / options.limit)

        return ShiftPage(
            shifts=render_shifts(self.session, self.workers, shifts),
            pagination=PaginationMeta(
                current_page=options.page,
                total_pages=total_pages,
                total_count=total_count,
                has_next_page=options.page < total_pages,
                has_prev_page=options.page > 1,
                limit=options.limit,
            ),
        )

    def get_all_shifts(self, options: Optional[ShiftQueryOptions] = None) -> ShiftPage:
        return self.get_shifts_with_pagination(options)

    def get_user_shifts(self, user_id: str, options: Optional[ShiftQueryOptions] = None) -> ShiftPage:
        return self.get_shifts_with_pagination(options, [Shift.user_id == user_id])
