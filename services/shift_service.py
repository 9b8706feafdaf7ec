import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from sqlalchemy import update
from sqlmodel import Session

from core.errors import (
    AppError,
    ForbiddenError,
    InvalidStateError,
    ShiftValidationError,
    TimeWindowViolation,
    shift_not_found,
    user_not_found,
)
from models.location import Location
from models.shift import (
    BatchShiftItem,
    Shift,
    ShiftCreate,
    ShiftStatus,
    ShiftType,
    ShiftUpdate,
)
from models.shift_views import (
    BatchError,
    BatchErrorDetail,
    BatchResult,
    ClockInResponse,
    ClockInView,
    ClockOutResponse,
    ClockOutView,
    ShiftView,
)
from services import shift_constants
from services.clock_window import validate_clock_in_time, validate_clock_out_time
from services.location_service import LocationService
from services.shift_render import render_shift
from services.worker_service import WorkerDirectory
from utils.datetime_helpers import (
    create_shift_date_times,
    current_datetime,
    format_time_string,
)

logger = logging.getLogger(__name__)

# Fields a patch may carry straight through to the record
PLAIN_UPDATE_FIELDS = ("title", "role", "num_of_shifts_per_day")


def shift_values(shift: Shift) -> Dict[str, Any]:
    # getattr rather than model_dump so expired attributes are reloaded
    return {field: getattr(shift, field) for field in Shift.model_fields}


def validate_shift_record(values: Dict[str, Any]) -> None:
    """
    Whole-entity check run on a merged record before it is persisted.

    Raises:
        ShiftValidationError: naming the first field that breaks an invariant
    """
    for field in ("title", "role", "user_id"):
        value = values.get(field)
        if not isinstance(value, str) or not value.strip():
            raise ShiftValidationError(f"Shift {field} cannot be empty")

    type_of_shift = values.get("type_of_shift") or []
    if not type_of_shift:
        raise ShiftValidationError("At least one shift type is required")
    allowed = {shift_type.value for shift_type in ShiftType}
    unknown = [tag for tag in type_of_shift if tag not in allowed]
    if unknown:
        raise ShiftValidationError(f"Invalid shift type: {', '.join(unknown)}")

    num_of_shifts = values.get("num_of_shifts_per_day")
    if not isinstance(num_of_shifts, int) or num_of_shifts < 1:
        raise ShiftValidationError("Number of shifts per day must be a positive integer")

    if values.get("location_id") is None:
        raise ShiftValidationError("Shift location is required")

    start_time, finish_time = values.get("start_time"), values.get("finish_time")
    if start_time is None or finish_time is None or finish_time <= start_time:
        raise ShiftValidationError("Shift finish time must be after its start time")


class ShiftService:
    """
    Create, edit and move shifts through their lifecycle.

    Scheduled -> In Progress -> Completed, or Scheduled -> Cancelled.
    Every status change is a conditional UPDATE gated on the expected
    current status, so a racing second caller fails instead of
    transitioning twice.
    """

    def __init__(self, session: Session, workers: WorkerDirectory):
        self.session = session
        self.workers = workers

    # --- Helpers ---

    def _get_shift_or_404(self, shift_id: int) -> Shift:
        shift = self.session.get(Shift, shift_id)
        if not shift:
            raise shift_not_found()
        return shift

    def _require_worker(self, uid: str) -> None:
        if self.workers.get_worker(uid) is None:
            raise user_not_found()

    def _render(self, shift: Shift) -> ShiftView:
        worker = self.workers.get_worker(shift.user_id)
        location = self.session.get(Location, shift.location_id)
        return render_shift(shift, worker, location)

    def _transition(self, shift_id: int, expected: ShiftStatus, **values) -> bool:
        """
        Apply values only if the shift is still in the expected status.

        Returns:
            bool: False when another writer changed the status first.
        """
        values["updated_at"] = datetime.now(timezone.utc)
        result = self.session.connection().execute(
            update(Shift)
            .where(Shift.id == shift_id)
            .where(Shift.status == expected)
            .values(**values)
        )
        if result.rowcount != 1:
            self.session.rollback()
            return False
        self.session.commit()
        return True

    # --- Reads ---

    def get_shift(self, shift_id: int) -> ShiftView:
        return self._render(self._get_shift_or_404(shift_id))

    # --- Commands ---

    def create_shift(self, data: ShiftCreate) -> ShiftView:
        self._require_worker(data.user)

        location = LocationService.find_or_create(self.session, data.location)

        start_dt, finish_dt = create_shift_date_times(data.date, data.start_time, data.finish_time)

        shift = Shift(
            title=data.title,
            role=data.role,
            type_of_shift=[shift_type.value for shift_type in data.type_of_shift],
            user_id=data.user,
            date=data.date,
            start_time=start_dt,
            finish_time=finish_dt,
            num_of_shifts_per_day=data.num_of_shifts_per_day,
            location_id=location.id,
            status=ShiftStatus.SCHEDULED,
            clock_in_time=None,
            clock_out_time=None,
        )
        validate_shift_record(shift_values(shift))

        self.session.add(shift)
        self.session.commit()
        self.session.refresh(shift)

        logger.info("Created shift %s for user %s on %s", shift.id, shift.user_id, shift.date)
        return self._render(shift)

    def update_shift(self, shift_id: int, data: ShiftUpdate) -> ShiftView:
        shift = self._get_shift_or_404(shift_id)

        if shift.status != ShiftStatus.SCHEDULED:
            raise InvalidStateError(f"Cannot update shift as it is {shift.status.value}")

        supplied = data.model_fields_set
        changes: Dict[str, Any] = {}

        if "user" in supplied:
            if data.user is None:
                raise ShiftValidationError("Shift user_id cannot be empty")
            self._require_worker(data.user)
            changes["user_id"] = data.user

        if "location" in supplied and data.location is not None:
            location = LocationService.find_or_create(self.session, data.location)
            changes["location_id"] = location.id

        # Partial time edits fall back to the stored values for the rest
        if supplied & {"date", "start_time", "finish_time"}:
            shift_date = data.date if data.date is not None else shift.date
            start_str = data.start_time or format_time_string(shift.start_time)
            finish_str = data.finish_time or format_time_string(shift.finish_time)
            changes["date"] = shift_date
            changes["start_time"], changes["finish_time"] = create_shift_date_times(
                shift_date, start_str, finish_str
            )

        if "type_of_shift" in supplied:
            changes["type_of_shift"] = (
                [shift_type.value for shift_type in data.type_of_shift]
                if data.type_of_shift is not None
                else None
            )

        for field in PLAIN_UPDATE_FIELDS:
            if field in supplied:
                changes[field] = getattr(data, field)

        merged = {**shift_values(shift), **changes}
        validate_shift_record(merged)

        if changes and not self._transition(shift.id, ShiftStatus.SCHEDULED, **changes):
            self.session.refresh(shift)
            raise InvalidStateError(f"Cannot update shift as it is {shift.status.value}")

        self.session.refresh(shift)
        logger.info("Updated shift %s (%s)", shift.id, ", ".join(sorted(changes)) or "no changes")
        return self._render(shift)

    def delete_shift(self, shift_id: int) -> None:
        shift = self._get_shift_or_404(shift_id)
        self.session.delete(shift)
        self.session.commit()
        logger.info("Deleted shift %s", shift_id)

    def cancel_shift(self, shift_id: int) -> None:
        shift = self._get_shift_or_404(shift_id)

        if shift.status == ShiftStatus.CANCELLED:
            raise InvalidStateError("Shift is already cancelled", "SHIFT_ALREADY_CANCELLED")

        if shift.status == ShiftStatus.COMPLETED:
            raise InvalidStateError("Cannot cancel a completed shift", "SHIFT_ALREADY_COMPLETED")

        if shift.status != ShiftStatus.SCHEDULED:
            raise InvalidStateError(f"Cannot cancel shift as it is {shift.status.value}")

        if not self._transition(shift.id, ShiftStatus.SCHEDULED, status=ShiftStatus.CANCELLED):
            self.session.refresh(shift)
            raise InvalidStateError(f"Cannot cancel shift as it is {shift.status.value}")

        logger.info("Cancelled shift %s", shift_id)

    def clock_in(self, shift_id: int, worker_id: str, now: Optional[datetime] = None) -> ClockInResponse:
        shift = self._get_shift_or_404(shift_id)

        if shift.user_id != worker_id:
            raise ForbiddenError()

        if shift.status != ShiftStatus.SCHEDULED:
            raise InvalidStateError("Can only clock in to scheduled shifts")

        now = now or current_datetime()
        check = validate_clock_in_time(
            shift.start_time,
            shift.finish_time,
            shift_constants.EARLY_CLOCK_IN_BUFFER,
            now=now,
        )
        if not check.is_valid:
            raise TimeWindowViolation(check.message, check.error_code)

        if not self._transition(
            shift.id, ShiftStatus.SCHEDULED, status=ShiftStatus.IN_PROGRESS, clock_in_time=now
        ):
            raise InvalidStateError("Can only clock in to scheduled shifts")

        logger.info("User %s clocked in to shift %s at %s", worker_id, shift_id, now.isoformat())
        return ClockInResponse(
            message="Successfully clocked in",
            shift=ClockInView(
                id=shift_id,
                status=ShiftStatus.IN_PROGRESS,
                clock_in_time=format_time_string(now),
            ),
        )

    def clock_out(self, shift_id: int, worker_id: str, now: Optional[datetime] = None) -> ClockOutResponse:
        shift = self._get_shift_or_404(shift_id)

        if shift.user_id != worker_id:
            raise ForbiddenError()

        if shift.status != ShiftStatus.IN_PROGRESS:
            raise InvalidStateError("Can only clock out from shifts in progress")

        now = now or current_datetime()
        check = validate_clock_out_time(
            shift.finish_time,
            shift_constants.MINIMUM_CLOCK_OUT_BUFFER,
            now=now,
        )
        if not check.is_valid:
            raise TimeWindowViolation(check.message, check.error_code)

        if not self._transition(
            shift.id, ShiftStatus.IN_PROGRESS, status=ShiftStatus.COMPLETED, clock_out_time=now
        ):
            raise InvalidStateError("Can only clock out from shifts in progress")

        logger.info("User %s clocked out of shift %s at %s", worker_id, shift_id, now.isoformat())
        return ClockOutResponse(
            message="Successfully clocked out",
            shift=ClockOutView(
                id=shift_id,
                status=ShiftStatus.COMPLETED,
                clock_out_time=format_time_string(now),
            ),
        )

    def batch_reconcile(self, items: Sequence[BatchShiftItem]) -> BatchResult:
        """
        Create or update each item independently, in input order.

        Items carrying an id update that shift, the rest are created. A
        failing item is rolled back and recorded in errors with its input
        index; processing carries on with the next item. There is no
        all-or-nothing transaction across items.
        """
        result = BatchResult()

        for index, item in enumerate(items):
            try:
                if item.id is not None:
                    patch = ShiftUpdate.model_validate(
                        {field: getattr(item, field) for field in item.model_fields_set if field != "id"}
                    )
                    result.updated.append(self.update_shift(item.id, patch))
                else:
                    result.created.append(self.create_shift(item))
            except AppError as e:
                self.session.rollback()
                logger.warning("Batch item %d failed: %s (%s)", index, e.message, e.error_code)
                result.errors.append(self._batch_error(index, item, e.message, e.error_code))
            except Exception as e:
                self.session.rollback()
                logger.exception("Batch item %d failed unexpectedly", index)
                result.errors.append(self._batch_error(index, item, str(e), "UNKNOWN_ERROR"))

        logger.info(
            "Batch processed %d shifts: %d created, %d updated, %d failed",
            len(items),
            len(result.created),
            len(result.updated),
            len(result.errors),
        )
        return result

    @staticmethod
    def _batch_error(index: int, item: BatchShiftItem, message: str, error_code: str) -> BatchError:
        return BatchError(
            index=index,
            shift=item.model_dump(mode="json", by_alias=True, exclude_none=True),
            error=BatchErrorDetail(message=message, error_code=error_code),
        )
