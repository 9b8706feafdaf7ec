from datetime import date as Date
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import field_serializer

from models.location import CamelModel, LocationSummary
from models.shift import ShiftStatus
from models.worker import WorkerSummary
from utils.datetime_helpers import format_utc_datetime


# Shift as rendered for API consumers: references replaced by embedded
# summaries, instants reduced to bare HH:MM strings.
class ShiftView(CamelModel):
    id: int
    title: str
    role: str
    type_of_shift: List[str]
    start_time: str
    finish_time: str
    num_of_shifts_per_day: int
    date: Date
    status: ShiftStatus
    clock_in_time: Optional[str] = None
    clock_out_time: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    user: WorkerSummary
    location: Optional[LocationSummary] = None

    @field_serializer("created_at", "updated_at")
    def serialize_timestamps(self, dt: datetime) -> Optional[str]:
        """Ensure timestamps are formatted as UTC with Z suffix"""
        return format_utc_datetime(dt)


class ShiftEnvelope(CamelModel):
    shift: ShiftView


class ClockInView(CamelModel):
    id: int
    status: ShiftStatus
    clock_in_time: Optional[str]


class ClockOutView(CamelModel):
    id: int
    status: ShiftStatus
    clock_out_time: Optional[str]


class ClockInResponse(CamelModel):
    message: str
    shift: ClockInView


class ClockOutResponse(CamelModel):
    message: str
    shift: ClockOutView


class PaginationMeta(CamelModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next_page: bool
    has_prev_page: bool
    limit: int


class ShiftPage(CamelModel):
    shifts: List[ShiftView]
    pagination: PaginationMeta


class BatchErrorDetail(CamelModel):
    message: str
    error_code: str


class BatchError(CamelModel):
    index: int
    shift: Dict[str, Any]
    error: BatchErrorDetail


class BatchResult(CamelModel):
    created: List[ShiftView] = []
    updated: List[ShiftView] = []
    errors: List[BatchError] = []


class MessageResponse(CamelModel):
    message: str
