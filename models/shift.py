from datetime import date as Date
from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import Field as PydanticField
from pydantic import field_validator
from sqlalchemy import JSON, Column, DateTime
from sqlmodel import Field, Index, SQLModel

from models.location import CamelModel, LocationPayload
from services.shift_constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from utils.datetime_helpers import is_date_in_past, is_valid_time_string


class ShiftStatus(str, Enum):
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


# Tags are not mutually exclusive; a shift may carry several
class ShiftType(str, Enum):
    WEEKEND = "Weekend"
    WEEKDAY = "Weekday"
    EVENING = "Evening"
    MORNING = "Morning"
    NIGHT = "Night"


# Scheduled work assignment for one worker at one location
class Shift(SQLModel, table=True):
    __tablename__ = "shifts"

    __table_args__ = (
        Index("ix_shifts_user_id_date", "user_id", "date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    role: str
    type_of_shift: List[str] = Field(sa_column=Column(JSON, nullable=False))

    # Firebase uid of the assigned worker
    user_id: str = Field(index=True)

    # Calendar anchor plus the concrete instants derived from it.
    # finish_time rolls to the next day for night shifts. Stored as naive local values.
    date: Date = Field(index=True)
    start_time: datetime = Field(sa_column=Column(DateTime(timezone=False), nullable=False))
    finish_time: datetime = Field(sa_column=Column(DateTime(timezone=False), nullable=False))
    num_of_shifts_per_day: int = Field(default=1)

    location_id: int = Field(foreign_key="locations.id", index=True)

    status: ShiftStatus = Field(default=ShiftStatus.SCHEDULED, index=True)
    clock_in_time: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False)))
    clock_out_time: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False)))

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# --- Payload Models (already-validated input contract) ---


def _check_time_string(value: Optional[str]) -> Optional[str]:
    if value is not None and not is_valid_time_string(value):
        raise ValueError("Time must be in HH:MM format")
    return value


def _check_shift_date(value: Optional[Date]) -> Optional[Date]:
    if value is not None and is_date_in_past(value):
        raise ValueError("Date cannot be in the past and must be a valid date")
    return value


class ShiftCreate(CamelModel):
    title: str = PydanticField(min_length=1)
    role: str = PydanticField(min_length=1)
    type_of_shift: List[ShiftType] = PydanticField(min_length=1)
    user: str = PydanticField(min_length=1)
    start_time: str
    finish_time: str
    num_of_shifts_per_day: int = PydanticField(default=1, gt=0)
    location: LocationPayload
    date: Date

    @field_validator("start_time", "finish_time")
    @classmethod
    def validate_time_format(cls, value):
        return _check_time_string(value)

    @field_validator("date")
    @classmethod
    def validate_not_in_past(cls, value):
        return _check_shift_date(value)


# Every field optional; only the supplied ones are applied
class ShiftUpdate(CamelModel):
    title: Optional[str] = PydanticField(default=None, min_length=1)
    role: Optional[str] = PydanticField(default=None, min_length=1)
    type_of_shift: Optional[List[ShiftType]] = PydanticField(default=None, min_length=1)
    user: Optional[str] = PydanticField(default=None, min_length=1)
    start_time: Optional[str] = None
    finish_time: Optional[str] = None
    num_of_shifts_per_day: Optional[int] = PydanticField(default=None, gt=0)
    location: Optional[LocationPayload] = None
    date: Optional[Date] = None

    @field_validator("start_time", "finish_time")
    @classmethod
    def validate_time_format(cls, value):
        return _check_time_string(value)

    @field_validator("date")
    @classmethod
    def validate_not_in_past(cls, value):
        return _check_shift_date(value)


# Batch item: with an id it updates that shift, without one it creates
class BatchShiftItem(ShiftCreate):
    id: Optional[int] = None


class BatchShiftRequest(CamelModel):
    shifts: List[BatchShiftItem] = PydanticField(min_length=1)


class ShiftQueryOptions(CamelModel):
    page: int = PydanticField(default=1, ge=1)
    limit: int = PydanticField(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    status: Optional[ShiftStatus] = None
    sort_by: str = "date"
    sort_order: Literal["asc", "desc"] = "desc"
