from .location import Location, LocationPayload, LocationSummary
from .shift import (
    BatchShiftItem,
    Shift,
    ShiftCreate,
    ShiftQueryOptions,
    ShiftStatus,
    ShiftType,
    ShiftUpdate,
)
from .worker import WorkerSummary
