from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from core.deps import (
    get_current_user,
    get_shift_query_engine,
    get_shift_service,
    require_admin_role,
)
from models.shift import BatchShiftRequest, ShiftCreate, ShiftQueryOptions, ShiftStatus, ShiftUpdate
from models.shift_views import (
    BatchResult,
    ClockInResponse,
    ClockOutResponse,
    MessageResponse,
    ShiftEnvelope,
    ShiftPage,
)
from services.shift_constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from services.shift_query import ShiftQueryEngine
from services.shift_service import ShiftService

# Defines API Endpoints
router = APIRouter()


# Listing query string shared by the admin and "my shifts" views
def shift_query_options(
    page: int = Query(1, ge=1, description="Page number for pagination"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Number of items per page"),
    shift_status: Optional[ShiftStatus] = Query(None, alias="status", description="Filter by shift status"),
    sort_by: str = Query("date", alias="sortBy", description="Field to sort by"),
    sort_order: Literal["asc", "desc"] = Query("asc", alias="sortOrder", description="Sort order"),
) -> ShiftQueryOptions:
    return ShiftQueryOptions(
        page=page,
        limit=limit,
        status=shift_status,
        sort_by=sort_by or "date",
        sort_order=sort_order,
    )


# Get All Shifts (admin)
@router.get("", response_model=ShiftPage)
def get_all_shifts(
    options: ShiftQueryOptions = Depends(shift_query_options),
    engine: ShiftQueryEngine = Depends(get_shift_query_engine),
    admin_user: dict = Depends(require_admin_role),
):
    return engine.get_all_shifts(options)


# Get The Caller's Own Shifts
@router.get("/my-shifts", response_model=ShiftPage)
def get_my_shifts(
    options: ShiftQueryOptions = Depends(shift_query_options),
    engine: ShiftQueryEngine = Depends(get_shift_query_engine),
    user: dict = Depends(get_current_user),
):
    return engine.get_user_shifts(user["uid"], options)


@router.get("/{shift_id}", response_model=ShiftEnvelope)
def get_shift(
    shift_id: int,
    service: ShiftService = Depends(get_shift_service),
    user: dict = Depends(get_current_user),
):
    return ShiftEnvelope(shift=service.get_shift(shift_id))


@router.post("", response_model=ShiftEnvelope, status_code=status.HTTP_201_CREATED)
def create_shift(
    payload: ShiftCreate,
    service: ShiftService = Depends(get_shift_service),
    admin_user: dict = Depends(require_admin_role),
):
    return ShiftEnvelope(shift=service.create_shift(payload))


# Mixed create/update; per-item failures come back in "errors"
@router.post("/batch", response_model=BatchResult)
def batch_create_update_shifts(
    payload: BatchShiftRequest,
    service: ShiftService = Depends(get_shift_service),
    admin_user: dict = Depends(require_admin_role),
):
    return service.batch_reconcile(payload.shifts)


@router.put("/{shift_id}", response_model=ShiftEnvelope)
def update_shift(
    shift_id: int,
    payload: ShiftUpdate,
    service: ShiftService = Depends(get_shift_service),
    admin_user: dict = Depends(require_admin_role),
):
    return ShiftEnvelope(shift=service.update_shift(shift_id, payload))


@router.delete("/{shift_id}", response_model=MessageResponse)
def delete_shift(
    shift_id: int,
    service: ShiftService = Depends(get_shift_service),
    admin_user: dict = Depends(require_admin_role),
):
    service.delete_shift(shift_id)
    return MessageResponse(message="Shift deleted successfully")


@router.patch("/{shift_id}/cancel", response_model=MessageResponse)
def cancel_shift(
    shift_id: int,
    service: ShiftService = Depends(get_shift_service),
    admin_user: dict = Depends(require_admin_role),
):
    service.cancel_shift(shift_id)
    return MessageResponse(message="Shift cancelled successfully")


# Clock In Endpoint
@router.patch("/{shift_id}/clock-in", response_model=ClockInResponse)
def clock_in(
    shift_id: int,
    service: ShiftService = Depends(get_shift_service),
    user: dict = Depends(get_current_user),
):
    return service.clock_in(shift_id, user["uid"])


# Clock Out Endpoint
@router.patch("/{shift_id}/clock-out", response_model=ClockOutResponse)
def clock_out(
    shift_id: int,
    service: ShiftService = Depends(get_shift_service),
    user: dict = Depends(get_current_user),
):
    return service.clock_out(shift_id, user["uid"])
