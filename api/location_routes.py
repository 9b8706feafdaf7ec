from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from core.deps import require_admin_role
from db.session import get_session
from models.location import LocationSummary
from services.location_service import LocationService

router = APIRouter()


@router.get("/all", response_model=List[LocationSummary])
def list_all_locations(
    admin_user: dict = Depends(require_admin_role),
    session: Session = Depends(get_session),
):
    """
    Every location known to the scheduler. Locations are created on first
    reference by a shift and never deleted here.
    """
    return [LocationSummary.from_location(location) for location in LocationService.list_locations(session)]
