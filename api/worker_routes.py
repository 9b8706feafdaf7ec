from typing import List

from fastapi import APIRouter, Depends

from core.deps import get_worker_directory, require_admin_role
from models.worker import WorkerSummary
from services.worker_service import WorkerDirectory

router = APIRouter()


@router.get("", response_model=List[WorkerSummary])
def list_workers(
    admin_user: dict = Depends(require_admin_role),
    workers: WorkerDirectory = Depends(get_worker_directory),
):
    """Worker profiles an admin can assign shifts to."""
    return workers.list_workers()
