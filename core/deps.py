import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlmodel import Session

from core.firebase import get_firestore_client, verify_id_token
from db.session import get_session
from services.shift_query import ShiftQueryEngine
from services.shift_service import ShiftService
from services.worker_service import USERS_COLLECTION, WorkerDirectory

logger = logging.getLogger(__name__)

# Standard credentials exception
CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)

# Admin Roles Defined
ADMIN_ROLES = ["admin"]


# Matches Firebase Auth Token to the caller's Firestore profile
async def get_current_user(request: Request):
    # 1) Extract & Analyze Authorization Header
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        raise CREDENTIALS_EXCEPTION
    token = auth_header.split(" ", 1)[1]

    # 2) Verify This Points to a Real User Account
    try:
        decoded = verify_id_token(token)
    except Exception:
        raise CREDENTIALS_EXCEPTION
    uid = decoded.get("uid")
    if not uid:
        raise CREDENTIALS_EXCEPTION

    # 3) Fetch the Firestore user profile
    snapshot = get_firestore_client().collection(USERS_COLLECTION).document(uid).get()
    if not snapshot.exists:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User profile not found in Firestore",
        )
    profile = snapshot.to_dict() or {}

    return {
        "uid": uid,
        "name": profile.get("displayName", ""),
        "email": profile.get("email", ""),
        "role": profile.get("role", ""),
    }


# Admin Role Check Dependency
async def require_admin_role(
    current_user: Annotated[dict, Depends(get_current_user)]
):
    if current_user.get("role") not in ADMIN_ROLES:
        logger.info("User %s denied admin access (role=%r)", current_user.get("uid"), current_user.get("role"))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User doesn't have sufficient privileges for this action",
        )
    return current_user


def get_worker_directory() -> WorkerDirectory:
    return WorkerDirectory(get_firestore_client())


def get_shift_service(
    session: Session = Depends(get_session),
    workers: WorkerDirectory = Depends(get_worker_directory),
) -> ShiftService:
    return ShiftService(session, workers)


def get_shift_query_engine(
    session: Session = Depends(get_session),
    workers: WorkerDirectory = Depends(get_worker_directory),
) -> ShiftQueryEngine:
    return ShiftQueryEngine(session, workers)
