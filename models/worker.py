from typing import Optional

from pydantic import BaseModel

WORKER_ROLE = "worker"


# Worker profile as read from the Firestore "users" collection.
# Only the fields the scheduling engine reads are modeled here.
class WorkerSummary(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None

    @classmethod
    def from_profile(cls, uid: str, profile: dict) -> "WorkerSummary":
        return cls(
            id=uid,
            name=profile.get("displayName") or profile.get("name"),
            email=profile.get("email"),
            role=profile.get("role"),
        )
