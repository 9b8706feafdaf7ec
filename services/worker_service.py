from typing import Dict, Iterable, List, Optional

from models.worker import WORKER_ROLE, WorkerSummary

USERS_COLLECTION = "users"


class WorkerDirectory:
    """
    Read-only view of worker profiles kept in the Firestore "users" collection.

    The scheduling engine only needs existence checks and the summary
    fields embedded in shift responses.
    """

    def __init__(self, firestore_client):
        self.db = firestore_client

    def get_worker(self, uid: str) -> Optional[WorkerSummary]:
        if not uid:
            return None
        snapshot = self.db.collection(USERS_COLLECTION).document(uid).get()
        if not snapshot.exists:
            return None
        return WorkerSummary.from_profile(snapshot.id, snapshot.to_dict() or {})

    def get_workers(self, uids: Iterable[str]) -> Dict[str, WorkerSummary]:
        unique_ids = sorted(set(uid for uid in uids if uid))
        if not unique_ids:
            return {}

        refs = [self.db.collection(USERS_COLLECTION).document(uid) for uid in unique_ids]
        workers = {}
        for snapshot in self.db.get_all(refs):
            if snapshot.exists:
                workers[snapshot.id] = WorkerSummary.from_profile(snapshot.id, snapshot.to_dict() or {})
        return workers

    def list_workers(self) -> List[WorkerSummary]:
        docs = self.db.collection(USERS_COLLECTION).where("role", "==", WORKER_ROLE).stream()
        return [WorkerSummary.from_profile(doc.id, doc.to_dict() or {}) for doc in docs]
