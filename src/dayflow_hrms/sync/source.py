from __future__ import annotations

from typing import Protocol, Sequence

from ..core.constants import DEFAULT_STORE_TIMEOUT_MS
from ..database.connection import DatabaseConnection
from ..database.mongo_base import ATTENDANCE, LEAVES, USERS, employee_lookup, store_errors
from .model import MirrorCollection


class MirrorSource(Protocol):
    def fetch(self, name: MirrorCollection) -> Sequence[dict]:
        """Every document of a collection, oldest id first."""

        raise NotImplementedError


_STORE_COLLECTIONS = {
    MirrorCollection.USERS: USERS,
    MirrorCollection.ATTENDANCE: ATTENDANCE,
    MirrorCollection.LEAVES: LEAVES,
}


class MongoMirrorSource(MirrorSource):
    def __init__(self, conn: DatabaseConnection, *, max_time_ms: int = DEFAULT_STORE_TIMEOUT_MS):
        self._conn = conn
        self._max_time_ms = max_time_ms

    def fetch(self, name: MirrorCollection) -> Sequence[dict]:
        col = self._conn.database()[_STORE_COLLECTIONS[name]]
        pipeline: list[dict] = [{"$sort": {"_id": 1}}]
        if name != MirrorCollection.USERS:
            pipeline.extend(employee_lookup())
        with store_errors(f"reading {name.value} for mirror"):
            return list(col.aggregate(pipeline, maxTimeMS=self._max_time_ms))
