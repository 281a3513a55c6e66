from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol


class MirrorCollection(str, Enum):
    """Collections mirrored to flat JSON files; the value is the file stem."""

    USERS = "users"
    ATTENDANCE = "attendance"
    LEAVES = "leaves"


@dataclass(frozen=True)
class SyncResult:
    success: bool
    counts: dict[str, int] = field(default_factory=dict)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True, "counts": dict(self.counts)}
        return {"success": False, "counts": dict(self.counts), "error": self.error}


class MirrorTrigger(Protocol):
    """What mutating services call after a write. Must never raise."""

    def sync_collection(self, name: MirrorCollection) -> bool:
        raise NotImplementedError


class NullMirror:
    """Trigger used when mirroring is disabled."""

    def sync_collection(self, name: MirrorCollection) -> bool:
        return True
