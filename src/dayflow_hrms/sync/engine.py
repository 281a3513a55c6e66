from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from .model import MirrorCollection, SyncResult
from .projection import project
from .reader import mirror_path
from .source import MirrorSource
from .writer import write_json_atomic

logger = logging.getLogger(__name__)


@dataclass
class _CollectionState:
    guard: threading.Lock = field(default_factory=threading.Lock)
    running: bool = False
    dirty: bool = False
    last_count: int = 0


class MirrorSyncEngine:
    """Rebuilds the flat JSON mirror of users, attendance and leaves.

    Each collection syncs independently and never re-entrantly. A trigger that
    arrives while its collection is syncing only marks it dirty; the running
    sync then does one more pass, however many triggers arrived.
    """

    def __init__(self, source: MirrorSource, data_dir: str):
        self._source = source
        self._data_dir = data_dir
        self._states = {name: _CollectionState() for name in MirrorCollection}

    @property
    def data_dir(self) -> str:
        return self._data_dir

    def _pass(self, name: MirrorCollection) -> int:
        docs = self._source.fetch(name)
        records = project(name, docs)
        write_json_atomic(mirror_path(self._data_dir, name), records)
        return len(records)

    def _run(self, name: MirrorCollection) -> Optional[int]:
        """Sync with coalescing. None means the trigger was folded into a running sync."""
        state = self._states[name]
        with state.guard:
            if state.running:
                state.dirty = True
                return None
            state.running = True

        try:
            while True:
                with state.guard:
                    state.dirty = False
                count = self._pass(name)
                with state.guard:
                    state.last_count = count
                    if not state.dirty:
                        state.running = False
                        return count
        except Exception:
            with state.guard:
                state.running = False
                state.dirty = False
            raise

    def sync_collection(self, name: MirrorCollection) -> bool:
        """Called right after a mutation. Failures are logged, never raised.

        True means the collection was synced, or the trigger was handed to the
        sync already running for it. A failure of that follow-up pass is
        logged and reported by the caller that owns the running sync, and the
        next trigger starts a fresh pass.
        """
        name = MirrorCollection(name)
        try:
            count = self._run(name)
        except Exception:
            logger.exception("Error syncing %s mirror", name.value)
            return False
        if count is not None:
            logger.debug("Mirror %s synced (%d records)", name.value, count)
        return True

    def sync_all(self) -> SyncResult:
        """Sync every collection; one failing collection does not stop the others."""
        logger.info("Syncing data to local mirror")
        counts: dict[str, int] = {}
        errors: list[str] = []
        for name in MirrorCollection:
            try:
                count = self._run(name)
            except Exception as e:
                logger.exception("Error syncing %s mirror", name.value)
                errors.append(f"{name.value}: {e}")
                continue
            counts[name.value] = count if count is not None else self._states[name].last_count

        if errors:
            return SyncResult(success=False, counts=counts, error="; ".join(errors))
        logger.info("Mirror synced: %s", counts)
        return SyncResult(success=True, counts=counts)
