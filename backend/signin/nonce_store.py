# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Dict, Optional

from .nonce import NonceRecord
from .timestamps import utc_now

logger = logging.getLogger(__name__)


class NonceStore:
    """
    session key -> NonceRecord, behind one lock.

    - put() replaces the session's record in a single step, so readers see the
      old record or the new one, never a mix.
    - Expiry is lazy; put() also sweeps dead records so the dict stays small.
    - Per-process only. Several workers need a shared store instead.
    """

    def __init__(self, ttl_seconds: int = 600):
        self.ttl_seconds = int(ttl_seconds)
        self._records: Dict[str, NonceRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def issue(self, session_key: str, now: Optional[datetime] = None) -> NonceRecord:
        record = NonceRecord.new(self.ttl_seconds, now=now)
        self.put(session_key, record, now=now)
        return record

    def put(self, session_key: str, record: NonceRecord, now: Optional[datetime] = None) -> None:
        with self._lock:
            replaced = self._records.get(session_key)
            self._records[session_key] = record
            self._sweep_locked(now or utc_now())
        if replaced is not None and replaced.is_live(now):
            logger.debug("replaced unconsumed nonce for session %s", _short(session_key))

    def get(self, session_key: str) -> Optional[NonceRecord]:
        if not session_key:
            return None
        with self._lock:
            return self._records.get(session_key)

    def discard(self, session_key: str, record: Optional[NonceRecord] = None) -> None:
        """Drop the session's record; with `record`, only if it is still the current one."""
        with self._lock:
            current = self._records.get(session_key)
            if current is None:
                return
            if record is None or current is record:
                self._records.pop(session_key, None)

    def sweep(self, now: Optional[datetime] = None) -> int:
        with self._lock:
            return self._sweep_locked(now or utc_now())

    def _sweep_locked(self, now: datetime) -> int:
        dead = [key for key, rec in self._records.items() if not rec.is_live(now)]
        for key in dead:
            del self._records[key]
        return len(dead)


def _short(session_key: str) -> str:
    return (session_key or "")[:8]
