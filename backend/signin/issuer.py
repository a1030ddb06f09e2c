# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from .nonce import NonceRecord
from .nonce_store import NonceStore
from .timestamps import utc_now

logger = logging.getLogger(__name__)


class ChallengeIssuer:
    """Hands out one fresh nonce per call and makes it the session's only live challenge."""

    def __init__(self, store: NonceStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or utc_now

    def issue(self, session_key: str) -> NonceRecord:
        if not session_key:
            raise ValueError("session_key is required")
        record = self.store.issue(session_key, now=self.clock())
        logger.debug("issued nonce for session %s, expires %s", session_key[:8], record.expires_at)
        return record
