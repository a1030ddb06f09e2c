# -*- coding: utf-8 -*-

from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from .timestamps import format_timestamp, utc_now

NONCE_BYTES = 16


def generate_nonce(num_bytes: int = NONCE_BYTES) -> str:
    """128 bits from the OS CSPRNG, hex encoded (alphabet [0-9a-f])."""
    if num_bytes < NONCE_BYTES:
        raise ValueError(f"nonce must carry at least {NONCE_BYTES} random bytes")
    return secrets.token_hex(num_bytes)


@dataclass
class NonceRecord:
    """
    Server-side half of a challenge.

    `consumed` flips to True exactly once, through `consume()`, and only when a
    verification is accepted. A record past `expires_at` is dead even if it was
    never consumed.
    """

    value: str
    issued_at: datetime
    expires_at: datetime
    consumed: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @classmethod
    def new(cls, ttl_seconds: int, now: Optional[datetime] = None) -> "NonceRecord":
        issued_at = now or utc_now()
        return cls(
            value=generate_nonce(),
            issued_at=issued_at,
            expires_at=issued_at + timedelta(seconds=int(ttl_seconds)),
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or utc_now()) > self.expires_at

    def is_live(self, now: Optional[datetime] = None) -> bool:
        return not self.consumed and not self.is_expired(now)

    def consume(self, now: Optional[datetime] = None) -> bool:
        """Compare-and-set: returns True for the single caller that consumed a live record."""
        with self._lock:
            if not self.is_live(now):
                return False
            self.consumed = True
            return True

    def to_dict(self):
        return {
            "nonce": self.value,
            "issuedAt": format_timestamp(self.issued_at),
            "expiresAt": format_timestamp(self.expires_at),
        }
