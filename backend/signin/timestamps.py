# -*- coding: utf-8 -*-

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """RFC 3339 in UTC with millisecond precision, e.g. 2024-05-01T10:00:00.000Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an RFC 3339 timestamp; the offset is mandatory.

    Raises ValueError on anything else.
    """
    raw = (value or "").strip()
    if not raw or raw != value or "T" not in raw:
        raise ValueError(f"invalid timestamp: {value!r}")
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp without offset: {value!r}")
    return parsed
