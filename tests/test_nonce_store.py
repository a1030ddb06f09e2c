# tests/test_nonce_store.py
"""Tests for nonce generation, records and the in-memory store."""

from __future__ import annotations

import re
import threading

import pytest

from signin.issuer import ChallengeIssuer
from signin.nonce import NonceRecord, generate_nonce
from signin.nonce_store import NonceStore


def test_generate_nonce_is_hex_128_bits() -> None:
    nonce = generate_nonce()
    assert re.fullmatch(r"[0-9a-f]{32}", nonce)


def test_generate_nonce_does_not_repeat() -> None:
    assert len({generate_nonce() for _ in range(1000)}) == 1000


def test_generate_nonce_refuses_short_entropy() -> None:
    with pytest.raises(ValueError):
        generate_nonce(8)


def test_record_expiry_uses_ttl(clock) -> None:
    record = NonceRecord.new(600, now=clock())
    assert record.is_live(clock())
    clock.advance(seconds=600)
    assert record.is_live(clock())
    clock.advance(seconds=1)
    assert record.is_expired(clock())
    assert not record.is_live(clock())


def test_record_consumes_exactly_once(clock) -> None:
    record = NonceRecord.new(600, now=clock())
    assert record.consume(clock()) is True
    assert record.consumed is True
    assert record.consume(clock()) is False


def test_expired_record_cannot_be_consumed(clock) -> None:
    record = NonceRecord.new(600, now=clock())
    clock.advance(minutes=11)
    assert record.consume(clock()) is False
    assert record.consumed is False


def test_concurrent_consume_has_single_winner(clock) -> None:
    record = NonceRecord.new(600, now=clock())
    results = []
    barrier = threading.Barrier(16)

    def worker() -> None:
        barrier.wait()
        results.append(record.consume(clock()))

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1
    assert results.count(False) == 15


def test_issue_replaces_previous_record(clock) -> None:
    store = NonceStore(ttl_seconds=600)
    issuer = ChallengeIssuer(store, clock=clock)
    first = issuer.issue("session-a")
    second = issuer.issue("session-a")
    assert first.value != second.value
    assert store.get("session-a") is second
    assert len(store) == 1


def test_sessions_are_independent(clock) -> None:
    store = NonceStore(ttl_seconds=600)
    issuer = ChallengeIssuer(store, clock=clock)
    a = issuer.issue("session-a")
    b = issuer.issue("session-b")
    assert store.get("session-a") is a
    assert store.get("session-b") is b


def test_issuer_requires_session_key(clock) -> None:
    with pytest.raises(ValueError):
        ChallengeIssuer(NonceStore(), clock=clock).issue("")


def test_get_unknown_session_returns_none() -> None:
    store = NonceStore()
    assert store.get("missing") is None
    assert store.get("") is None


def test_discard_only_removes_current_record(clock) -> None:
    store = NonceStore(ttl_seconds=600)
    old = store.issue("s", now=clock())
    new = store.issue("s", now=clock())
    store.discard("s", old)
    assert store.get("s") is new
    store.discard("s", new)
    assert store.get("s") is None


def test_sweep_drops_dead_records(clock) -> None:
    store = NonceStore(ttl_seconds=600)
    store.issue("expired", now=clock())
    consumed = store.issue("consumed", now=clock())
    consumed.consume(clock())
    clock.advance(minutes=11)
    store.issue("fresh", now=clock())
    # put() already swept; nothing is left to remove.
    assert store.sweep(clock()) == 0
    assert store.get("expired") is None
    assert store.get("consumed") is None
    assert store.get("fresh") is not None
