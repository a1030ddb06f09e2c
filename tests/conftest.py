# tests/conftest.py
from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from api.auth.session_cookie import SessionCookieService
from api.deps import Deps, get_deps
from api.main import app as fastapi_app
from settings.config import Settings
from signin.issuer import ChallengeIssuer
from signin.message import SiweMessage
from signin.nonce_store import NonceStore
from signin.verifier import SignatureVerifier
from signin.wallet import LocalAccountWallet

# Well-known throwaway keys; never funded.
PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
OTHER_PRIVATE_KEY = "0x8da4ef21b864d2cc526dbdb2a120bd2874c36c9d0a1fb7f8c63d7f7a8b41de8f"

DOMAIN = "example.test"
ORIGIN = f"http://{DOMAIN}"
CHAIN_ID = 80002


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def wallet() -> LocalAccountWallet:
    return LocalAccountWallet(PRIVATE_KEY)


@pytest.fixture()
def other_wallet() -> LocalAccountWallet:
    return LocalAccountWallet(OTHER_PRIVATE_KEY)


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        siwe_domain="",
        siwe_chain_id=CHAIN_ID,
        siwe_nonce_ttl_seconds=600,
        siwe_session_cookie="siwe_session",
        siwe_expose_failure_reason=True,
        jwt_secret="test-session-secret-0123456789abcdef0123",
        cookie_secure=False,
        cookie_samesite="lax",
    )


@pytest.fixture()
def store(settings: Settings) -> NonceStore:
    return NonceStore(ttl_seconds=settings.siwe_nonce_ttl_seconds)


@pytest.fixture()
def deps(settings: Settings, store: NonceStore, clock: FakeClock) -> Deps:
    return Deps(
        settings=settings,
        nonce_store=store,
        issuer=ChallengeIssuer(store, clock=clock),
        verifier=SignatureVerifier(clock=clock),
        session_cookies=SessionCookieService.from_settings(settings),
    )


@pytest.fixture()
def client(deps: Deps) -> Iterator[TestClient]:
    fastapi_app.dependency_overrides[get_deps] = lambda: deps
    try:
        with TestClient(fastapi_app) as test_client:
            yield test_client
    finally:
        fastapi_app.dependency_overrides.clear()


def build_message(wallet: LocalAccountWallet, nonce: str, clock: FakeClock | None = None, **overrides) -> str:
    fields = {
        "domain": DOMAIN,
        "address": wallet.address,
        "uri": ORIGIN,
        "chain_id": CHAIN_ID,
        "nonce": nonce,
        "statement": "Sign in to the example app",
        "issued_at": clock() if clock else None,
    }
    fields.update(overrides)
    return SiweMessage.create(**fields).encode()


def sign(wallet: LocalAccountWallet, message: str, chain_id: int = CHAIN_ID) -> str:
    return wallet.sign_message(message, wallet.address, chain_id)
