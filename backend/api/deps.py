# api/deps.py
# -*- coding: utf-8 -*-

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from api.auth.session_cookie import SessionCookieService
from settings.config import Settings
from signin.issuer import ChallengeIssuer
from signin.nonce_store import NonceStore
from signin.verifier import SignatureVerifier


# -------------------------------------------------
# Settings
# -------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# -------------------------------------------------
# Nonce state (one per process)
# -------------------------------------------------
@lru_cache(maxsize=1)
def get_nonce_store() -> NonceStore:
    return NonceStore(ttl_seconds=get_settings().siwe_nonce_ttl_seconds)


@lru_cache(maxsize=1)
def get_issuer() -> ChallengeIssuer:
    return ChallengeIssuer(get_nonce_store())


@lru_cache(maxsize=1)
def get_verifier() -> SignatureVerifier:
    return SignatureVerifier()


@lru_cache(maxsize=1)
def get_session_cookies() -> SessionCookieService:
    return SessionCookieService.from_settings(get_settings())


@dataclass
class Deps:
    settings: Settings
    nonce_store: NonceStore
    issuer: ChallengeIssuer
    verifier: SignatureVerifier
    session_cookies: SessionCookieService


# -------------------------------------------------
# Deps (single injection point for the API layer)
# -------------------------------------------------
@lru_cache(maxsize=1)
def get_deps() -> Deps:
    return Deps(
        settings=get_settings(),
        nonce_store=get_nonce_store(),
        issuer=get_issuer(),
        verifier=get_verifier(),
        session_cookies=get_session_cookies(),
    )

