# -*- coding: utf-8 -*-

from __future__ import annotations

import secrets
import time
from typing import Optional

import jwt
from fastapi.responses import Response

from settings.config import Settings

SESSION_TYP = "siwe-session"


class SessionCookieService:
    """
    Signed reference from the browser to its server-side nonce record.

    Notes:
    - The cookie is an HS256 JWT: {"sid", "typ", "exp"}. It never carries the nonce.
    - Validity of the challenge itself is decided by the NonceStore, not by `exp`.
    """

    def __init__(self, *, jwt_secret: str, ttl_seconds: int, cookie_name: str) -> None:
        self.jwt_secret = jwt_secret
        self.ttl_seconds = int(ttl_seconds)
        self.cookie_name = cookie_name

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionCookieService":
        return cls(
            jwt_secret=settings.jwt_secret,
            ttl_seconds=settings.siwe_nonce_ttl_seconds,
            cookie_name=settings.siwe_session_cookie,
        )

    @staticmethod
    def new_session_id() -> str:
        return secrets.token_hex(16)

    def encode(self, session_id: str) -> str:
        return jwt.encode(
            {
                "sid": session_id,
                "typ": SESSION_TYP,
                "exp": int(time.time() + self.ttl_seconds),
            },
            self.jwt_secret,
            algorithm="HS256",
        )

    def decode(self, token: Optional[str]) -> str:
        if not token:
            raise ValueError("missing session cookie")
        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=["HS256"])
        except jwt.PyJWTError as exc:
            raise ValueError("invalid or expired session cookie") from exc
        if payload.get("typ") != SESSION_TYP or not payload.get("sid"):
            raise ValueError("invalid session cookie")
        return str(payload["sid"])

    def session_id_or_none(self, token: Optional[str]) -> Optional[str]:
        try:
            return self.decode(token)
        except ValueError:
            return None


def set_session_cookie(settings: Settings, response: Response, token: str, max_age: int) -> None:
    response.set_cookie(
        settings.siwe_session_cookie,
        token,
        max_age=max(int(max_age), 1),
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite=str(settings.cookie_samesite or "lax").lower(),
        path="/",
    )


def clear_session_cookie(settings: Settings, response: Response) -> None:
    response.set_cookie(
        settings.siwe_session_cookie,
        "",
        max_age=0,
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite=str(settings.cookie_samesite or "lax").lower(),
        path="/",
    )
