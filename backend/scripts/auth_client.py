#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import argparse
import http.cookiejar
import json
import os
import sys
import urllib.error
import urllib.request
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlparse

from signin.message import SiweMessage
from signin.wallet import LocalAccountWallet, WalletError, WalletSigner

DEFAULT_STATEMENT = "Sign in with Ethereum to the app."


class HttpSession:
    """urllib opener that keeps cookies between calls (the nonce session cookie)."""

    def __init__(self, *, origin: Optional[str] = None, timeout: int = 10):
        self.cookies = http.cookiejar.CookieJar()
        self.opener = urllib.request.build_opener(urllib.request.HTTPCookieProcessor(self.cookies))
        self.origin = origin
        self.timeout = timeout

    def json(self, method: str, url: str, payload: Dict[str, Any] | None = None) -> Tuple[int, Any]:
        data = None
        headers = {"Content-Type": "application/json"}
        if self.origin:
            headers["Origin"] = self.origin
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
        req = urllib.request.Request(url, data=data, headers=headers, method=method)
        try:
            with self.opener.open(req, timeout=self.timeout) as resp:
                raw = resp.read().decode("utf-8")
                return resp.status, json.loads(raw) if raw else None
        except urllib.error.HTTPError as e:
            raw = e.read().decode("utf-8")
            try:
                return e.code, json.loads(raw)
            except ValueError:
                return e.code, raw or e.reason


def login(
    api_base: str,
    wallet: WalletSigner,
    *,
    chain_id: int,
    app_origin: Optional[str] = None,
    statement: str = DEFAULT_STATEMENT,
    timeout: int = 10,
) -> Dict[str, Any]:
    """
    SIWE login via GET /auth/nonce + POST /auth/siwe.

    `app_origin` is the origin the message is bound to; without it the API
    base is used, which matches the server's Host fallback.
    Returns the verify response body ({"ok": true, "address", "chainId"}).
    """
    api_base = api_base.rstrip("/")
    origin = (app_origin or api_base).rstrip("/")
    session = HttpSession(origin=app_origin, timeout=timeout)

    st, body = session.json("GET", f"{api_base}/auth/nonce")
    if st >= 400 or not isinstance(body, dict) or not body.get("nonce"):
        raise RuntimeError(f"nonce request failed: {st} {body}")

    message = SiweMessage.create(
        domain=urlparse(origin).netloc,
        address=wallet.address,
        uri=origin,
        chain_id=chain_id,
        nonce=body["nonce"],
        statement=statement,
    ).encode()
    signature = wallet.sign_message(message, wallet.address, chain_id)

    st2, result = session.json("POST", f"{api_base}/auth/siwe", {"message": message, "signature": signature})
    if st2 >= 400:
        raise RuntimeError(f"SIWE verify failed: {st2} {result}")
    return result


def resolve_test_private_key(cli_value: Optional[str] = None) -> Optional[str]:
    return (cli_value or os.getenv("SIWE_TEST_PRIVATE_KEY") or "").strip() or None


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Sign in with Ethereum against a running auth service")
    parser.add_argument("--api-base", default=os.getenv("SIWE_API_BASE", "http://localhost:3001"))
    parser.add_argument("--origin", default=None, help="App origin the message is bound to (sent as Origin)")
    parser.add_argument("--chain-id", type=int, default=int(os.getenv("SIWE_CHAIN_ID", "80002")))
    parser.add_argument("--private-key", default=None, help="Defaults to $SIWE_TEST_PRIVATE_KEY")
    args = parser.parse_args(argv)

    try:
        wallet = LocalAccountWallet(resolve_test_private_key(args.private_key))
        result = login(args.api_base, wallet, chain_id=args.chain_id, app_origin=args.origin)
    except (WalletError, RuntimeError) as exc:
        print(f"login failed: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
