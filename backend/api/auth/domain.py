# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

from fastapi import Request

logger = logging.getLogger(__name__)


def host_from_origin(origin: Optional[str]) -> Optional[str]:
    """'http://localhost:5173' -> 'localhost:5173'; None for 'null' or garbage."""
    origin = (origin or "").strip()
    if not origin or origin == "null":
        return None
    parsed = urlparse(origin)
    if not parsed.scheme or not parsed.netloc:
        return None
    return parsed.netloc


def resolve_expected_domain(request: Request, configured: str = "") -> str:
    """
    Domain the SIWE message must be bound to.

    1) a configured domain wins;
    2) else the Origin header (browsers always send it on this POST);
    3) else the Host header, for non-browser callers.

    The Host fallback is weaker: a caller that controls the Host header picks
    the expected domain itself. Set SIWE_DOMAIN in deployments that care.
    """
    if configured:
        return configured

    origin_host = host_from_origin(request.headers.get("origin"))
    if origin_host:
        return origin_host

    host = (request.headers.get("host") or "").strip()
    logger.info("no Origin header, binding SIWE domain to Host %r", host)
    return host
