# -*- coding: utf-8 -*-

from __future__ import annotations

from typing import Any, Dict

from fastapi.responses import JSONResponse


def ok(data: Dict[str, Any] | None = None) -> Dict[str, Any]:
    return {"ok": True, **(data or {})}


def fail(error: str) -> Dict[str, Any]:
    return {"ok": False, "error": str(error)}


def fail_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(fail(error), status_code=int(status_code))
