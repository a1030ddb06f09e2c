# -*- coding: utf-8 -*-

from __future__ import annotations

from fastapi import APIRouter

from api.auth.envelope import ok

router = APIRouter(tags=["health"])


@router.get("/ping")
def ping():
    return ok()
