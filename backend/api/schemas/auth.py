# -*- coding: utf-8 -*-

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class NonceResponse(BaseModel):
    nonce: str = Field(..., description="Single-use challenge, 32 hex chars")
    issuedAt: str = Field(..., description="ISO-8601 (UTC)")
    expiresAt: str = Field(..., description="ISO-8601 (UTC)")


class SiweVerifyRequest(BaseModel):
    # Optional here so that a missing field is answered with 400 MissingInput, not 422.
    message: Optional[str] = Field(None, description="EIP-4361 message exactly as signed")
    signature: Optional[str] = Field(None, description="personal_sign signature (0x...)")


class SiweVerifyResponse(BaseModel):
    ok: bool
    address: Optional[str] = None
    chainId: Optional[int] = None
    error: Optional[str] = None
