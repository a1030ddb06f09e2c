# -*- coding: utf-8 -*-

from __future__ import annotations

from typing import Union

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import decode_hex

from common.normalize import normalize_wallet_id

from .errors import SignatureInvalid

SIGNATURE_LENGTH = 65

SignatureLike = Union[str, bytes, bytearray]


def decode_signature(signature: SignatureLike) -> bytes:
    """Accept 0x-hex (or bare hex) text or raw bytes; the result is always 65 bytes (r || s || v)."""
    if isinstance(signature, (bytes, bytearray)):
        raw = bytes(signature)
    elif isinstance(signature, str):
        try:
            raw = decode_hex(signature.strip())
        except (ValueError, TypeError) as exc:
            raise SignatureInvalid("signature is not valid hex") from exc
    else:
        raise SignatureInvalid(f"unsupported signature type: {type(signature).__name__}")
    if len(raw) != SIGNATURE_LENGTH:
        raise SignatureInvalid(f"signature must be {SIGNATURE_LENGTH} bytes, got {len(raw)}")
    return raw


def recover_address(message_text: str, signature: SignatureLike) -> str:
    """
    Recover the EIP-55 address that produced `signature` over `message_text`
    with personal_sign (EIP-191 version 0x45).
    """
    raw = decode_signature(signature)
    try:
        return Account.recover_message(encode_defunct(text=message_text), signature=raw)
    except Exception as exc:
        raise SignatureInvalid("signature recovery failed") from exc


def verify_signature(message_text: str, signature: SignatureLike, address: str) -> str:
    """Return the recovered address when it matches `address` (case-insensitive); raise otherwise."""
    recovered = recover_address(message_text, signature)
    if normalize_wallet_id(recovered) != normalize_wallet_id(address):
        raise SignatureInvalid("recovered address does not match the message address")
    return recovered
