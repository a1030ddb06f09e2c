# -*- coding: utf-8 -*-

from __future__ import annotations

from eth_utils import is_hex_address, to_checksum_address


def normalize_wallet_id(wallet_id: str | None) -> str:
    """
    Normalize wallet id for comparisons.

    - Lowercasing is enough for equality checks between EVM addresses.
    - Does not validate format; use `is_checksum_address` where the format matters.
    """
    return (wallet_id or "").strip().lower()


def is_checksum_address(address: str) -> bool:
    """True only for a 0x-prefixed 40-hex address in its exact EIP-55 form."""
    if not isinstance(address, str) or not is_hex_address(address):
        return False
    return to_checksum_address(address) == address

