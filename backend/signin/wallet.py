# -*- coding: utf-8 -*-

from __future__ import annotations

from typing import Iterable, Optional

from eth_account import Account
from eth_account.messages import encode_defunct

from common.normalize import normalize_wallet_id


class WalletError(Exception):
    """A wallet refused or could not produce a signature."""


class UserRejected(WalletError):
    pass


class UnsupportedChain(WalletError):
    pass


class ProviderUnavailable(WalletError):
    pass


class WalletSigner:
    """
    The signing oracle seen from the client side: message + account -> signature.

    Implementations raise a WalletError subclass instead of returning a partial result.
    """

    @property
    def address(self) -> str:
        raise NotImplementedError

    def sign_message(self, message: str, address: str, chain_id: int) -> str:
        raise NotImplementedError


class LocalAccountWallet(WalletSigner):
    """personal_sign with an in-process private key (scripts and tests)."""

    def __init__(self, private_key: Optional[str], chain_ids: Optional[Iterable[int]] = None):
        if not private_key:
            raise ProviderUnavailable("no private key configured")
        pk = private_key.strip()
        if pk.startswith("0x"):
            pk = pk[2:]
        self._account = Account.from_key(pk)
        self.chain_ids = {int(c) for c in chain_ids} if chain_ids is not None else None

    @property
    def address(self) -> str:
        return self._account.address

    def sign_message(self, message: str, address: str, chain_id: int) -> str:
        if normalize_wallet_id(address) != normalize_wallet_id(self.address):
            raise UserRejected(f"wallet does not control {address}")
        if self.chain_ids is not None and int(chain_id) not in self.chain_ids:
            raise UnsupportedChain(f"chain {chain_id} is not enabled in this wallet")
        signed = self._account.sign_message(encode_defunct(text=message))
        return "0x" + bytes(signed.signature).hex()
