# -*- coding: utf-8 -*-

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .errors import FailureReason, SiweError
from .message import SiweMessage
from .nonce import NonceRecord
from .signature import SignatureLike, verify_signature
from .timestamps import utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    accepted: bool
    address: Optional[str] = None
    chain_id: Optional[int] = None
    failure_reason: Optional[FailureReason] = None

    @classmethod
    def success(cls, address: str, chain_id: int) -> "VerificationResult":
        return cls(accepted=True, address=address, chain_id=chain_id)

    @classmethod
    def failure(cls, reason: FailureReason) -> "VerificationResult":
        return cls(accepted=False, failure_reason=reason)

    def to_dict(self):
        if self.accepted:
            return {"ok": True, "address": self.address, "chainId": self.chain_id}
        return {"ok": False, "error": str(self.failure_reason)}


class SignatureVerifier:
    """
    Checks a submitted (message, signature) pair against the session's nonce record.

    Order matters:
      1. parse                     -> MalformedMessage
      2. record live               -> NonceInvalidOrExpired (before any signature math)
      3. nonce equality            -> NonceMismatch
      4. domain                    -> DomainMismatch
      5. chain                     -> ChainMismatch
      6. expiration / not-before   -> MessageExpired / MessageNotYetValid
      7. re-encode + recover       -> SignatureInvalid
      8. consume the record        -> NonceInvalidOrExpired if someone else got there first

    The record is consumed only on the accepting path, and the accepting path
    cannot return without consuming it.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or utc_now

    def verify(
        self,
        raw_message: str,
        signature: SignatureLike,
        session_record: Optional[NonceRecord],
        expected_domain: str,
        expected_chain_id: int,
    ) -> VerificationResult:
        now = self.clock()

        try:
            message = SiweMessage.decode(raw_message)
        except SiweError as exc:
            return self._reject(exc.reason, str(exc))

        if session_record is None or not session_record.is_live(now):
            return self._reject(FailureReason.NONCE_INVALID_OR_EXPIRED, "no live nonce for session")

        if message.nonce != session_record.value:
            return self._reject(FailureReason.NONCE_MISMATCH, "message nonce differs from issued nonce")

        if message.domain != expected_domain:
            return self._reject(
                FailureReason.DOMAIN_MISMATCH,
                f"message domain {message.domain!r} != expected {expected_domain!r}",
            )

        if message.chain_id != int(expected_chain_id):
            return self._reject(
                FailureReason.CHAIN_MISMATCH,
                f"message chain {message.chain_id} != expected {expected_chain_id}",
            )

        expiration = message.expiration_datetime()
        if expiration is not None and now >= expiration:
            return self._reject(FailureReason.MESSAGE_EXPIRED, f"expired at {message.expiration_time}")

        not_before = message.not_before_datetime()
        if not_before is not None and now < not_before:
            return self._reject(FailureReason.MESSAGE_NOT_YET_VALID, f"not valid before {message.not_before}")

        # What the wallet signed must be exactly what this encoder produces.
        signed_text = message.encode()
        if signed_text != raw_message:
            return self._reject(FailureReason.SIGNATURE_INVALID, "message is not in canonical form")

        try:
            verify_signature(signed_text, signature, message.address)
        except SiweError as exc:
            return self._reject(exc.reason, str(exc))

        if not session_record.consume(now):
            return self._reject(FailureReason.NONCE_INVALID_OR_EXPIRED, "nonce consumed concurrently")

        logger.info("SIWE accepted: address=%s chain_id=%s", message.address, message.chain_id)
        return VerificationResult.success(message.address, message.chain_id)

    @staticmethod
    def _reject(reason: FailureReason, detail: str) -> VerificationResult:
        logger.warning("SIWE rejected: %s (%s)", reason, detail)
        return VerificationResult.failure(reason)
