# -*- coding: utf-8 -*-

from __future__ import annotations

from enum import Enum


class FailureReason(str, Enum):
    """
    Stable, machine-distinguishable rejection reasons.

    The value is what goes to the logs and (unless hidden by settings) to the client.
    """

    MALFORMED_MESSAGE = "MalformedMessage"
    NONCE_INVALID_OR_EXPIRED = "NonceInvalidOrExpired"
    NONCE_MISMATCH = "NonceMismatch"
    DOMAIN_MISMATCH = "DomainMismatch"
    CHAIN_MISMATCH = "ChainMismatch"
    MESSAGE_EXPIRED = "MessageExpired"
    MESSAGE_NOT_YET_VALID = "MessageNotYetValid"
    SIGNATURE_INVALID = "SignatureInvalid"
    MISSING_INPUT = "MissingInput"

    def __str__(self) -> str:
        return self.value


class SiweError(Exception):
    reason: FailureReason = FailureReason.MALFORMED_MESSAGE

    def __init__(self, message: str = "", reason: FailureReason | None = None):
        super().__init__(message or str(reason or self.reason))
        if reason is not None:
            self.reason = reason


class MalformedMessage(SiweError):
    reason = FailureReason.MALFORMED_MESSAGE


class SignatureInvalid(SiweError):
    reason = FailureReason.SIGNATURE_INVALID
