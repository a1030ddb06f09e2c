# -*- coding: utf-8 -*-

"""
EIP-4361 message codec.

The text produced by `encode()` is what the wallet signs, so it must be
byte-for-byte stable: LF line endings, fixed field order, optional fields
omitted entirely. Timestamps stay as the exact strings that were signed.

    <domain> wants you to sign in with your Ethereum account:
    <address>

    <statement>

    URI: <uri>
    Version: 1
    Chain ID: <chainId>
    Nonce: <nonce>
    Issued At: <issuedAt>
    [Expiration Time: <expirationTime>]
    [Not Before: <notBefore>]
    [Request ID: <requestId>]
    [Resources:
    - <resource>]

Without a statement the statement line and one blank line go away, leaving
three line feeds between the address and `URI:`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence
from urllib.parse import urlparse

from common.normalize import is_checksum_address

from .errors import MalformedMessage
from .timestamps import format_timestamp, parse_timestamp, utc_now

SIWE_VERSION = "1"

HEADER_SUFFIX = " wants you to sign in with your Ethereum account:"

_DOMAIN_RE = re.compile(r"[^\s/?#@]+")
_NONCE_RE = re.compile(r"[A-Za-z0-9]{8,}")
_CHAIN_ID_RE = re.compile(r"[1-9][0-9]*")

# (attribute, label, required)
_TAGGED_FIELDS = (
    ("uri", "URI", True),
    ("version", "Version", True),
    ("chain_id", "Chain ID", True),
    ("nonce", "Nonce", True),
    ("issued_at", "Issued At", True),
    ("expiration_time", "Expiration Time", False),
    ("not_before", "Not Before", False),
    ("request_id", "Request ID", False),
)

RESOURCES_LABEL = "Resources:"


@dataclass
class SiweMessage:
    domain: str
    address: str
    uri: str
    version: str
    chain_id: int
    nonce: str
    issued_at: str
    statement: Optional[str] = None
    expiration_time: Optional[str] = None
    not_before: Optional[str] = None
    request_id: Optional[str] = None
    resources: Optional[List[str]] = None

    @classmethod
    def create(
        cls,
        *,
        domain: str,
        address: str,
        uri: str,
        chain_id: int,
        nonce: str,
        statement: Optional[str] = None,
        issued_at: Optional[datetime] = None,
        expiration_time: Optional[datetime] = None,
        not_before: Optional[datetime] = None,
        request_id: Optional[str] = None,
        resources: Optional[Sequence[str]] = None,
    ) -> "SiweMessage":
        """Client-side builder: fills the version literal and stamps `issued_at` with now (UTC)."""
        message = cls(
            domain=domain,
            address=address,
            uri=uri,
            version=SIWE_VERSION,
            chain_id=int(chain_id),
            nonce=nonce,
            issued_at=format_timestamp(issued_at or utc_now()),
            statement=statement or None,
            expiration_time=format_timestamp(expiration_time) if expiration_time else None,
            not_before=format_timestamp(not_before) if not_before else None,
            request_id=request_id,
            resources=list(resources) if resources is not None else None,
        )
        message.validate()
        return message

    # ---------- encode ----------
    def encode(self) -> str:
        lines = [f"{self.domain}{HEADER_SUFFIX}", self.address, ""]
        if self.statement:
            lines.extend([self.statement, ""])
        else:
            lines.append("")
        for attr, label, _required in _TAGGED_FIELDS:
            value = getattr(self, attr)
            if value is None:
                continue
            lines.append(f"{label}: {value}")
        if self.resources is not None:
            lines.append(RESOURCES_LABEL)
            lines.extend(f"- {resource}" for resource in self.resources)
        return "\n".join(lines)

    # ---------- decode ----------
    @classmethod
    def decode(cls, text: str) -> "SiweMessage":
        if not isinstance(text, str) or not text:
            raise MalformedMessage("empty message")
        if "\r" in text:
            raise MalformedMessage("message must use LF line endings")

        lines = text.split("\n")
        if len(lines) < 4 or not lines[0].endswith(HEADER_SUFFIX):
            raise MalformedMessage("missing SIWE header line")

        domain = lines[0][: -len(HEADER_SUFFIX)]
        address = lines[1]
        if lines[2] != "":
            raise MalformedMessage("expected blank line after address")

        statement: Optional[str] = None
        pos = 4
        if lines[3] != "":
            statement = lines[3]
            if len(lines) < 5 or lines[4] != "":
                raise MalformedMessage("expected blank line after statement")
            pos = 5

        fields = {}
        for attr, label, required in _TAGGED_FIELDS:
            prefix = f"{label}: "
            if pos < len(lines) and lines[pos].startswith(prefix):
                fields[attr] = lines[pos][len(prefix):]
                pos += 1
            elif required:
                raise MalformedMessage(f"missing '{label}' field")

        resources: Optional[List[str]] = None
        if pos < len(lines) and lines[pos] == RESOURCES_LABEL:
            resources = []
            pos += 1
            while pos < len(lines) and lines[pos].startswith("- "):
                resources.append(lines[pos][2:])
                pos += 1

        if pos != len(lines):
            raise MalformedMessage(f"unexpected content at line {pos + 1}")

        chain_id = fields["chain_id"]
        if not _CHAIN_ID_RE.fullmatch(chain_id):
            raise MalformedMessage(f"invalid chain id: {chain_id!r}")

        message = cls(
            domain=domain,
            address=address,
            uri=fields["uri"],
            version=fields["version"],
            chain_id=int(chain_id),
            nonce=fields["nonce"],
            issued_at=fields["issued_at"],
            statement=statement,
            expiration_time=fields.get("expiration_time"),
            not_before=fields.get("not_before"),
            request_id=fields.get("request_id"),
            resources=resources,
        )
        message.validate()
        return message

    # ---------- validation ----------
    def validate(self) -> None:
        if not self.domain or not _DOMAIN_RE.fullmatch(self.domain):
            raise MalformedMessage(f"invalid domain: {self.domain!r}")
        if not is_checksum_address(self.address):
            raise MalformedMessage(f"address is not EIP-55 checksummed: {self.address!r}")
        if self.statement is not None and not _is_single_line(self.statement):
            raise MalformedMessage("statement must be a single non-empty line")
        if not _is_uri(self.uri):
            raise MalformedMessage(f"invalid URI: {self.uri!r}")
        if self.version != SIWE_VERSION:
            raise MalformedMessage(f"unsupported version: {self.version!r}")
        if isinstance(self.chain_id, bool) or not isinstance(self.chain_id, int) or self.chain_id <= 0:
            raise MalformedMessage(f"invalid chain id: {self.chain_id!r}")
        if not isinstance(self.nonce, str) or not _NONCE_RE.fullmatch(self.nonce):
            raise MalformedMessage("nonce must be at least 8 alphanumeric characters")
        for attr in ("issued_at", "expiration_time", "not_before"):
            value = getattr(self, attr)
            if value is None and attr != "issued_at":
                continue
            try:
                parse_timestamp(value)
            except (TypeError, ValueError) as exc:
                raise MalformedMessage(f"invalid {attr}: {value!r}") from exc
        if self.request_id is not None and not _is_single_line(self.request_id):
            raise MalformedMessage("request id must be a single non-empty line")
        for resource in self.resources or []:
            if not _is_uri(resource):
                raise MalformedMessage(f"invalid resource URI: {resource!r}")

    # ---------- timing ----------
    def expiration_datetime(self) -> Optional[datetime]:
        return parse_timestamp(self.expiration_time) if self.expiration_time else None

    def not_before_datetime(self) -> Optional[datetime]:
        return parse_timestamp(self.not_before) if self.not_before else None


def encode_message(message: SiweMessage) -> str:
    return message.encode()


def decode_message(text: str) -> SiweMessage:
    return SiweMessage.decode(text)


def _is_uri(value: Optional[str]) -> bool:
    if not isinstance(value, str) or not value or any(ch.isspace() for ch in value):
        return False
    parsed = urlparse(value)
    return bool(parsed.scheme) and bool(parsed.netloc or parsed.path)


def _is_single_line(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(value) and "\n" not in value and "\r" not in value
