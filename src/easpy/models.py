"""
Models - Request and result types for the EAS and SchemaRegistry contracts.

Requests convert to the tuple layout the contracts expect via ``as_abi()``.
Results are built from the dicts produced by named ABI decoding.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from .utils import (
    ZERO_ADDRESS,
    ZERO_BYTES32,
    HexLike,
    checksum,
    from_unix,
    hex_to_bytes,
    to_bytes32,
    to_hex,
    to_unix,
)

T = TypeVar("T")

_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)(?:[-+].*)?$")


@dataclass(frozen=True)
class AttestationRequestData:
    """
    Payload of a single attestation.

    Attributes:
        recipient: Address the attestation is about (zero address for none)
        data: ABI-encoded attestation data for the schema
        expiration_time: When the attestation expires; None never expires
        revocable: Whether the attestation may be revoked later
        ref_uid: UID of a referenced attestation (zero for none)
        value: ETH value in wei forwarded to the schema resolver
    """
    recipient: str = ZERO_ADDRESS
    data: bytes = b""
    expiration_time: Optional[datetime] = None
    revocable: bool = True
    ref_uid: HexLike = ZERO_BYTES32
    value: int = 0

    def as_abi(self) -> tuple:
        return (
            checksum(self.recipient),
            to_unix(self.expiration_time),
            bool(self.revocable),
            to_bytes32(self.ref_uid),
            bytes(self.data),
            int(self.value),
        )


@dataclass(frozen=True)
class AttestationRequest:
    schema: HexLike
    data: AttestationRequestData

    def as_abi(self) -> tuple:
        return (to_bytes32(self.schema), self.data.as_abi())


@dataclass(frozen=True)
class RevocationRequestData:
    uid: HexLike
    value: int = 0

    def as_abi(self) -> tuple:
        return (to_bytes32(self.uid), int(self.value))


@dataclass(frozen=True)
class RevocationRequest:
    schema: HexLike
    data: RevocationRequestData

    def as_abi(self) -> tuple:
        return (to_bytes32(self.schema), self.data.as_abi())


@dataclass(frozen=True)
class Attestation:
    """An attestation as stored by the EAS contract."""
    uid: bytes
    schema: bytes
    time: Optional[datetime]
    expiration_time: Optional[datetime]
    revocation_time: Optional[datetime]
    ref_uid: bytes
    recipient: str
    attester: str
    revocable: bool
    data: bytes

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Attestation":
        return cls(
            uid=bytes(raw["uid"]),
            schema=bytes(raw["schema"]),
            time=from_unix(raw["time"]),
            expiration_time=from_unix(raw["expirationTime"]),
            revocation_time=from_unix(raw["revocationTime"]),
            ref_uid=bytes(raw["refUID"]),
            recipient=checksum(raw["recipient"]),
            attester=checksum(raw["attester"]),
            revocable=bool(raw["revocable"]),
            data=bytes(raw["data"]),
        )

    @property
    def is_revoked(self) -> bool:
        return self.revocation_time is not None

    @property
    def uid_hex(self) -> str:
        return to_hex(self.uid)

    def to_dict(self) -> dict[str, Any]:
        def _iso(value: Optional[datetime]) -> Optional[str]:
            return value.isoformat() if value else None

        return {
            "uid": to_hex(self.uid),
            "schema": to_hex(self.schema),
            "time": _iso(self.time),
            "expirationTime": _iso(self.expiration_time),
            "revocationTime": _iso(self.revocation_time),
            "refUID": to_hex(self.ref_uid),
            "recipient": self.recipient,
            "attester": self.attester,
            "revocable": self.revocable,
            "data": to_hex(self.data),
        }


@dataclass(frozen=True)
class SchemaRecord:
    """A schema as stored by the SchemaRegistry contract."""
    uid: bytes
    resolver: str
    revocable: bool
    schema: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "SchemaRecord":
        return cls(
            uid=bytes(raw["uid"]),
            resolver=checksum(raw["resolver"]),
            revocable=bool(raw["revocable"]),
            schema=raw["schema"],
        )

    @property
    def is_empty(self) -> bool:
        # unknown UIDs come back as an all-zero record
        return self.uid == ZERO_BYTES32 and not self.schema

    def to_dict(self) -> dict[str, Any]:
        return {
            "uid": to_hex(self.uid),
            "resolver": self.resolver,
            "revocable": self.revocable,
            "schema": self.schema,
        }


@dataclass(frozen=True, order=True)
class SemanticVersion:
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> "SemanticVersion":
        """
        Parse a contract ``version()`` string such as "1.3.0".

        Raises:
            ValueError: If the text is not a semantic version
        """
        match = _VERSION_RE.match(text.strip())
        if not match:
            raise ValueError(f"Not a semantic version: {text!r}")
        return cls(*(int(part) for part in match.groups()))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass
class TransactionResult(Generic[T]):
    """Outcome of a mined transaction and the value it produced."""
    tx_hash: str
    receipt: dict[str, Any] = field(default_factory=dict)
    result: Optional[T] = None

    @property
    def success(self) -> bool:
        status = self.receipt.get("status", "0x0")
        if isinstance(status, str):
            status = int(status, 16)
        return status == 1

    @property
    def block_number(self) -> Optional[int]:
        block = self.receipt.get("blockNumber")
        if block is None:
            return None
        return int(block, 16) if isinstance(block, str) else int(block)


def uid_bytes(value: HexLike) -> bytes:
    """Coerce a UID given as hex or bytes to 32 raw bytes."""
    raw = hex_to_bytes(value)
    if len(raw) != 32:
        raise ValueError(f"UID must be 32 bytes, got {len(raw)}")
    return raw

