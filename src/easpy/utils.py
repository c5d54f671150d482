from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union

from eth_utils import is_address, to_canonical_address, to_checksum_address

ZERO_ADDRESS = "0x" + "00" * 20
ZERO_BYTES32 = b"\x00" * 32

HexLike = Union[str, bytes, bytearray]


def hex_to_bytes(value: HexLike) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    s = str(value)
    s = s[2:] if s.startswith(("0x", "0X")) else s
    if len(s) % 2:
        raise ValueError(f"Hex string must have an even number of characters: {value!r}")
    try:
        return bytes.fromhex(s)
    except ValueError as exc:
        raise ValueError(f"Invalid hex string: {value!r}") from exc


def to_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def to_bytes32(value: Optional[HexLike]) -> bytes:
    """Coerce a 0x-hex string or bytes into exactly 32 bytes.

    ``None`` and empty input map to the zero word.
    """
    if value is None:
        return ZERO_BYTES32
    raw = hex_to_bytes(value)
    if not raw:
        return ZERO_BYTES32
    if len(raw) != 32:
        raise ValueError(f"Expected 32 bytes, got {len(raw)}")
    return raw


def address_bytes(value: Optional[HexLike]) -> bytes:
    """Return the 20 raw bytes of an address; ``None`` is the zero address."""
    if value is None:
        return b"\x00" * 20
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 20:
            raise ValueError(f"Address must be 20 bytes, got {len(value)}")
        return bytes(value)
    if not is_address(value):
        raise ValueError(f"Invalid address: {value!r}")
    return to_canonical_address(value)


def checksum(value: Optional[HexLike]) -> str:
    return to_checksum_address(address_bytes(value))


def from_unix(seconds: int) -> Optional[datetime]:
    if not seconds:
        return None
    return datetime.fromtimestamp(int(seconds), tz=timezone.utc)


def to_unix(value: Optional[datetime]) -> int:
    if value is None:
        return 0
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())
