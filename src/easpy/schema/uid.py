"""
Schema UID - Content identifiers for EAS schemas.

The SchemaRegistry contract identifies a schema by

    keccak256(abi.encodePacked(schema, resolver, revocable))

so two registrations that share the canonical schema string, resolver and
revocable flag always resolve to the same UID.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_abi.packed import encode_packed
from eth_utils import keccak

from ..utils import ZERO_ADDRESS, HexLike, address_bytes, to_hex
from .errors import EncodingError, InvalidSchemaError

_UID_TYPES = ["string", "address", "bool"]


def normalize(raw: Optional[str]) -> str:
    """
    Canonicalize a schema declaration.

    Trims surrounding whitespace and strips exactly one outer pair of
    parentheses. Nested tuple parentheses are left untouched.

    Raises:
        InvalidSchemaError: If the schema is empty.
    """
    if raw is None or not str(raw).strip():
        raise InvalidSchemaError("Schema cannot be empty; it must declare at least one field.")

    schema = str(raw).strip()
    if _is_wrapped(schema):
        schema = schema[1:-1].strip()

    if not schema:
        raise InvalidSchemaError("Schema cannot be empty; it must declare at least one field.")
    return schema


def _is_wrapped(schema: str) -> bool:
    # "(a),(b)" starts and ends with parens that do not pair up
    if not (schema.startswith("(") and schema.endswith(")")):
        return False
    depth = 0
    for i, ch in enumerate(schema):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i == len(schema) - 1
    return False


def derive_schema_uid(
    schema: str,
    resolver: Optional[HexLike] = ZERO_ADDRESS,
    revocable: bool = True,
) -> bytes:
    """
    Compute the 32-byte schema UID.

    Args:
        schema: Schema string, e.g. "uint256 value, string name"
        resolver: Resolver address (0x-hex or 20 bytes), zero address if None
        revocable: Whether attestations under the schema can be revoked

    Returns:
        The UID as 32 raw bytes

    Raises:
        InvalidSchemaError: If the schema is empty
        EncodingError: If the resolver is not a valid address
    """
    canonical = normalize(schema)
    try:
        resolver_raw = address_bytes(resolver)
        packed = encode_packed(_UID_TYPES, [canonical, resolver_raw, bool(revocable)])
    except (ValueError, AbiEncodingError) as exc:
        raise EncodingError(f"Cannot encode schema UID inputs: {exc}") from exc

    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(packed)


def format_schema_uid(
    schema: str,
    resolver: Optional[HexLike] = ZERO_ADDRESS,
    revocable: bool = True,
) -> str:
    """Schema UID as 0x-prefixed lowercase hex."""
    return to_hex(derive_schema_uid(schema, resolver, revocable))


@dataclass(frozen=True)
class SchemaDescription:
    schema: str
    resolver: str = ZERO_ADDRESS
    revocable: bool = True

    @property
    def canonical(self) -> str:
        return normalize(self.schema)

    @property
    def uid(self) -> bytes:
        return derive_schema_uid(self.schema, self.resolver, self.revocable)
