"""
Schema Encoder - ABI-encode attestation data against an EAS schema string.

Attestation payloads use the standard (head/tail, 32-byte word) ABI encoding
so any consumer can decode them on-chain. Schema UIDs use the packed
encoding instead; see ``uid.py``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from eth_abi import decode, encode, is_encodable_type
from eth_abi.exceptions import ABITypeError, DecodingError, ParseError
from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_abi.grammar import normalize as normalize_type

from .errors import EncodingError, InvalidSchemaError, SchemaMismatchError
from .reflect import abi_values, reflect_schema_string
from .uid import normalize

_ARRAY_SUFFIX = re.compile(r"^(\[\d*\])*")


@dataclass(frozen=True)
class SchemaField:
    type: str  # resolved ABI type, e.g. "uint256" or "(uint8,bool)[]"
    name: str  # may be empty in signature form


def split_top_level(schema: str, separator: str = ",") -> list[str]:
    """Split on ``separator`` outside of parentheses."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in schema:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                raise InvalidSchemaError(f"Unbalanced parentheses in schema: {schema!r}")
        if ch == separator and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    if depth != 0:
        raise InvalidSchemaError(f"Unbalanced parentheses in schema: {schema!r}")
    parts.append("".join(current))
    return parts


def _closing_paren(text: str, start: int) -> int:
    depth = 0
    for i in range(start, len(text)):
        if text[i] == "(":
            depth += 1
        elif text[i] == ")":
            depth -= 1
            if depth == 0:
                return i
    raise InvalidSchemaError(f"Unbalanced parentheses in schema: {text!r}")


def _parse_field(segment: str) -> SchemaField:
    text = segment.strip()
    if not text:
        raise InvalidSchemaError("Schema contains an empty field.")

    lowered = text.lower()
    if lowered.startswith("(") or lowered.startswith("tuple("):
        open_at = text.index("(")
        close_at = _closing_paren(text, open_at)
        inner = text[open_at + 1 : close_at]
        if not inner.strip():
            raise InvalidSchemaError(f"Tuple declares no components: {text!r}")
        components = _parse_fields(inner)
        rest = text[close_at + 1 :]
        suffix = _ARRAY_SUFFIX.match(rest.lstrip()).group(0)
        name = rest.lstrip()[len(suffix) :].strip()
        abi_type = "(" + ",".join(c.type for c in components) + ")" + suffix
        return SchemaField(abi_type, name)

    tokens = text.split(None, 1)
    abi_type = normalize_type(tokens[0].lower())
    name = tokens[1].strip() if len(tokens) > 1 else ""
    return SchemaField(abi_type, name)


def _parse_fields(schema: str) -> list[SchemaField]:
    return [_parse_field(segment) for segment in split_top_level(schema)]


def parse_schema(schema: str) -> list[SchemaField]:
    """
    Parse a schema string into resolved ABI fields.

    Accepts both the named form ("uint256 id, tuple(uint8 a, bool b) x")
    and the signature form ("uint256,(uint8,bool)").

    Raises:
        InvalidSchemaError: If the schema is empty, malformed, or names a
            type the ABI codec cannot encode.
    """
    return _checked(_parse_fields(normalize(schema)), schema)


def _checked(fields: list[SchemaField], schema: str) -> list[SchemaField]:
    for f in fields:
        try:
            supported = is_encodable_type(f.type)
        except (ABITypeError, ParseError):
            supported = False
        if not supported:
            raise InvalidSchemaError(f"Unsupported ABI type {f.type!r} in schema {schema!r}")
    return fields


def _encode(types: list[str], values: Sequence[Any]) -> bytes:
    try:
        return encode(types, values)
    except (AbiEncodingError, TypeError, ValueError, OverflowError) as exc:
        raise EncodingError(f"Cannot encode values as ({','.join(types)}): {exc}") from exc


def encode_abi_values(schema: str, values: Iterable[Any]) -> bytes:
    """
    Encode positional values against a schema string.

    Args:
        schema: Schema string, e.g. "uint256 value, string name"
        values: One value per schema field, e.g. [38, "Dave"]

    Returns:
        Standard ABI encoding of the values

    Raises:
        InvalidSchemaError: If the schema cannot be parsed
        SchemaMismatchError: If the value count differs from the field count
        EncodingError: If a value does not fit its declared type
    """
    fields = parse_schema(schema)
    types = [f.type for f in fields]
    values = list(values)

    if len(types) != len(values):
        raise SchemaMismatchError(
            f"The number of values ({len(values)}) does not match the number of "
            f"types ({len(types)}) in the schema ({schema})",
            expected_schema=schema,
            actual_schema=", ".join(types),
            expected_count=len(types),
            actual_count=len(values),
        )

    return _encode(types, values)


def assert_schema(schema: str, obj: Any) -> None:
    """Raise SchemaMismatchError unless ``obj`` reflects to exactly ``schema``."""
    actual = reflect_schema_string(obj, include_names=True)
    if schema != actual:
        raise SchemaMismatchError(
            f"Schema mismatch: expected '{schema}', object declares '{actual}'",
            expected_schema=schema,
            actual_schema=actual,
        )


def encode_abi_from_annotated_object(schema: str, obj: Any) -> bytes:
    """
    Encode an annotated dataclass instance after a strict shape check.

    The object's reflected schema (types, names, order and tuple nesting)
    must equal ``schema`` character for character.
    """
    assert_schema(schema, obj)
    # not normalized: a lone tuple field reflects to "(uint8,bool)"
    signature = reflect_schema_string(obj, include_names=False)
    types = [f.type for f in _checked(_parse_fields(signature), signature)]
    try:
        values = abi_values(obj)
    except TypeError as exc:
        # None or a non-dataclass in a tuple field, None in an array field
        raise EncodingError(f"Cannot read values for schema ({schema}): {exc}") from exc
    return _encode(types, values)


def decode_abi_values(schema: str, data: bytes) -> dict[str, Any]:
    """
    Decode ABI data against a schema string.

    Returns:
        Mapping of field name to value. Unnamed fields are keyed by position.
    """
    fields = parse_schema(schema)
    try:
        values = decode([f.type for f in fields], bytes(data))
    except DecodingError as exc:
        raise EncodingError(f"Cannot decode data for schema ({schema}): {exc}") from exc
    return {(f.name or str(i)): v for i, (f, v) in enumerate(zip(fields, values))}


class SchemaEncoder:
    """Encodes data for one schema string, e.g. "uint256 value, string name"."""

    def __init__(self, schema: str) -> None:
        self.schema = schema

    @property
    def fields(self) -> list[SchemaField]:
        return parse_schema(self.schema)

    @property
    def types(self) -> list[str]:
        return [f.type for f in self.fields]

    def encode(self, values: Iterable[Any]) -> bytes:
        return encode_abi_values(self.schema, values)

    def encode_object(self, obj: Any) -> bytes:
        return encode_abi_from_annotated_object(self.schema, obj)

    def decode(self, data: bytes) -> dict[str, Any]:
        return decode_abi_values(self.schema, data)

    def __repr__(self) -> str:
        return f"SchemaEncoder({self.schema!r})"
