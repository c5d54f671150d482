"""
Schema - Identity and encoding of EAS schemas.

Pure, synchronous helpers with no I/O:
- uid:     canonical schema strings and schema UIDs (packed ABI + Keccak-256)
- encoder: standard ABI encoding of attestation data against a schema
- reflect: schema strings derived from annotated dataclasses
"""

from .encoder import (
    SchemaEncoder,
    SchemaField,
    assert_schema,
    decode_abi_values,
    encode_abi_from_annotated_object,
    encode_abi_values,
    parse_schema,
    split_top_level,
)
from .errors import EncodingError, InvalidSchemaError, SchemaError, SchemaMismatchError
from .reflect import AbiParameter, abi_field, abi_values, reflect_schema_string
from .uid import SchemaDescription, derive_schema_uid, format_schema_uid, normalize

__all__ = [
    "AbiParameter",
    "EncodingError",
    "InvalidSchemaError",
    "SchemaDescription",
    "SchemaEncoder",
    "SchemaError",
    "SchemaField",
    "SchemaMismatchError",
    "abi_field",
    "abi_values",
    "assert_schema",
    "decode_abi_values",
    "derive_schema_uid",
    "encode_abi_from_annotated_object",
    "encode_abi_values",
    "format_schema_uid",
    "normalize",
    "parse_schema",
    "reflect_schema_string",
    "split_top_level",
]
