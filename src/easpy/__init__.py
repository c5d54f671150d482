__version__ = "0.1.0"

__all__ = [
    # Schema core
    "SchemaDescription",
    "SchemaEncoder",
    "abi_field",
    "derive_schema_uid",
    "encode_abi_from_annotated_object",
    "encode_abi_values",
    "format_schema_uid",
    "normalize",
    "reflect_schema_string",
    # Schema errors
    "SchemaError",
    "InvalidSchemaError",
    "SchemaMismatchError",
    "EncodingError",
    # Contracts
    "EAS",
    "SchemaRegistry",
    "ChainContext",
    # Models
    "Attestation",
    "AttestationRequest",
    "AttestationRequestData",
    "RevocationRequest",
    "RevocationRequestData",
    "SchemaRecord",
    "SemanticVersion",
    "TransactionResult",
    # Facade errors
    "EASError",
    "MissingEventError",
    # IPFS
    "decode_qm_hash",
    "encode_qm_hash",
    "is_cid",
]

from .schema import (
    EncodingError,
    InvalidSchemaError,
    SchemaDescription,
    SchemaEncoder,
    SchemaError,
    SchemaMismatchError,
    abi_field,
    derive_schema_uid,
    encode_abi_from_annotated_object,
    encode_abi_values,
    format_schema_uid,
    normalize,
    reflect_schema_string,
)
from .config import ChainContext
from .eas import EAS
from .errors import EASError, MissingEventError
from .ipfs import decode_qm_hash, encode_qm_hash, is_cid
from .models import (
    Attestation,
    AttestationRequest,
    AttestationRequestData,
    RevocationRequest,
    RevocationRequestData,
    SchemaRecord,
    SemanticVersion,
    TransactionResult,
)
from .registry import SchemaRegistry
