"""
Schema Registry - Register and look up EAS schemas.
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import ChainContext, get_schema_registry_address
from .contract import ContractClient
from .errors import EASError
from .models import SchemaRecord, SemanticVersion, TransactionResult, uid_bytes
from .schema import derive_schema_uid, normalize
from .utils import ZERO_ADDRESS, HexLike, checksum, to_hex

logger = logging.getLogger(__name__)


class SchemaRegistry(ContractClient):
    """Client for the SchemaRegistry contract."""

    contract_name = "SchemaRegistry"

    def __init__(self, address: Optional[str] = None, ctx: Optional[ChainContext] = None) -> None:
        super().__init__(address or get_schema_registry_address(), ctx)

    def register(
        self,
        schema: str,
        resolver: HexLike = ZERO_ADDRESS,
        revocable: bool = True,
    ) -> TransactionResult[bytes]:
        """
        Register a schema.

        Args:
            schema: Schema string, e.g. "uint256 value, string name"
            resolver: Resolver contract address (zero for none)
            revocable: Whether attestations under the schema can be revoked

        Returns:
            TransactionResult whose result is the schema UID from the
            Registered event

        Raises:
            MissingEventError: If the receipt has no Registered event
            EASError: If the transaction reverted
        """
        # the contract hashes the string as given
        canonical = normalize(schema)
        result = self._transact("register", canonical, checksum(resolver), bool(revocable))
        event = self._event(result, "Registered")
        result.result = bytes(event["uid"])
        logger.info("Registered schema %s", to_hex(result.result))
        return result

    def get_schema(self, uid: HexLike) -> Optional[SchemaRecord]:
        """
        Look up a schema by UID.

        Returns:
            The SchemaRecord, or None when the UID is not registered

        Raises:
            EASError: If the registry answers with a record for another UID
        """
        wanted = uid_bytes(uid)
        raw = self._call("getSchema", wanted)
        if raw is None:
            return None

        record = SchemaRecord.from_dict(raw)
        if record.is_empty:
            return None
        if record.uid != wanted:
            raise EASError(f"Registry returned schema {to_hex(record.uid)} for {to_hex(wanted)}")
        return record

    def get_schema_by_description(
        self,
        schema: str,
        revocable: bool = True,
        resolver: HexLike = ZERO_ADDRESS,
    ) -> Optional[SchemaRecord]:
        """Look up a schema by the inputs its UID is derived from."""
        return self.get_schema(derive_schema_uid(schema, resolver, revocable))

    def get_version(self) -> SemanticVersion:
        return SemanticVersion.parse(self._call("version"))
