"""
EAS - Attest, revoke and timestamp through the Ethereum Attestation Service.

Write operations wait for the transaction receipt and read their result
from the event the contract emits. Times are timezone-aware UTC datetimes;
the contract's 0 ("never" / "not set") maps to None.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from .config import ChainContext, get_eas_address
from .contract import ContractClient
from .errors import EASError
from .models import (
    Attestation,
    AttestationRequest,
    AttestationRequestData,
    RevocationRequest,
    SemanticVersion,
    TransactionResult,
    uid_bytes,
)
from .schema import derive_schema_uid, encode_abi_from_annotated_object, encode_abi_values
from .utils import ZERO_ADDRESS, ZERO_BYTES32, HexLike, checksum, from_unix, to_bytes32, to_hex

logger = logging.getLogger(__name__)


class EAS(ContractClient):
    """Client for the EAS contract."""

    contract_name = "EAS"

    def __init__(self, address: Optional[str] = None, ctx: Optional[ChainContext] = None) -> None:
        super().__init__(address or get_eas_address(), ctx)

    # ============ Transactions ============

    def attest(self, request: AttestationRequest) -> TransactionResult[bytes]:
        """
        Submit an attestation.

        Returns:
            TransactionResult whose result is the new attestation UID

        Raises:
            MissingEventError: If the receipt has no Attested event
            EASError: If the transaction reverted
        """
        result = self._transact("attest", request.as_abi(), value=request.data.value)
        event = self._event(result, "Attested")
        result.result = bytes(event["uid"])
        logger.info("Attested %s under schema %s", to_hex(result.result), to_hex(to_bytes32(request.schema)))
        return result

    def attest_values(
        self,
        schema: str,
        values: Sequence[Any],
        recipient: HexLike = ZERO_ADDRESS,
        resolver: HexLike = ZERO_ADDRESS,
        revocable: bool = True,
        expiration_time: Optional[datetime] = None,
        ref_uid: HexLike = ZERO_BYTES32,
        value: int = 0,
    ) -> TransactionResult[bytes]:
        """
        Encode positional values against ``schema`` and attest them.

        The schema UID is derived from ``schema``, ``resolver`` and
        ``revocable``; the schema must already be registered.
        """
        data = encode_abi_values(schema, values)
        return self._attest_encoded(
            schema, data, recipient, resolver, revocable, expiration_time, ref_uid, value
        )

    def attest_object(
        self,
        schema: str,
        obj: Any,
        recipient: HexLike = ZERO_ADDRESS,
        resolver: HexLike = ZERO_ADDRESS,
        revocable: bool = True,
        expiration_time: Optional[datetime] = None,
        ref_uid: HexLike = ZERO_BYTES32,
        value: int = 0,
    ) -> TransactionResult[bytes]:
        """
        Encode an annotated dataclass instance against ``schema`` and attest it.

        Raises:
            SchemaMismatchError: If the object's declared shape is not ``schema``
        """
        data = encode_abi_from_annotated_object(schema, obj)
        return self._attest_encoded(
            schema, data, recipient, resolver, revocable, expiration_time, ref_uid, value
        )

    def _attest_encoded(
        self,
        schema: str,
        data: bytes,
        recipient: HexLike,
        resolver: HexLike,
        revocable: bool,
        expiration_time: Optional[datetime],
        ref_uid: HexLike,
        value: int,
    ) -> TransactionResult[bytes]:
        request = AttestationRequest(
            schema=derive_schema_uid(schema, resolver, revocable),
            data=AttestationRequestData(
                recipient=checksum(recipient),
                data=data,
                expiration_time=expiration_time,
                revocable=revocable,
                ref_uid=ref_uid,
                value=value,
            ),
        )
        return self.attest(request)

    def revoke(self, request: RevocationRequest) -> TransactionResult[str]:
        """
        Revoke an attestation.

        Returns:
            TransactionResult whose result is the transaction hash

        Raises:
            MissingEventError: If the receipt has no Revoked event
        """
        result = self._transact("revoke", request.as_abi(), value=request.data.value)
        self._event(result, "Revoked")
        result.result = result.tx_hash
        logger.info("Revoked %s", to_hex(to_bytes32(request.data.uid)))
        return result

    def timestamp(self, data: HexLike) -> TransactionResult[datetime]:
        """Timestamp 32 bytes of data; the result is the block time."""
        return self._timestamped(self._transact("timestamp", to_bytes32(data)))

    def multi_timestamp(self, data: Sequence[HexLike]) -> TransactionResult[datetime]:
        """Timestamp several 32-byte values in one transaction."""
        if not data:
            raise ValueError("multi_timestamp needs at least one value")
        return self._timestamped(self._transact("multiTimestamp", [to_bytes32(d) for d in data]))

    def _timestamped(self, result: TransactionResult) -> TransactionResult[datetime]:
        event = self._event(result, "Timestamped")
        result.result = from_unix(event["timestamp"])
        return result

    def revoke_offchain(self, data: HexLike) -> TransactionResult[Optional[datetime]]:
        """Record the off-chain revocation of ``data`` by the signing account."""
        result = self._transact("revokeOffchain", to_bytes32(data))
        result.result = self.get_revoke_offchain(self.ctx.sender, data)
        return result

    def multi_revoke_offchain(self, data: Sequence[HexLike]) -> TransactionResult[Optional[datetime]]:
        """
        Record several off-chain revocations in one transaction.

        The result is the revocation time of the first value.
        """
        if not data:
            raise ValueError("multi_revoke_offchain needs at least one value")
        result = self._transact("multiRevokeOffchain", [to_bytes32(d) for d in data])
        result.result = self.get_revoke_offchain(self.ctx.sender, data[0])
        return result

    # ============ Views ============

    def get_timestamp(self, data: HexLike) -> Optional[datetime]:
        """When ``data`` was timestamped, or None if never."""
        return from_unix(self._call("getTimestamp", to_bytes32(data)))

    def get_revoke_offchain(self, revoker: HexLike, data: HexLike) -> Optional[datetime]:
        """When ``revoker`` revoked ``data`` off-chain, or None if never."""
        return from_unix(self._call("getRevokeOffchain", checksum(revoker), to_bytes32(data)))

    def get_attestation(self, uid: HexLike) -> Optional[Attestation]:
        """
        Fetch an attestation.

        Returns:
            The Attestation, or None when the UID is unknown

        Raises:
            EASError: If the contract answers with an attestation for another UID
        """
        wanted = uid_bytes(uid)
        raw = self._call("getAttestation", wanted)
        if raw is None:
            return None
        attestation = Attestation.from_dict(raw)
        if attestation.uid == ZERO_BYTES32:
            return None
        if attestation.uid != wanted:
            raise EASError(f"Contract returned attestation {to_hex(attestation.uid)} for {to_hex(wanted)}")
        return attestation

    def is_attestation_valid(self, uid: HexLike) -> bool:
        return bool(self._call("isAttestationValid", uid_bytes(uid)))

    def get_schema_registry(self) -> str:
        return checksum(self._call("getSchemaRegistry"))

    def get_version(self) -> SemanticVersion:
        return SemanticVersion.parse(self._call("version"))
