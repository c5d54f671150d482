"""Tests for the EAS and SchemaRegistry facades with the chain layer mocked."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import pytest
from eth_utils import to_checksum_address

from easpy import (
    EAS,
    AttestationRequest,
    AttestationRequestData,
    EASError,
    MissingEventError,
    RevocationRequest,
    RevocationRequestData,
    SchemaMismatchError,
    SchemaRegistry,
    SemanticVersion,
    abi_field,
    derive_schema_uid,
    encode_abi_values,
)
from easpy import contract
from easpy.chain.abi import eas_abi, schema_registry_abi
from easpy.utils import ZERO_ADDRESS, ZERO_BYTES32

EAS_ADDRESS = "0x4200000000000000000000000000000000000021"
REGISTRY_ADDRESS = "0x4200000000000000000000000000000000000020"
RECIPIENT = to_checksum_address("0x5fbdb2315678afecb367f032d93f642f64180aa3")
SCHEMA = "uint256 value, string name"


class FakeChain:
    """Records contract calls and replays canned answers."""

    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self.calls: list[tuple[str, list]] = []
        self.receipt: dict[str, Any] = {"status": "0x1", "logs": []}
        self.answers: dict[str, Any] = {}

    def send_contract_tx(self, contract_address: str, function_name: str, args: list, **kwargs: Any) -> dict:
        self.sent.append({"to": contract_address, "function": function_name, "args": args, **kwargs})
        return {"tx_hash": "0x" + "ab" * 32, "receipt": self.receipt, "status": 1}

    def read_contract(self, contract_address: str, function_name: str, args: list, **kwargs: Any) -> Any:
        self.calls.append((function_name, args))
        return self.answers.get(function_name)


@pytest.fixture()
def chain(monkeypatch: pytest.MonkeyPatch) -> FakeChain:
    fake = FakeChain()
    monkeypatch.setattr(contract, "send_contract_tx", fake.send_contract_tx)
    monkeypatch.setattr(contract, "read_contract", fake.read_contract)
    return fake


@dataclass
class Person:
    value: int = abi_field("uint256", "value", 1)
    name: str = abi_field("string", "name", 2)


class TestSchemaRegistry:
    def test_register_reads_uid_from_event(self, chain: FakeChain, ctx, make_log, make_receipt, signer_address) -> None:
        uid = derive_schema_uid(SCHEMA)
        chain.receipt = make_receipt(
            make_log(
                schema_registry_abi(),
                "Registered",
                {"uid": uid, "registerer": signer_address, "schema": (uid, ZERO_ADDRESS, True, SCHEMA)},
                REGISTRY_ADDRESS,
            )
        )

        result = SchemaRegistry(REGISTRY_ADDRESS, ctx).register(f"  ({SCHEMA}) ")

        assert result.result == uid
        assert result.success
        assert result.block_number == 16
        sent = chain.sent[0]
        assert sent["function"] == "register"
        assert sent["args"] == [SCHEMA, ZERO_ADDRESS, True]
        assert sent["chain_id"] == 84532

    def test_register_without_event(self, chain: FakeChain, ctx, make_receipt) -> None:
        chain.receipt = make_receipt()
        with pytest.raises(MissingEventError) as exc_info:
            SchemaRegistry(REGISTRY_ADDRESS, ctx).register(SCHEMA)
        assert exc_info.value.tx_hash == "0x" + "ab" * 32

    def test_event_from_other_contract_ignored(self, chain: FakeChain, ctx, make_log, make_receipt, signer_address) -> None:
        uid = derive_schema_uid(SCHEMA)
        chain.receipt = make_receipt(
            make_log(
                schema_registry_abi(),
                "Registered",
                {"uid": uid, "registerer": signer_address, "schema": (uid, ZERO_ADDRESS, True, SCHEMA)},
                RECIPIENT,
            )
        )
        with pytest.raises(MissingEventError):
            SchemaRegistry(REGISTRY_ADDRESS, ctx).register(SCHEMA)

    def test_reverted_transaction(self, chain: FakeChain, ctx, make_receipt) -> None:
        chain.receipt = make_receipt(status="0x0")
        with pytest.raises(EASError) as exc_info:
            SchemaRegistry(REGISTRY_ADDRESS, ctx).register(SCHEMA)
        assert not isinstance(exc_info.value, MissingEventError)

    def test_register_needs_key(self, chain: FakeChain, readonly_ctx) -> None:
        with pytest.raises(ValueError):
            SchemaRegistry(REGISTRY_ADDRESS, readonly_ctx).register(SCHEMA)
        assert chain.sent == []

    def test_get_schema(self, chain: FakeChain, readonly_ctx) -> None:
        uid = derive_schema_uid(SCHEMA)
        chain.answers["getSchema"] = {"uid": uid, "resolver": ZERO_ADDRESS, "revocable": True, "schema": SCHEMA}

        record = SchemaRegistry(REGISTRY_ADDRESS, readonly_ctx).get_schema("0x" + uid.hex())

        assert record is not None
        assert record.schema == SCHEMA
        assert record.revocable is True
        assert chain.calls == [("getSchema", [uid])]

    def test_get_schema_unknown(self, chain: FakeChain, readonly_ctx) -> None:
        chain.answers["getSchema"] = {"uid": ZERO_BYTES32, "resolver": ZERO_ADDRESS, "revocable": False, "schema": ""}
        assert SchemaRegistry(REGISTRY_ADDRESS, readonly_ctx).get_schema(b"\x01" * 32) is None

    def test_get_schema_uid_mismatch(self, chain: FakeChain, readonly_ctx) -> None:
        chain.answers["getSchema"] = {"uid": b"\x02" * 32, "resolver": ZERO_ADDRESS, "revocable": True, "schema": "bool b"}
        with pytest.raises(EASError):
            SchemaRegistry(REGISTRY_ADDRESS, readonly_ctx).get_schema(b"\x01" * 32)

    def test_get_schema_by_description(self, chain: FakeChain, readonly_ctx) -> None:
        SchemaRegistry(REGISTRY_ADDRESS, readonly_ctx).get_schema_by_description(SCHEMA, revocable=False)
        assert chain.calls == [("getSchema", [derive_schema_uid(SCHEMA, ZERO_ADDRESS, False)])]

    def test_get_version(self, chain: FakeChain, readonly_ctx) -> None:
        chain.answers["version"] = "1.3.0"
        assert SchemaRegistry(REGISTRY_ADDRESS, readonly_ctx).get_version() == SemanticVersion(1, 3, 0)


class TestEASAttest:
    def attested(self, make_log, make_receipt, signer_address: str, uid: bytes) -> dict[str, Any]:
        return make_receipt(
            make_log(
                eas_abi(),
                "Attested",
                {"recipient": RECIPIENT, "attester": signer_address, "uid": uid, "schemaUID": derive_schema_uid(SCHEMA)},
                EAS_ADDRESS,
            )
        )

    def test_attest(self, chain: FakeChain, ctx, make_log, make_receipt, signer_address) -> None:
        uid = b"\x07" * 32
        chain.receipt = self.attested(make_log, make_receipt, signer_address, uid)
        expires = datetime(2030, 1, 1, tzinfo=timezone.utc)
        request = AttestationRequest(
            schema=derive_schema_uid(SCHEMA),
            data=AttestationRequestData(
                recipient=RECIPIENT,
                data=encode_abi_values(SCHEMA, [38, "Dave"]),
                expiration_time=expires,
                value=5,
            ),
        )

        result = EAS(EAS_ADDRESS, ctx).attest(request)

        assert result.result == uid
        sent = chain.sent[0]
        assert sent["function"] == "attest"
        assert sent["value"] == 5
        schema_uid, data = sent["args"][0]
        assert schema_uid == derive_schema_uid(SCHEMA)
        assert data == (RECIPIENT, int(expires.timestamp()), True, ZERO_BYTES32, request.data.data, 5)

    def test_attest_without_expiration_sends_zero(self, chain: FakeChain, ctx, make_log, make_receipt, signer_address) -> None:
        chain.receipt = self.attested(make_log, make_receipt, signer_address, b"\x07" * 32)
        EAS(EAS_ADDRESS, ctx).attest_values(SCHEMA, [1, "x"], recipient=RECIPIENT)
        assert chain.sent[0]["args"][0][1][1] == 0

    def test_attest_object(self, chain: FakeChain, ctx, make_log, make_receipt, signer_address) -> None:
        chain.receipt = self.attested(make_log, make_receipt, signer_address, b"\x08" * 32)

        result = EAS(EAS_ADDRESS, ctx).attest_object(SCHEMA, Person(38, "Dave"), recipient=RECIPIENT)

        assert result.result == b"\x08" * 32
        schema_uid, data = chain.sent[0]["args"][0]
        assert schema_uid == derive_schema_uid(SCHEMA)
        assert data[4] == encode_abi_values(SCHEMA, [38, "Dave"])

    def test_attest_object_shape_checked_before_sending(self, chain: FakeChain, ctx) -> None:
        with pytest.raises(SchemaMismatchError):
            EAS(EAS_ADDRESS, ctx).attest_object("uint8 value, string name", Person(1, "x"))
        assert chain.sent == []

    def test_attest_without_event(self, chain: FakeChain, ctx, make_receipt) -> None:
        chain.receipt = make_receipt()
        with pytest.raises(MissingEventError):
            EAS(EAS_ADDRESS, ctx).attest_values(SCHEMA, [1, "x"])


class TestEASRevokeAndTimestamp:
    def test_revoke(self, chain: FakeChain, ctx, make_log, make_receipt, signer_address) -> None:
        uid = b"\x07" * 32
        chain.receipt = make_receipt(
            make_log(
                eas_abi(),
                "Revoked",
                {"recipient": RECIPIENT, "attester": signer_address, "uid": uid, "schemaUID": derive_schema_uid(SCHEMA)},
                EAS_ADDRESS,
            )
        )
        request = RevocationRequest(derive_schema_uid(SCHEMA), RevocationRequestData(uid))

        result = EAS(EAS_ADDRESS, ctx).revoke(request)

        assert result.result == result.tx_hash
        assert chain.sent[0]["args"] == [(derive_schema_uid(SCHEMA), (uid, 0))]

    def test_revoke_without_event(self, chain: FakeChain, ctx, make_receipt) -> None:
        chain.receipt = make_receipt()
        request = RevocationRequest(derive_schema_uid(SCHEMA), RevocationRequestData(b"\x07" * 32))
        with pytest.raises(MissingEventError):
            EAS(EAS_ADDRESS, ctx).revoke(request)

    def test_timestamp(self, chain: FakeChain, ctx, make_log, make_receipt) -> None:
        chain.receipt = make_receipt(
            make_log(eas_abi(), "Timestamped", {"data": b"\x01" * 32, "timestamp": 1700000000}, EAS_ADDRESS)
        )
        result = EAS(EAS_ADDRESS, ctx).timestamp("0x" + "01" * 32)
        assert result.result == datetime.fromtimestamp(1700000000, tz=timezone.utc)

    def test_multi_timestamp(self, chain: FakeChain, ctx, make_log, make_receipt) -> None:
        chain.receipt = make_receipt(
            make_log(eas_abi(), "Timestamped", {"data": b"\x01" * 32, "timestamp": 1700000000}, EAS_ADDRESS)
        )
        EAS(EAS_ADDRESS, ctx).multi_timestamp([b"\x01" * 32, b"\x02" * 32])
        assert chain.sent[0]["args"] == [[b"\x01" * 32, b"\x02" * 32]]

    def test_multi_timestamp_empty(self, chain: FakeChain, ctx) -> None:
        with pytest.raises(ValueError):
            EAS(EAS_ADDRESS, ctx).multi_timestamp([])

    def test_revoke_offchain_reads_back_time(self, chain: FakeChain, ctx, signer_address) -> None:
        chain.answers["getRevokeOffchain"] = 1700000000
        result = EAS(EAS_ADDRESS, ctx).revoke_offchain(b"\x05" * 32)
        assert result.result == datetime.fromtimestamp(1700000000, tz=timezone.utc)
        assert chain.calls == [("getRevokeOffchain", [signer_address, b"\x05" * 32])]


class TestEASViews:
    def test_get_attestation(self, chain: FakeChain, readonly_ctx, signer_address) -> None:
        uid = b"\x07" * 32
        chain.answers["getAttestation"] = {
            "uid": uid,
            "schema": derive_schema_uid(SCHEMA),
            "time": 1700000000,
            "expirationTime": 0,
            "revocationTime": 0,
            "refUID": ZERO_BYTES32,
            "recipient": RECIPIENT,
            "attester": signer_address,
            "revocable": True,
            "data": b"\x00" * 32,
        }

        attestation = EAS(EAS_ADDRESS, readonly_ctx).get_attestation(uid)

        assert attestation is not None
        assert attestation.time == datetime.fromtimestamp(1700000000, tz=timezone.utc)
        assert attestation.expiration_time is None
        assert not attestation.is_revoked
        assert attestation.attester == signer_address

    def test_get_attestation_unknown(self, chain: FakeChain, readonly_ctx) -> None:
        chain.answers["getAttestation"] = {
            "uid": ZERO_BYTES32,
            "schema": ZERO_BYTES32,
            "time": 0,
            "expirationTime": 0,
            "revocationTime": 0,
            "refUID": ZERO_BYTES32,
            "recipient": ZERO_ADDRESS,
            "attester": ZERO_ADDRESS,
            "revocable": False,
            "data": b"",
        }
        assert EAS(EAS_ADDRESS, readonly_ctx).get_attestation(b"\x07" * 32) is None

    def test_get_attestation_for_other_uid(self, chain: FakeChain, readonly_ctx, signer_address) -> None:
        chain.answers["getAttestation"] = {
            "uid": b"\x08" * 32,
            "schema": derive_schema_uid(SCHEMA),
            "time": 1700000000,
            "expirationTime": 0,
            "revocationTime": 0,
            "refUID": ZERO_BYTES32,
            "recipient": RECIPIENT,
            "attester": signer_address,
            "revocable": True,
            "data": b"",
        }
        with pytest.raises(EASError):
            EAS(EAS_ADDRESS, readonly_ctx).get_attestation(b"\x07" * 32)

    def test_get_timestamp_never(self, chain: FakeChain, readonly_ctx) -> None:
        chain.answers["getTimestamp"] = 0
        assert EAS(EAS_ADDRESS, readonly_ctx).get_timestamp(b"\x01" * 32) is None

    def test_is_attestation_valid(self, chain: FakeChain, readonly_ctx) -> None:
        chain.answers["isAttestationValid"] = True
        assert EAS(EAS_ADDRESS, readonly_ctx).is_attestation_valid(b"\x07" * 32) is True

    def test_bad_uid(self, chain: FakeChain, readonly_ctx) -> None:
        with pytest.raises(ValueError):
            EAS(EAS_ADDRESS, readonly_ctx).get_attestation("0x1234")

    def test_get_schema_registry_and_version(self, chain: FakeChain, readonly_ctx) -> None:
        chain.answers["getSchemaRegistry"] = REGISTRY_ADDRESS
        chain.answers["version"] = "v1.2.0"
        eas = EAS(EAS_ADDRESS, readonly_ctx)
        assert eas.get_schema_registry() == REGISTRY_ADDRESS
        assert str(eas.get_version()) == "1.2.0"


class TestModels:
    def test_semantic_version_ordering(self) -> None:
        assert SemanticVersion.parse("1.3.0") > SemanticVersion.parse("1.2.9")

    def test_semantic_version_invalid(self) -> None:
        with pytest.raises(ValueError):
            SemanticVersion.parse("latest")

    def test_request_rejects_bad_ref_uid(self) -> None:
        data = AttestationRequestData(recipient=RECIPIENT, ref_uid="0x1234")
        with pytest.raises(ValueError):
            data.as_abi()
