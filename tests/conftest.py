"""Shared fixtures: a throwaway signing key and fake receipts."""

from __future__ import annotations

from typing import Any, Callable

import pytest
from eth_abi import encode
from eth_account import Account

from easpy.chain.abi import canonical_type, event_topic, find_event
from easpy.config import ChainContext

TEST_KEY = "0x" + "11" * 32


@pytest.fixture()
def signer_key() -> str:
    return TEST_KEY


@pytest.fixture()
def signer_address() -> str:
    return Account.from_key(TEST_KEY).address


@pytest.fixture()
def ctx() -> ChainContext:
    return ChainContext(rpc_url="http://rpc.test", chain_id=84532, private_key=TEST_KEY, receipt_timeout=5)


@pytest.fixture()
def readonly_ctx() -> ChainContext:
    return ChainContext(rpc_url="http://rpc.test", chain_id=84532)


def _make_log(abi: list, event_name: str, args: dict[str, Any], address: str) -> dict[str, Any]:
    event = find_event(abi, event_name)
    topics = ["0x" + event_topic(event).hex()]
    data_types, data_values = [], []
    for param in event["inputs"]:
        if param.get("indexed"):
            topics.append("0x" + encode([canonical_type(param)], [args[param["name"]]]).hex())
        else:
            data_types.append(canonical_type(param))
            data_values.append(args[param["name"]])
    return {
        "address": address.lower(),
        "topics": topics,
        "data": "0x" + encode(data_types, data_values).hex(),
    }


def _make_receipt(*logs: dict[str, Any], status: str = "0x1") -> dict[str, Any]:
    return {"status": status, "blockNumber": "0x10", "logs": list(logs)}


@pytest.fixture()
def make_log() -> Callable[..., dict[str, Any]]:
    """Build a JSON-RPC log entry: make_log(abi, event_name, args, address)."""
    return _make_log


@pytest.fixture()
def make_receipt() -> Callable[..., dict[str, Any]]:
    """Build a receipt around logs: make_receipt(*logs, status="0x1")."""
    return _make_receipt
