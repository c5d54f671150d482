"""
Event logs - Decode contract events from transaction receipts.
"""

from __future__ import annotations

from typing import Any, Optional

from eth_abi import decode

from ..utils import hex_to_bytes
from .abi import canonical_type, event_topic, find_event, named_values

_DYNAMIC = ("string", "bytes")


def _is_hashed_topic(param: dict[str, Any]) -> bool:
    # dynamic indexed values are stored as their keccak hash
    typ = param["type"]
    return typ in _DYNAMIC or typ.startswith("tuple") or typ.endswith("]")


def decode_log(event: dict[str, Any], log: dict[str, Any]) -> dict[str, Any]:
    """Decode one log entry against an ABI event definition."""
    topics = [hex_to_bytes(t) for t in log.get("topics", [])][1:]
    inputs = event.get("inputs", [])

    result: dict[str, Any] = {}
    indexed = [p for p in inputs if p.get("indexed")]
    for param, topic in zip(indexed, topics):
        if _is_hashed_topic(param):
            result[param["name"]] = topic
        else:
            result[param["name"]] = decode([canonical_type(param)], topic)[0]

    plain = [p for p in inputs if not p.get("indexed")]
    if plain:
        values = decode([canonical_type(p) for p in plain], hex_to_bytes(log.get("data", "0x")))
        result.update(named_values(plain, values))

    return result


def read_event(
    abi: list,
    receipt: dict[str, Any],
    event_name: str,
    address: Optional[str] = None,
) -> Optional[dict[str, Any]]:
    """
    Find and decode the first ``event_name`` log in a receipt.

    Args:
        abi: Contract ABI containing the event
        receipt: Transaction receipt (JSON-RPC form)
        event_name: Event to look for, e.g. "Attested"
        address: Only consider logs emitted by this contract

    Returns:
        Event arguments by name, or None when the receipt has no such log
    """
    event = find_event(abi, event_name)
    topic0 = event_topic(event)

    for log in receipt.get("logs", []):
        topics = log.get("topics", [])
        if not topics or hex_to_bytes(topics[0]) != topic0:
            continue
        if address and str(log.get("address", "")).lower() != address.lower():
            continue
        return decode_log(event, log)

    return None
