"""
IPFS helpers - Store IPFS CIDv0 hashes in bytes32-sized attestation fields.

A CIDv0 is "Qm" followed by 44 base58btc characters. The part after "Qm"
is carried on-chain as raw bytes and restored by prefixing "Qm" again.
"""

from __future__ import annotations

import re

import base58

from .utils import hex_to_bytes, to_hex

_V0_PATTERN = re.compile(r"^Qm[1-9A-HJ-NP-Za-km-z]{44}$")
_V1_PATTERN = re.compile(r"^baf[a-z2-7]{4}[a-z2-7]{52}$")


def is_cid(cid: str) -> bool:
    """True for a CIDv0 (base58btc) or a base32 CIDv1."""
    if not cid:
        return False
    return bool(_V0_PATTERN.match(cid) or _V1_PATTERN.match(cid))


def encode_qm_hash(cid: str) -> str:
    """
    Encode a CIDv0 as 0x-prefixed hex.

    Raises:
        ValueError: If ``cid`` is not a CID, or is a CIDv1
    """
    if not is_cid(cid):
        raise ValueError(f"Invalid CID format: {cid!r}")
    if not cid.startswith("Qm"):
        raise ValueError(f"Only CIDv0 (Qm...) hashes are supported: {cid!r}")
    return to_hex(base58.b58decode(cid[2:]))


def decode_qm_hash(value: str) -> str:
    """
    Restore a CIDv0 from the hex produced by :func:`encode_qm_hash`.

    Raises:
        ValueError: If ``value`` is not 0x-prefixed hex
    """
    if not value.startswith("0x"):
        raise ValueError(f"Hash must start with 0x: {value!r}")
    return "Qm" + base58.b58encode(hex_to_bytes(value)).decode("ascii")
