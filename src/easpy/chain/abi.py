"""
ABI Loader - Contract ABIs shipped with easpy.

ABI documents live in easpy/abis/<Contract>.json (a bare JSON list, or a
compiler artifact with an "abi" key).
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from eth_utils import keccak

ABI_DIR = Path(__file__).resolve().parent.parent / "abis"


@lru_cache(maxsize=16)
def load_abi(contract_name: str) -> list[dict[str, Any]]:
    """
    Load the ABI for a contract.

    Args:
        contract_name: Contract name (e.g., "EAS", "SchemaRegistry")

    Returns:
        ABI as a list of dicts

    Raises:
        FileNotFoundError: If no ABI file exists for the contract
    """
    abi_path = ABI_DIR / f"{contract_name}.json"
    if not abi_path.exists():
        available = sorted(p.stem for p in ABI_DIR.glob("*.json"))
        raise FileNotFoundError(
            f"ABI not found: {abi_path}. Available: {', '.join(available) or '(none)'}"
        )

    with abi_path.open("r", encoding="utf-8") as f:
        artifact = json.load(f)

    if isinstance(artifact, dict):
        return artifact["abi"]
    return artifact


def eas_abi() -> list[dict[str, Any]]:
    """Load the EAS ABI."""
    return load_abi("EAS")


def schema_registry_abi() -> list[dict[str, Any]]:
    """Load the SchemaRegistry ABI."""
    return load_abi("SchemaRegistry")


def _find(abi: list, kind: str, name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == kind and entry.get("name") == name:
            return entry
    raise ValueError(f"{kind.capitalize()} {name} not found in ABI")


def find_function(abi: list, name: str) -> dict[str, Any]:
    return _find(abi, "function", name)


def find_event(abi: list, name: str) -> dict[str, Any]:
    return _find(abi, "event", name)


def canonical_type(param: dict[str, Any]) -> str:
    """
    Canonical type of an ABI parameter, expanding tuple components.

    {"type": "tuple[]", "components": [{"type": "uint8"}, {"type": "bool"}]}
    becomes "(uint8,bool)[]".
    """
    typ = param["type"]
    if typ.startswith("tuple"):
        inner = ",".join(canonical_type(c) for c in param.get("components", []))
        return f"({inner}){typ[len('tuple'):]}"
    return typ


def input_types(entry: dict[str, Any]) -> list[str]:
    return [canonical_type(p) for p in entry.get("inputs", [])]


def output_types(entry: dict[str, Any]) -> list[str]:
    return [canonical_type(p) for p in entry.get("outputs", [])]


def signature(entry: dict[str, Any]) -> str:
    return f"{entry['name']}({','.join(input_types(entry))})"


def function_selector(entry: dict[str, Any]) -> bytes:
    return keccak(text=signature(entry))[:4]


def event_topic(entry: dict[str, Any]) -> bytes:
    return keccak(text=signature(entry))


def named_values(params: list[dict[str, Any]], values: Any) -> dict[str, Any]:
    """
    Zip decoded values with parameter names, recursing into tuples.

    Unnamed parameters are keyed by position.
    """
    result: dict[str, Any] = {}
    for i, (param, value) in enumerate(zip(params, values)):
        key = param.get("name") or str(i)
        typ = param["type"]
        if typ == "tuple":
            value = named_values(param.get("components", []), value)
        elif typ.startswith("tuple["):
            value = [named_values(param.get("components", []), v) for v in value]
        result[key] = value
    return result
