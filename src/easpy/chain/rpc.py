"""
JSON-RPC Client.

Lightweight alternative to web3.py: uses httpx for HTTP + eth-abi for encoding.
Supports read-only contract calls, gas estimation, raw transaction submission
and receipt polling.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

import httpx
from eth_abi import decode, encode

from ..config import get_rpc_url
from .abi import find_function, function_selector, input_types, load_abi, named_values, output_types

logger = logging.getLogger(__name__)


class RPCError(RuntimeError):
    def __init__(self, message: str, error: Any = None) -> None:
        super().__init__(message)
        self.error = error


def rpc_call(method: str, params: list, rpc_url: Optional[str] = None) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "eth_call")
        params: RPC parameters
        rpc_url: RPC endpoint URL

    Returns:
        Result field from the RPC response

    Raises:
        RPCError: If the node answers with an error object
        httpx.HTTPError: On transport failures
    """
    url = rpc_url or get_rpc_url()
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }

    logger.debug("rpc %s -> %s", method, url)
    with httpx.Client(timeout=30) as client:
        response = client.post(url, json=payload)
        response.raise_for_status()
        data = response.json()

    if "error" in data:
        raise RPCError(f"RPC error: {data['error']}", error=data["error"])

    return data.get("result")


def encode_function_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = find_function(abi, function_name)
    selector = function_selector(func)
    encoded_args = encode(input_types(func), args) if args else b""
    return "0x" + selector.hex() + encoded_args.hex()


def decode_function_result(abi: list, function_name: str, data: str, named: bool = False) -> Any:
    """
    ABI-decode a function call result.

    Args:
        abi: Contract ABI
        function_name: Function name
        data: 0x-prefixed hex encoded return data
        named: Return tuples as dicts keyed by component name

    Returns:
        Decoded result (single value or tuple; dicts when ``named``)
    """
    func = find_function(abi, function_name)
    types = output_types(func)
    if not types:
        return None

    raw = bytes.fromhex(data[2:]) if data.startswith("0x") else bytes.fromhex(data)
    decoded = decode(types, raw)

    if named:
        values = named_values(func.get("outputs", []), decoded)
        if len(values) == 1:
            return next(iter(values.values()))
        return values

    if len(decoded) == 1:
        return decoded[0]
    return decoded


def read_contract(
    contract_address: str,
    function_name: str,
    args: Optional[list] = None,
    contract_name: Optional[str] = None,
    abi: Optional[list] = None,
    rpc_url: Optional[str] = None,
    sender: Optional[str] = None,
    named: bool = False,
) -> Any:
    """
    Read from a smart contract (eth_call).

    Args:
        contract_address: 0x-prefixed contract address
        function_name: Function to call
        args: Function arguments (default: [])
        contract_name: Name of contract for ABI loading (e.g., "EAS")
        abi: Pre-loaded ABI (if not using contract_name)
        rpc_url: RPC endpoint URL
        sender: Optional ``from`` address for the call
        named: Decode struct outputs into dicts

    Returns:
        Decoded return value(s), or None for empty return data
    """
    if abi is None:
        if contract_name is None:
            raise ValueError("Either abi or contract_name must be provided")
        abi = load_abi(contract_name)

    call: dict[str, Any] = {
        "to": contract_address,
        "data": encode_function_call(abi, function_name, args or []),
    }
    if sender:
        call["from"] = sender

    result = rpc_call("eth_call", [call, "latest"], rpc_url=rpc_url)

    if result is None or result == "0x":
        return None

    return decode_function_result(abi, function_name, result, named=named)


def get_balance(address: str, rpc_url: Optional[str] = None) -> int:
    """Get ETH balance for an address, in wei."""
    result = rpc_call("eth_getBalance", [address, "latest"], rpc_url=rpc_url)
    return int(result, 16)


def get_nonce(address: str, rpc_url: Optional[str] = None) -> int:
    """Get the next transaction nonce for an address (pending block)."""
    result = rpc_call("eth_getTransactionCount", [address, "pending"], rpc_url=rpc_url)
    return int(result, 16)


def get_gas_price(rpc_url: Optional[str] = None) -> int:
    """Get current gas price in wei."""
    result = rpc_call("eth_gasPrice", [], rpc_url=rpc_url)
    return int(result, 16)


def estimate_gas(tx: dict, rpc_url: Optional[str] = None) -> int:
    """
    Estimate gas for a transaction.

    Args:
        tx: Call object with from/to/data and integer ``value``
    """
    call = dict(tx)
    if isinstance(call.get("value"), int):
        call["value"] = hex(call["value"])
    result = rpc_call("eth_estimateGas", [call], rpc_url=rpc_url)
    return int(result, 16)


def send_raw_transaction(raw_tx: str, rpc_url: Optional[str] = None) -> str:
    """
    Send a signed raw transaction.

    Returns:
        Transaction hash (0x-prefixed hex)
    """
    return rpc_call("eth_sendRawTransaction", [raw_tx], rpc_url=rpc_url)


def wait_for_receipt(
    tx_hash: str,
    timeout: int = 120,
    poll_interval: float = 2.0,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Wait for a transaction receipt.

    Raises:
        TimeoutError: If receipt not found within timeout
    """
    start = time.time()
    while time.time() - start < timeout:
        receipt = rpc_call(
            "eth_getTransactionReceipt", [tx_hash], rpc_url=rpc_url
        )
        if receipt is not None:
            return receipt
        time.sleep(poll_interval)

    raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")
