"""
Transaction Builder - Build, sign, and send Ethereum transactions.

Uses eth-account for signing and the httpx-based JSON-RPC client for
sending. Gas limit comes from eth_estimateGas unless given explicitly.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from eth_utils import to_checksum_address

from ..config import get_account, get_chain_id
from .abi import load_abi
from .rpc import (
    encode_function_call,
    estimate_gas,
    get_gas_price,
    get_nonce,
    send_raw_transaction,
    wait_for_receipt,
)

logger = logging.getLogger(__name__)


def build_contract_tx(
    contract_address: str,
    function_name: str,
    args: list,
    contract_name: Optional[str] = None,
    abi: Optional[list] = None,
    value: int = 0,
    gas_limit: Optional[int] = None,
    private_key: Optional[str] = None,
    rpc_url: Optional[str] = None,
    chain_id: Optional[int] = None,
) -> dict:
    """
    Build a contract call transaction (unsigned).

    Args:
        contract_address: 0x-prefixed contract address
        function_name: Function to call
        args: Function arguments
        contract_name: For ABI loading
        abi: Pre-loaded ABI
        value: ETH value in wei (default: 0)
        gas_limit: Gas limit (default: eth_estimateGas)
        private_key: Signing key, used for sender and nonce lookup
        rpc_url: RPC endpoint URL
        chain_id: Chain id (default: CHAIN_ID from config)

    Returns:
        Unsigned transaction dict
    """
    if abi is None:
        if contract_name is None:
            raise ValueError("Either abi or contract_name must be provided")
        abi = load_abi(contract_name)

    calldata = encode_function_call(abi, function_name, args)

    account = get_account(private_key)
    to = to_checksum_address(contract_address)

    if gas_limit is None:
        gas_limit = estimate_gas(
            {"from": account.address, "to": to, "data": calldata, "value": value},
            rpc_url=rpc_url,
        )

    tx = {
        "to": to,
        "data": calldata,
        "value": value,
        "nonce": get_nonce(account.address, rpc_url=rpc_url),
        "gas": gas_limit,
        "gasPrice": get_gas_price(rpc_url=rpc_url),
        "chainId": chain_id if chain_id is not None else get_chain_id(),
    }

    return tx


def sign_and_send(
    tx: dict,
    private_key: Optional[str] = None,
    wait: bool = True,
    timeout: int = 120,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Sign a transaction and send it.

    Args:
        tx: Unsigned transaction dict
        private_key: 0x-prefixed hex private key
        wait: Whether to wait for receipt
        timeout: Receipt wait timeout
        rpc_url: RPC endpoint URL

    Returns:
        Dict with tx_hash and, when waiting, receipt and status
    """
    account = get_account(private_key)
    signed = account.sign_transaction(tx)
    raw_tx = "0x" + signed.raw_transaction.hex()

    tx_hash = send_raw_transaction(raw_tx, rpc_url=rpc_url)
    logger.info("Sent transaction %s to %s", tx_hash, tx.get("to"))
    result: dict[str, Any] = {"tx_hash": tx_hash}

    if wait:
        receipt = wait_for_receipt(tx_hash, timeout=timeout, rpc_url=rpc_url)
        result["receipt"] = receipt
        result["status"] = int(receipt.get("status", "0x0"), 16)
        logger.debug("Transaction %s mined with status %s", tx_hash, result["status"])

    return result


def send_contract_tx(
    contract_address: str,
    function_name: str,
    args: list,
    contract_name: Optional[str] = None,
    abi: Optional[list] = None,
    value: int = 0,
    gas_limit: Optional[int] = None,
    private_key: Optional[str] = None,
    wait: bool = True,
    timeout: int = 120,
    rpc_url: Optional[str] = None,
    chain_id: Optional[int] = None,
) -> dict:
    """
    Build, sign, and send a contract call transaction.

    Returns:
        Dict with tx_hash, receipt, status
    """
    tx = build_contract_tx(
        contract_address=contract_address,
        function_name=function_name,
        args=args,
        contract_name=contract_name,
        abi=abi,
        value=value,
        gas_limit=gas_limit,
        private_key=private_key,
        rpc_url=rpc_url,
        chain_id=chain_id,
    )
    return sign_and_send(tx, private_key=private_key, wait=wait, timeout=timeout, rpc_url=rpc_url)
