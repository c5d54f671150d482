"""
Configuration for easpy.

Values come from the process environment, optionally seeded from
~/.easpy/.env. Defaults target Base Sepolia, where EAS and the
SchemaRegistry are OP Stack predeploys.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from eth_account import Account
from eth_account.signers.local import LocalAccount

EASPY_DIR = Path.home() / ".easpy"
EASPY_ENV = EASPY_DIR / ".env"

DEFAULT_RPC_URL = "https://sepolia.base.org"
DEFAULT_CHAIN_ID = 84532  # Base Sepolia
DEFAULT_EAS_ADDRESS = "0x4200000000000000000000000000000000000021"
DEFAULT_SCHEMA_REGISTRY_ADDRESS = "0x4200000000000000000000000000000000000020"
DEFAULT_RECEIPT_TIMEOUT = 120


def load_env(env_path: Optional[Path] = None) -> None:
    """Load ~/.easpy/.env into the environment without overriding it."""
    env_path = env_path or EASPY_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)


def get_rpc_url() -> str:
    return os.environ.get("EAS_RPC_URL", DEFAULT_RPC_URL)


def get_chain_id() -> int:
    return int(os.environ.get("CHAIN_ID", str(DEFAULT_CHAIN_ID)))


def get_eas_address() -> str:
    return os.environ.get("EAS_ADDRESS", DEFAULT_EAS_ADDRESS)


def get_schema_registry_address() -> str:
    return os.environ.get("SCHEMA_REGISTRY_ADDRESS", DEFAULT_SCHEMA_REGISTRY_ADDRESS)


def get_receipt_timeout() -> int:
    return int(os.environ.get("EAS_RECEIPT_TIMEOUT", str(DEFAULT_RECEIPT_TIMEOUT)))


def load_private_key(env_path: Optional[Path] = None) -> str:
    """
    Load the signing key from the environment or ~/.easpy/.env.

    Returns:
        0x-prefixed hex private key

    Raises:
        ValueError: If PRIVATE_KEY is not set
    """
    load_env(env_path)

    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        raise ValueError(
            f"PRIVATE_KEY not found. Set PRIVATE_KEY in the environment or in "
            f"{env_path or EASPY_ENV}"
        )

    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


def get_account(private_key: Optional[str] = None) -> LocalAccount:
    if private_key is None:
        private_key = load_private_key()
    return Account.from_key(private_key)


@dataclass(frozen=True)
class ChainContext:
    """
    Everything a contract interaction needs besides its arguments.

    Attributes:
        rpc_url: JSON-RPC endpoint
        chain_id: EIP-155 chain id used when signing
        private_key: Signing key; None for read-only use
        receipt_timeout: Seconds to wait for a transaction receipt
    """
    rpc_url: str = DEFAULT_RPC_URL
    chain_id: int = DEFAULT_CHAIN_ID
    private_key: Optional[str] = None
    receipt_timeout: int = DEFAULT_RECEIPT_TIMEOUT

    @classmethod
    def from_env(cls, require_key: bool = False) -> "ChainContext":
        load_env()
        private_key: Optional[str] = None
        try:
            private_key = load_private_key()
        except ValueError:
            if require_key:
                raise
        return cls(
            rpc_url=get_rpc_url(),
            chain_id=get_chain_id(),
            private_key=private_key,
            receipt_timeout=get_receipt_timeout(),
        )

    @property
    def sender(self) -> Optional[str]:
        """Checksummed address of the signing key, if any."""
        if not self.private_key:
            return None
        return get_account(self.private_key).address
