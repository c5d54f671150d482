"""
Contract client - Shared plumbing for the EAS and SchemaRegistry facades.

Binds a deployed contract address and its ABI to a ChainContext, and turns
reverted transactions into EASError.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .chain.abi import load_abi
from .chain.events import read_event
from .chain.rpc import read_contract
from .chain.tx import send_contract_tx
from .config import ChainContext
from .errors import EASError, MissingEventError
from .models import TransactionResult
from .utils import checksum

logger = logging.getLogger(__name__)


class ContractClient:
    contract_name: str = ""

    def __init__(self, address: str, ctx: Optional[ChainContext] = None) -> None:
        self.address = checksum(address)
        self.ctx = ctx or ChainContext.from_env()

    @property
    def abi(self) -> list[dict[str, Any]]:
        return load_abi(self.contract_name)

    def _call(self, function_name: str, *args: Any) -> Any:
        logger.debug("%s.%s%r", self.contract_name, function_name, args)
        return read_contract(
            self.address,
            function_name,
            list(args),
            abi=self.abi,
            rpc_url=self.ctx.rpc_url,
            sender=self.ctx.sender,
            named=True,
        )

    def _transact(self, function_name: str, *args: Any, value: int = 0) -> TransactionResult:
        """
        Send a transaction and wait for it to be mined.

        Raises:
            ValueError: If the context has no signing key
            EASError: If the transaction reverted
        """
        if not self.ctx.private_key:
            raise ValueError(f"{self.contract_name}.{function_name} needs a signing key (PRIVATE_KEY)")

        logger.info("Submitting %s.%s to %s", self.contract_name, function_name, self.address)
        sent = send_contract_tx(
            self.address,
            function_name,
            list(args),
            abi=self.abi,
            value=value,
            private_key=self.ctx.private_key,
            timeout=self.ctx.receipt_timeout,
            rpc_url=self.ctx.rpc_url,
            chain_id=self.ctx.chain_id,
        )
        result: TransactionResult = TransactionResult(tx_hash=sent["tx_hash"], receipt=sent["receipt"])
        if not result.success:
            raise EASError(
                f"{self.contract_name}.{function_name} reverted in transaction {result.tx_hash}",
                tx_hash=result.tx_hash,
            )
        return result

    def _event(self, result: TransactionResult, event_name: str) -> dict[str, Any]:
        """Decode ``event_name`` from a mined transaction, or raise MissingEventError."""
        event = read_event(self.abi, result.receipt, event_name, address=self.address)
        if event is None:
            raise MissingEventError(event_name, tx_hash=result.tx_hash)
        return event

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address!r})"
