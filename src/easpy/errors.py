"""
Facade errors - Failures of contract interactions.

Schema parsing and encoding failures live in ``easpy.schema.errors``.
"""

from __future__ import annotations

from typing import Optional


class EASError(RuntimeError):
    """A contract call or transaction did not produce the expected result."""

    def __init__(self, message: str, tx_hash: Optional[str] = None) -> None:
        super().__init__(message)
        self.tx_hash = tx_hash


class MissingEventError(EASError):
    """A mined transaction's receipt lacks the event that carries its result."""

    def __init__(self, event_name: str, tx_hash: Optional[str] = None) -> None:
        super().__init__(f"{event_name} event not found in receipt of {tx_hash}", tx_hash=tx_hash)
        self.event_name = event_name
