"""
Chain - On-chain interaction layer for easpy.

Provides JSON-RPC client, ABI management, transaction utilities and event
log decoding for the EAS and SchemaRegistry contracts.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
