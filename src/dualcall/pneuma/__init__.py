"""
Pneuma - On-chain interaction layer for dualcall.

Provides the JSON-RPC client, ABI helpers, and the transaction lifecycle
(nonce, gas, signing, broadcast, receipt polling).

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
