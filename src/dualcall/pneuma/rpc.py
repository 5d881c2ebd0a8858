"""
JSON-RPC Client for an Ethereum-compatible node.

Lightweight alternative to web3.py: uses httpx for HTTP.
Supports balance and nonce queries, gas estimation, read-only calls,
raw transaction broadcast, and bounded receipt polling.
"""

from __future__ import annotations

import os
import time
from typing import Any, Optional

import httpx


# Default RPC endpoint (local development node)
DEFAULT_RPC_URL = "http://127.0.0.1:8545"

# Receipt polling budget: one lookup plus RECEIPT_RETRIES retries
RECEIPT_RETRIES = 6
RECEIPT_POLL_INTERVAL = 1.0


class RpcError(RuntimeError):
    """The node answered with a JSON-RPC error object."""

    exit_code: int = 1

    def __init__(self, code: Optional[int], message: str, data: Any = None):
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data


class ReceiptTimeoutError(TimeoutError):
    """No receipt was observed within the polling budget."""

    exit_code: int = 2

    def __init__(self, tx_hash: str, attempts: int):
        super().__init__(f"timeout waiting for receipt of {tx_hash} after {attempts} attempts")
        self.tx_hash = tx_hash
        self.attempts = attempts


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("ETH_RPC_URL", DEFAULT_RPC_URL)


def _rpc_call(method: str, params: list, rpc_url: Optional[str] = None) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "eth_call")
        params: RPC parameters
        rpc_url: RPC endpoint URL

    Returns:
        Result field from the RPC response

    Raises:
        httpx.HTTPError: On transport or HTTP status failures
        RpcError: If the response carries an error object
    """
    url = rpc_url or get_rpc_url()
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }

    with httpx.Client(timeout=30) as client:
        response = client.post(url, json=payload)
        response.raise_for_status()
        data = response.json()

    if "error" in data:
        error = data["error"]
        if not isinstance(error, dict):
            # Some nodes reply with a bare error string
            raise RpcError(None, str(error))
        raise RpcError(error.get("code"), error.get("message", ""), error.get("data"))

    return data.get("result")


def get_balance(address: str, rpc_url: Optional[str] = None) -> int:
    """
    Get ETH balance for an address.

    Args:
        address: 0x-prefixed address
        rpc_url: RPC endpoint URL

    Returns:
        Balance in wei
    """
    result = _rpc_call("eth_getBalance", [address, "latest"], rpc_url=rpc_url)
    return int(result, 16)


def get_nonce(address: str, rpc_url: Optional[str] = None) -> int:
    """
    Get transaction nonce for an address at the latest block.

    Args:
        address: 0x-prefixed address
        rpc_url: RPC endpoint URL

    Returns:
        Current nonce
    """
    result = _rpc_call("eth_getTransactionCount", [address, "latest"], rpc_url=rpc_url)
    return int(result, 16)


def get_chain_id(rpc_url: Optional[str] = None) -> int:
    """Chain id reported by the node (used for EIP-155 signing)."""
    result = _rpc_call("eth_chainId", [], rpc_url=rpc_url)
    return int(result, 16)


def get_gas_price(rpc_url: Optional[str] = None) -> int:
    """
    Get current gas price.

    Returns:
        Gas price in wei
    """
    result = _rpc_call("eth_gasPrice", [], rpc_url=rpc_url)
    return int(result, 16)


def _call_msg(sender: str, to: Optional[str], data: bytes) -> dict[str, str]:
    msg = {"from": sender, "data": "0x" + data.hex()}
    if to is not None:
        msg["to"] = to
    return msg


def estimate_gas(
    sender: str,
    to: Optional[str],
    data: bytes,
    rpc_url: Optional[str] = None,
) -> int:
    """
    Estimate the gas limit for a message.

    Args:
        sender: 0x-prefixed sender address
        to: Target address, or None for contract creation
        data: Calldata or init code

    Returns:
        Estimated gas
    """
    result = _rpc_call("eth_estimateGas", [_call_msg(sender, to, data)], rpc_url=rpc_url)
    return int(result, 16)


def call(
    sender: str,
    to: str,
    data: bytes,
    block: str = "latest",
    rpc_url: Optional[str] = None,
) -> bytes:
    """
    Execute a read-only call (eth_call).

    Returns:
        Raw return data
    """
    result = _rpc_call("eth_call", [_call_msg(sender, to, data), block], rpc_url=rpc_url)
    if not result:
        return b""
    return bytes.fromhex(result[2:] if result.startswith("0x") else result)


def send_raw_transaction(raw_tx: str, rpc_url: Optional[str] = None) -> str:
    """
    Send a signed raw transaction.

    Args:
        raw_tx: 0x-prefixed hex encoded signed transaction

    Returns:
        Transaction hash (0x-prefixed hex)
    """
    return _rpc_call("eth_sendRawTransaction", [raw_tx], rpc_url=rpc_url)


def get_transaction_receipt(tx_hash: str, rpc_url: Optional[str] = None) -> Optional[dict]:
    """
    Fetch a transaction receipt.

    Returns None while the transaction is pending. Some nodes signal a
    pending transaction with a "not found" error instead of a null result.
    """
    try:
        return _rpc_call("eth_getTransactionReceipt", [tx_hash], rpc_url=rpc_url)
    except RpcError as exc:
        if exc.message == "not found":
            return None
        raise


def wait_for_receipt(
    tx_hash: str,
    retries: int = RECEIPT_RETRIES,
    poll_interval: float = RECEIPT_POLL_INTERVAL,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Wait for a transaction receipt.

    Makes at most retries + 1 lookups, sleeping poll_interval seconds
    between consecutive lookups.

    Args:
        tx_hash: Transaction hash
        retries: Lookups allowed after the first one
        poll_interval: Seconds between lookups
        rpc_url: RPC endpoint URL

    Returns:
        Transaction receipt dict

    Raises:
        ReceiptTimeoutError: If no receipt is seen within the budget
    """
    attempts = 0
    while True:
        receipt = get_transaction_receipt(tx_hash, rpc_url=rpc_url)
        attempts += 1
        if receipt is not None:
            return receipt
        if attempts > retries:
            raise ReceiptTimeoutError(tx_hash, attempts)
        time.sleep(poll_interval)
