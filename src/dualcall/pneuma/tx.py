"""
Transaction Builder - Build, sign, and send Ethereum transactions.

Uses eth-account for EIP-155 signing and the httpx-based JSON-RPC client
for nonce lookup, gas estimation, broadcast, and receipt polling.
All gas is paid by the funding key.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from eth_hash.auto import keccak

from ..sigil.eth import get_account
from .abi import decode_output, encode_call
from .rpc import (
    call,
    estimate_gas,
    get_chain_id,
    get_nonce,
    send_raw_transaction,
    wait_for_receipt,
)


# Legacy pricing used against development nodes
FIXED_GAS_PRICE = 1000
# Placeholder limit, replaced by eth_estimateGas before signing
DEFAULT_GAS = 10_000_000


class DeploymentError(RuntimeError):
    """A creation transaction was mined without producing a contract."""

    exit_code: int = 1


def _to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format.

    eth-account requires checksummed addresses in transaction fields.
    """
    addr = address.lower().replace("0x", "")
    addr_hash = keccak(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def _as_bytes(data: Union[str, bytes, None]) -> bytes:
    if not data:
        return b""
    if isinstance(data, str):
        return bytes.fromhex(data[2:] if data.startswith("0x") else data)
    return bytes(data)


def send_transaction(
    tx: dict[str, Any],
    private_key: Optional[str] = None,
    chain_id: Optional[int] = None,
    rpc_url: Optional[str] = None,
) -> dict:
    """
    Fill in, sign, broadcast a transaction and wait for its receipt.

    The nonce is taken from the latest block, the gas price is fixed and
    the gas limit comes from eth_estimateGas. Every failure propagates.

    Args:
        tx: Partial transaction with optional "to", "data" and "value"
        private_key: 0x-prefixed hex private key
        chain_id: EIP-155 chain id (default: asked from the node)
        rpc_url: RPC endpoint URL

    Returns:
        Transaction receipt dict

    Raises:
        ReceiptTimeoutError: If the receipt never shows up
    """
    account = get_account(private_key)
    data = _as_bytes(tx.get("data"))
    to = tx.get("to")
    if to is not None:
        to = _to_checksum_address(to)

    unsigned: dict[str, Any] = {
        "data": data,
        "value": tx.get("value", 0),
        "nonce": get_nonce(account.address, rpc_url=rpc_url),
        "gasPrice": FIXED_GAS_PRICE,
        "gas": DEFAULT_GAS,
    }
    if to is not None:
        unsigned["to"] = to

    unsigned["gas"] = estimate_gas(account.address, to, data, rpc_url=rpc_url)

    if chain_id is None:
        chain_id = get_chain_id(rpc_url=rpc_url)
    unsigned["chainId"] = chain_id

    signed = account.sign_transaction(unsigned)
    raw_tx = "0x" + bytes(signed.raw_transaction).hex()

    tx_hash = send_raw_transaction(raw_tx, rpc_url=rpc_url)
    return wait_for_receipt(tx_hash, rpc_url=rpc_url)


def deploy(
    bytecode: Union[str, bytes],
    private_key: Optional[str] = None,
    chain_id: Optional[int] = None,
    rpc_url: Optional[str] = None,
) -> tuple[str, dict]:
    """
    Deploy a contract from its init code.

    Returns:
        Tuple of (contract_address, receipt)

    Raises:
        DeploymentError: If the receipt carries no contract address
    """
    receipt = send_transaction(
        {"data": _as_bytes(bytecode)},
        private_key=private_key,
        chain_id=chain_id,
        rpc_url=rpc_url,
    )

    contract_address = receipt.get("contractAddress")
    if not contract_address:
        raise DeploymentError(
            f"Deployment {receipt.get('transactionHash', '?')} produced no contract address"
        )
    return _to_checksum_address(contract_address), receipt


def call_method(
    abi: list,
    contract_address: str,
    function_name: str,
    args: list,
    private_key: Optional[str] = None,
    rpc_url: Optional[str] = None,
) -> dict[str, Any]:
    """
    Call a contract method read-only and decode its outputs.

    Args:
        abi: Contract ABI
        contract_address: 0x-prefixed contract address
        function_name: Method to call
        args: Positional arguments

    Returns:
        Mapping of output name (or positional index) to value
    """
    data = encode_call(abi, function_name, args)
    sender = get_account(private_key).address

    raw = call(sender, _to_checksum_address(contract_address), data, rpc_url=rpc_url)
    return decode_output(abi, function_name, raw)
