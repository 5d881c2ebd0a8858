"""
dualcall - deploy a generated contract to an Ethereum-compatible node
and call it back over JSON-RPC.
"""

__all__ = [
    # Keys
    "DEFAULT_PRIVATE_KEY",
    "get_account",
    "get_address",
    "load_private_key",
    # RPC
    "RpcError",
    "ReceiptTimeoutError",
    "wait_for_receipt",
    # ABI
    "DecodedEvent",
    "MethodNotFoundError",
    "decode_logs",
    "decode_output",
    "encode_call",
    # Transactions
    "DeploymentError",
    "call_method",
    "deploy",
    "send_transaction",
    # Contract generation
    "CompileError",
    "CompiledContract",
    "Contract",
    "Event",
    "compile_contract",
]

from .sigil.eth import DEFAULT_PRIVATE_KEY, get_account, get_address, load_private_key
from .pneuma.rpc import ReceiptTimeoutError, RpcError, wait_for_receipt
from .pneuma.abi import DecodedEvent, MethodNotFoundError, decode_logs, decode_output, encode_call
from .pneuma.tx import DeploymentError, call_method, deploy, send_transaction
from .forge.contract import Contract, Event
from .forge.compiler import CompileError, CompiledContract, compile_contract
