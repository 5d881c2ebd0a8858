"""
ABI helpers - method lookup, call encoding, and result / log decoding.

Encoding and decoding are delegated to eth-abi; selectors and event
topics use Keccak-256 from eth-hash.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from eth_abi import decode, encode
from eth_hash.auto import keccak


class MethodNotFoundError(ValueError):
    exit_code: int = 1


@dataclass(frozen=True)
class DecodedEvent:
    """A receipt log matched against an ABI event."""
    name: str
    args: dict[str, Any] = field(default_factory=dict)
    address: str | None = None


def _keccak256(data: bytes) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(data)


def _canonical_type(param: dict[str, Any]) -> str:
    """Canonical ABI type, expanding tuple components."""
    typ = param["type"]
    if typ.startswith("tuple"):
        inner = ",".join(_canonical_type(c) for c in param.get("components", []))
        return f"({inner}){typ[len('tuple'):]}"
    return typ


def _types(params: Iterable[dict[str, Any]]) -> list[str]:
    return [_canonical_type(p) for p in params]


def _find(abi: list, kind: str, name: str) -> dict[str, Any]:
    for entry in abi:
        if entry.get("type") == kind and entry.get("name") == name:
            return entry
    label = "method" if kind == "function" else kind
    raise MethodNotFoundError(f"{label} {name} not found")


def find_function(abi: list, name: str) -> dict[str, Any]:
    """Find a function entry by name."""
    return _find(abi, "function", name)


def find_event(abi: list, name: str) -> dict[str, Any]:
    """Find an event entry by name."""
    return _find(abi, "event", name)


def function_signature(entry: dict[str, Any]) -> str:
    return f"{entry['name']}({','.join(_types(entry.get('inputs', [])))})"


def function_selector(entry: dict[str, Any]) -> bytes:
    """First 4 bytes of the Keccak-256 hash of the canonical signature."""
    return _keccak256(function_signature(entry).encode("utf-8"))[:4]


def event_topic(entry: dict[str, Any]) -> bytes:
    """Topic 0 of an event: full Keccak-256 of its signature."""
    return _keccak256(function_signature(entry).encode("utf-8"))


def method_sig(name: str, *types: str) -> bytes:
    """Selector for a bare signature, e.g. method_sig("setA1")."""
    return _keccak256(f"{name}({','.join(types)})".encode("utf-8"))[:4]


def encode_call(abi: list, function_name: str, args: list) -> bytes:
    """
    ABI-encode a function call.

    Args:
        abi: Contract ABI
        function_name: Function name to call
        args: Positional function arguments

    Returns:
        Selector followed by the encoded arguments
    """
    func = find_function(abi, function_name)
    input_types = _types(func.get("inputs", []))

    if len(args) != len(input_types):
        raise ValueError(
            f"{function_name} expects {len(input_types)} arguments, got {len(args)}"
        )

    encoded_args = encode(input_types, list(args)) if input_types else b""
    return function_selector(func) + encoded_args


def _named(params: list[dict[str, Any]], values: Iterable[Any]) -> dict[str, Any]:
    # Unnamed outputs are keyed by position ("0", "1", ...)
    return {
        (param.get("name") or str(index)): value
        for index, (param, value) in enumerate(zip(params, values))
    }


def decode_output(abi: list, function_name: str, data: bytes) -> dict[str, Any]:
    """
    ABI-decode the return data of a function call.

    Args:
        abi: Contract ABI
        function_name: Function name
        data: Raw return data

    Returns:
        Mapping of output name (or positional index) to value
    """
    func = find_function(abi, function_name)
    outputs = func.get("outputs", [])
    if not outputs:
        return {}

    decoded = decode(_types(outputs), data)
    return _named(outputs, decoded)


def _hex_to_bytes(value: str) -> bytes:
    return bytes.fromhex(value[2:] if value.startswith("0x") else value)


def decode_log(entry: dict[str, Any], log: dict[str, Any]) -> DecodedEvent:
    """
    Decode one log against an event entry.

    Indexed parameters are read from topics[1:]. Dynamic indexed values
    are only stored as their hash, so they are returned as raw bytes.
    """
    inputs = entry.get("inputs", [])
    topics = [_hex_to_bytes(t) for t in log.get("topics", [])][1:]

    plain = [p for p in inputs if not p.get("indexed")]

    data = _hex_to_bytes(log.get("data", "0x") or "0x")
    plain_values = iter(decode(_types(plain), data) if plain else ())
    topic_values = iter(topics)

    values = []
    for param in inputs:
        if param.get("indexed"):
            topic = next(topic_values, None)
            if topic is None:
                raise ValueError(f"log for {entry['name']} is missing indexed topics")
            typ = _canonical_type(param)
            if typ in ("string", "bytes") or typ.endswith("]") or typ.startswith("("):
                values.append(topic)
            else:
                values.append(decode([typ], topic)[0])
        else:
            values.append(next(plain_values))

    return DecodedEvent(name=entry["name"], args=_named(inputs, values), address=log.get("address"))


def decode_logs(abi: list, logs: Iterable[dict[str, Any]]) -> list[DecodedEvent]:
    """Decode receipt logs emitted by events in the ABI. Unknown logs are skipped."""
    events = {
        event_topic(entry): entry
        for entry in abi
        if entry.get("type") == "event" and not entry.get("anonymous")
    }

    decoded = []
    for log in logs:
        topics = log.get("topics", [])
        if not topics:
            continue
        entry = events.get(_hex_to_bytes(topics[0]))
        if entry is not None:
            decoded.append(decode_log(entry, log))
    return decoded
