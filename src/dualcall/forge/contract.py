"""
Contract generator - assembles the Solidity source of a throwaway
contract used to exercise deployment, event emission and calls.

Shape of the generated contract:
- events with parameters named val_0, val_1, ...
- dual callers: pure functions returning their arguments unchanged
- emitters: functions that emit an event with literal values
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..pneuma.tx import _to_checksum_address


SOLIDITY_PRAGMA = "^0.8.0"


@dataclass
class Event:
    name: str
    params: list[tuple[str, bool]] = field(default_factory=list)

    def add(self, typ: str, indexed: bool = False) -> "Event":
        self.params.append((typ, indexed))
        return self

    def declaration(self) -> str:
        args = []
        for index, (typ, indexed) in enumerate(self.params):
            flag = " indexed" if indexed else ""
            args.append(f"{typ}{flag} val_{index}")
        return f"event {self.name}({', '.join(args)});"


def _literal(typ: str, value: Any) -> str:
    """Render a Python value as a Solidity literal of the given type."""
    if typ == "address":
        return _to_checksum_address(str(value))
    if typ == "bool":
        return "true" if value else "false"
    if typ == "string":
        escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if typ.startswith(("uint", "int")):
        return str(int(value))
    if typ.startswith("bytes"):
        return f"{typ}(hex\"{str(value).removeprefix('0x')}\")"
    raise ValueError(f"Unsupported literal type: {typ}")


class Contract:
    """Builder for the generated test contract."""

    def __init__(self, name: str = "Sample"):
        self.name = name
        self.events: dict[str, Event] = {}
        self.callbacks: list[str] = []

    def add_event(self, event: Event) -> "Contract":
        self.events[event.name] = event
        return self

    def add_dual_caller(self, func_name: str, *types: str) -> "Contract":
        """Add a function that returns its own arguments."""
        inputs = ", ".join(f"{_location(t)} val_{i}" for i, t in enumerate(types))
        outputs = ", ".join(_location(t) for t in types)
        values = ", ".join(f"val_{i}" for i in range(len(types)))

        self.callbacks.append(
            f"function {func_name}({inputs}) public pure returns ({outputs}) {{\n"
            f"        return ({values});\n"
            f"    }}"
        )
        return self

    def emit_event(self, func_name: str, event_name: str, *values: Any) -> "Contract":
        """Add a function that emits event_name with the given literal values."""
        event = self.events.get(event_name)
        if event is None:
            raise ValueError(f"event {event_name} not found")
        if len(values) != len(event.params):
            raise ValueError(
                f"event {event_name} takes {len(event.params)} values, got {len(values)}"
            )

        literals = ", ".join(
            _literal(typ, value) for (typ, _), value in zip(event.params, values)
        )
        self.callbacks.append(
            f"function {func_name}() public payable {{\n"
            f"        emit {event_name}({literals});\n"
            f"    }}"
        )
        return self

    def source(self) -> str:
        lines = [
            "// SPDX-License-Identifier: MIT",
            f"pragma solidity {SOLIDITY_PRAGMA};",
            "",
            f"contract {self.name} {{",
        ]
        for event in self.events.values():
            lines.append(f"    {event.declaration()}")
        if self.events:
            lines.append("")
        lines.append("    constructor() {}")
        for callback in self.callbacks:
            lines.append("")
            lines.append(f"    {callback}")
        lines.append("}")
        return "\n".join(lines) + "\n"


def _location(typ: str) -> str:
    # Reference types need a data location in function signatures
    if typ in ("string", "bytes") or typ.endswith("]"):
        return f"{typ} memory"
    return typ
