"""
Solidity compilation through py-solc-x.

The requested compiler is installed on first use.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Optional

import solcx
from solcx.exceptions import SolcError, SolcInstallationError

from .contract import Contract


DEFAULT_SOLC_VERSION = "0.8.19"


class CompileError(RuntimeError):
    exit_code: int = 3


@dataclass(frozen=True)
class CompiledContract:
    name: str
    abi: list[dict[str, Any]]
    bin: str


def get_solc_version() -> str:
    """Get the solc version from environment or default."""
    return os.environ.get("SOLC_VERSION", DEFAULT_SOLC_VERSION)


def ensure_solc(version: str) -> None:
    """Install the given solc version unless it is already present."""
    installed = {str(v) for v in solcx.get_installed_solc_versions()}
    if version not in installed:
        solcx.install_solc(version)


def compile_contract(contract: Contract, solc_version: Optional[str] = None) -> CompiledContract:
    """
    Compile a generated contract.

    Args:
        contract: Contract builder
        solc_version: Compiler version (default: SOLC_VERSION or 0.8.19)

    Returns:
        CompiledContract with ABI and 0x-prefixed init code

    Raises:
        CompileError: If solc cannot be installed, rejects the source,
                      or the contract is missing
    """
    version = solc_version or get_solc_version()
    try:
        ensure_solc(version)
        compiled = solcx.compile_source(
            contract.source(),
            output_values=["abi", "bin"],
            solc_version=version,
        )
    except (SolcError, SolcInstallationError, OSError) as exc:
        raise CompileError(f"solc {version} failed: {exc}") from exc

    for contract_id, interface in compiled.items():
        if contract_id.split(":")[-1] == contract.name:
            bytecode = interface["bin"]
            if not bytecode:
                raise CompileError(f"No bytecode for {contract.name}")
            if not bytecode.startswith("0x"):
                bytecode = "0x" + bytecode
            return CompiledContract(name=contract.name, abi=interface["abi"], bin=bytecode)

    raise CompileError(f"Contract {contract.name} not found in solc output")
