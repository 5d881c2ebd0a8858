"""Tests for contract generation and compilation (solc is mocked)."""

from __future__ import annotations

import pytest
from solcx.exceptions import SolcError, SolcInstallationError

from dualcall.forge import compiler
from dualcall.forge.compiler import CompileError, compile_contract
from dualcall.forge.contract import Contract, Event
from dualcall.theurgy.run import build_sample_contract


class TestContractSource:

    def test_sample_contract(self) -> None:
        source = build_sample_contract().source()

        assert "pragma solidity ^0.8.0;" in source
        assert "contract Sample {" in source
        assert "event A(address indexed val_0, address indexed val_1);" in source
        assert (
            "function setA(address val_0, uint256 val_1) public pure returns (address, uint256) {"
            in source
        )
        assert "return (val_0, val_1);" in source
        assert "function setA1() public payable {" in source
        assert (
            "emit A(0x0100000000000000000000000000000000000000, "
            "0x0100000000000000000000000000000000000000);"
        ) in source

    def test_address_literals_are_checksummed(self) -> None:
        contract = Contract().add_event(Event("B").add("address"))
        contract.emit_event("fire", "B", "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed")
        assert "emit B(0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed);" in contract.source()

    def test_literal_kinds(self) -> None:
        event = Event("C").add("uint256").add("bool").add("string")
        contract = Contract().add_event(event)
        contract.emit_event("fire", "C", 7, True, 'say "hi"')
        assert 'emit C(7, true, "say \\"hi\\"");' in contract.source()

    def test_reference_types_get_memory_location(self) -> None:
        source = Contract().add_dual_caller("echo", "string", "uint8[]").source()
        assert (
            "function echo(string memory val_0, uint8[] memory val_1) "
            "public pure returns (string memory, uint8[] memory) {"
        ) in source

    def test_emit_unknown_event(self) -> None:
        with pytest.raises(ValueError, match="event Z not found"):
            Contract().emit_event("fire", "Z")

    def test_emit_wrong_arity(self) -> None:
        contract = Contract().add_event(Event("A").add("address", indexed=True))
        with pytest.raises(ValueError, match="takes 1 values"):
            contract.emit_event("fire", "A")


class TestCompileContract:

    @pytest.fixture()
    def solc(self, monkeypatch: pytest.MonkeyPatch) -> dict:
        state: dict = {"installed": ["0.8.19"], "install": [], "compile": []}

        def compile_source(source, output_values, solc_version):
            state["compile"].append((source, output_values, solc_version))
            return {
                "<stdin>:Sample": {"abi": [{"type": "constructor", "inputs": []}], "bin": "6080"},
            }

        monkeypatch.setattr(compiler.solcx, "get_installed_solc_versions", lambda: state["installed"])
        monkeypatch.setattr(compiler.solcx, "install_solc", state["install"].append)
        monkeypatch.setattr(compiler.solcx, "compile_source", compile_source)
        return state

    def test_compiles_with_requested_version(self, solc: dict) -> None:
        compiled = compile_contract(build_sample_contract(), solc_version="0.8.19")

        assert compiled.name == "Sample"
        assert compiled.bin == "0x6080"
        assert compiled.abi == [{"type": "constructor", "inputs": []}]
        assert solc["install"] == []
        ((source, outputs, version),) = solc["compile"]
        assert outputs == ["abi", "bin"]
        assert version == "0.8.19"
        assert "contract Sample" in source

    def test_installs_missing_version(self, solc: dict) -> None:
        compile_contract(build_sample_contract(), solc_version="0.8.20")
        assert solc["install"] == ["0.8.20"]

    def test_version_from_environment(self, solc: dict, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SOLC_VERSION", "0.8.21")
        compile_contract(build_sample_contract())
        assert solc["compile"][0][2] == "0.8.21"

    def test_contract_missing_from_output(self, solc: dict) -> None:
        with pytest.raises(CompileError, match="Other not found"):
            compile_contract(Contract("Other"), solc_version="0.8.19")

    def test_solc_failure(self, solc: dict, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(source, output_values, solc_version):
            raise SolcError("ParserError: expected ';'")

        monkeypatch.setattr(compiler.solcx, "compile_source", broken)
        with pytest.raises(CompileError, match="solc 0.8.19 failed"):
            compile_contract(build_sample_contract(), solc_version="0.8.19")
        assert CompileError.exit_code == 3

    def test_install_failure(self, solc: dict, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(version):
            raise SolcInstallationError("download failed")

        solc["installed"] = []
        monkeypatch.setattr(compiler.solcx, "install_solc", broken)
        with pytest.raises(CompileError, match="download failed"):
            compile_contract(build_sample_contract(), solc_version="0.8.19")
        assert solc["compile"] == []
