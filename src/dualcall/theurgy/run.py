"""
Run - Deploy the sample contract and exercise it end to end.

Flow:
1. Load the funding key and print its balance
2. Ask the node for its chain id (EIP-155 signer)
3. Generate and compile the Sample contract
4. Deploy it and wait for the receipt
5. Call setA1() in a transaction and print the emitted events
6. Call setA(address, uint256) read-only and print the decoded fields
"""

from __future__ import annotations

import sys

import click

from ..forge.compiler import DEFAULT_SOLC_VERSION, compile_contract
from ..forge.contract import Contract, Event
from ..pneuma.abi import decode_logs, method_sig
from ..pneuma.rpc import DEFAULT_RPC_URL, get_balance, get_chain_id
from ..pneuma.tx import call_method, deploy, send_transaction
from ..sigil.eth import get_address, load_private_key


ONE_ADDRESS = "0x0100000000000000000000000000000000000000"


def build_sample_contract() -> Contract:
    """Sample contract: event A, dual caller setA, emitter setA1."""
    contract = Contract("Sample")
    contract.add_event(Event("A").add("address", indexed=True).add("address", indexed=True))
    contract.add_dual_caller("setA", "address", "uint256")
    contract.emit_event("setA1", "A", ONE_ADDRESS, ONE_ADDRESS)
    return contract


def _fail(exc: Exception) -> None:
    click.secho(f"ERROR: {exc}", fg="red", err=True)
    sys.exit(getattr(exc, "exit_code", 1))


@click.command()
@click.option(
    "--rpc-url",
    envvar="ETH_RPC_URL",
    default=DEFAULT_RPC_URL,
    help="JSON-RPC endpoint",
)
@click.option(
    "--solc-version",
    envvar="SOLC_VERSION",
    default=DEFAULT_SOLC_VERSION,
    help="Solidity compiler version",
)
def run(rpc_url: str, solc_version: str) -> None:
    """
    Deploy the Sample contract and exercise it.

    Sends two transactions from the funding key (deployment and setA1)
    and one read-only call (setA).
    """
    try:
        private_key = load_private_key()
        address = get_address(private_key)

        balance = get_balance(address, rpc_url=rpc_url)
        click.echo(f"Balance: {balance}")

        chain_id = get_chain_id(rpc_url=rpc_url)

        compiled = compile_contract(build_sample_contract(), solc_version=solc_version)

        contract_address, _ = deploy(
            compiled.bin,
            private_key=private_key,
            chain_id=chain_id,
            rpc_url=rpc_url,
        )
        click.echo(f"Contract deployed: {contract_address}")

        receipt = send_transaction(
            {"to": contract_address, "data": method_sig("setA1")},
            private_key=private_key,
            chain_id=chain_id,
            rpc_url=rpc_url,
        )
        for event in decode_logs(compiled.abi, receipt.get("logs", [])):
            fields = ", ".join(f"{k}={v}" for k, v in event.args.items())
            click.echo(f"{event.name}({fields}) @ {event.address}")

        resp = call_method(
            compiled.abi,
            contract_address,
            "setA",
            [ONE_ADDRESS, 1],
            private_key=private_key,
            rpc_url=rpc_url,
        )
        click.echo(resp["0"])
        click.echo(resp["1"])
    except Exception as exc:
        _fail(exc)
