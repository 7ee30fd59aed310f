"""
ethrpc CLI

Command-line interface for querying an Ethereum-compatible node.

Commands:
  demo          - Run the example calls (block number, block, gas, version)
  block-number  - Latest block number
  block         - Block by number or hash
  tx            - Transaction by hash
  receipt       - Transaction receipt
  nonce         - Transaction count of an address
  gas-price     - Current gas price
  estimate-gas  - Estimate gas for a value transfer
  send-raw      - Broadcast a signed raw transaction
  logs          - Logs matching a filter
  chain-id      - Chain ID
  net-version   - Network version
  syncing       - Sync status
  call          - Any JSON-RPC method
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import click

from .client import EthereumClient, normalize_log_filter
from .config import NODE_URL_ENV, load_node_config
from .errors import ConfigError
from .log import configure_logging
from .outcome import RpcOutcome
from .projection import JsonValue, project_to_string


# ============ Constants ============

VERSION = "0.1.0"

# Sample values used by `ethrpc demo`
DEMO_BLOCK_NUMBER = "0x5d5f"
DEMO_ADDRESS = "0x7960f1b90b257bff29d5164d16bca4c8030b7f6d"
DEMO_VALUE = "0x9184e72a"


# ============ Context ============


class CliState:
    """Lazily builds one EthereumClient for the invoked command."""

    def __init__(self, config_path: Optional[Path], rpc_url: Optional[str]) -> None:
        self.config_path = config_path
        self.rpc_url = rpc_url
        self._client: Optional[EthereumClient] = None

    @property
    def client(self) -> EthereumClient:
        if self._client is None:
            if self.rpc_url:
                self._client = EthereumClient(self.rpc_url)
            else:
                try:
                    config = load_node_config(config_path=self.config_path)
                except ConfigError as exc:
                    click.secho(f"ERROR: {exc}", fg="red", err=True)
                    sys.exit(exc.exit_code)
                self._client = EthereumClient(config.node_url, timeout=config.timeout)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()


pass_state = click.make_pass_decorator(CliState)


# ============ Output ============


def _echo_value(value: JsonValue) -> None:
    if isinstance(value, (dict, list)):
        click.echo(json.dumps(value, indent=2, sort_keys=True))
    else:
        click.echo(project_to_string(value))


def _emit(label: Optional[str], outcome: RpcOutcome) -> None:
    """Print a successful outcome, or report its failure and exit 1."""
    if not outcome.ok:
        failure = outcome.failure
        click.secho(
            f"ERROR: {outcome.method} failed ({failure.kind.value}): {failure.message}",
            fg="red",
            err=True,
        )
        sys.exit(1)
    if label:
        click.echo(click.style(f"{label}: ", dim=True), nl=False)
    _echo_value(outcome.value)


def _parse_json_arg(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"{what} is not valid JSON: {exc}") from exc


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="ethrpc")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file with a \"nodeUrl\" entry",
)
@click.option(
    "--rpc-url",
    envvar=NODE_URL_ENV,
    help="Node JSON-RPC URL (overrides config files)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log request/response traces")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    rpc_url: Optional[str],
    verbose: bool,
) -> None:
    """Query an Ethereum JSON-RPC node."""
    configure_logging(verbose)
    state = CliState(config_path=config_path, rpc_url=rpc_url)
    ctx.obj = state
    ctx.call_on_close(state.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============ Demo ============


@cli.command()
@pass_state
def demo(state: CliState) -> None:
    """Run the example calls against the configured node."""
    client = state.client

    block_number = client.get_block_number()
    if block_number is not None:
        click.echo(f"Current Block Number: {block_number}")

    block = client.get_block_by_number(DEMO_BLOCK_NUMBER, True)
    if block is not None:
        click.echo("Block Data:")
        _echo_value(block)

    gas = client.estimate_gas(DEMO_ADDRESS, DEMO_ADDRESS, DEMO_VALUE)
    if gas is not None:
        click.echo(f"Estimated Gas: {gas}")

    version = client.get_network_version()
    if version is not None:
        click.echo(f"Network Version: {version}")


# ============ Scalar Queries ============


def _emit_text(label: str, value: Optional[str]) -> None:
    # None only ever means failure here; the reason is already logged.
    if value is None:
        click.secho(f"ERROR: could not fetch {label.lower()}", fg="red", err=True)
        sys.exit(1)
    click.echo(click.style(f"{label}: ", dim=True) + value)


@cli.command("block-number")
@pass_state
def block_number(state: CliState) -> None:
    """Latest block number."""
    _emit_text("Block Number", state.client.get_block_number())


@cli.command("gas-price")
@pass_state
def gas_price(state: CliState) -> None:
    """Current gas price in wei (hex)."""
    _emit_text("Gas Price", state.client.get_gas_price())


@cli.command("chain-id")
@pass_state
def chain_id(state: CliState) -> None:
    """Chain ID (hex)."""
    _emit_text("Chain ID", state.client.get_chain_id())


@cli.command("net-version")
@pass_state
def net_version(state: CliState) -> None:
    """Network version."""
    _emit_text("Network Version", state.client.get_network_version())


@cli.command()
@click.argument("address")
@click.option("--block-tag", default="latest", show_default=True, help="latest, pending, or hex block number")
@pass_state
def nonce(state: CliState, address: str, block_tag: str) -> None:
    """Transaction count (nonce) of ADDRESS."""
    _emit_text("Nonce", state.client.get_transaction_count(address, block_tag))


@cli.command("estimate-gas")
@click.option("--from", "sender", required=True, help="Sender address")
@click.option("--to", "to", required=True, help="Recipient address")
@click.option("--value", default="0x0", show_default=True, help="Amount in wei (hex)")
@pass_state
def estimate_gas(state: CliState, sender: str, to: str, value: str) -> None:
    """Estimate gas for a value transfer."""
    _emit_text("Estimated Gas", state.client.estimate_gas(sender, to, value))


@cli.command("send-raw")
@click.argument("raw_tx")
@pass_state
def send_raw(state: CliState, raw_tx: str) -> None:
    """Broadcast a signed raw transaction (0x-prefixed hex)."""
    _emit_text("Transaction Hash", state.client.send_raw_transaction(raw_tx))


# ============ Structured Queries ============
#
# These go through execute() so a null result ("not found") can be told
# apart from a failed call.


@cli.command()
@pass_state
def syncing(state: CliState) -> None:
    """Sync status (false when fully synced)."""
    _emit("Syncing", state.client.execute("eth_syncing", []))


@cli.command()
@click.argument("block_id")
@click.option("--hash", "by_hash", is_flag=True, help="Treat BLOCK_ID as a block hash")
@click.option("--full", is_flag=True, help="Include full transaction objects")
@pass_state
def block(state: CliState, block_id: str, by_hash: bool, full: bool) -> None:
    """Block by hex number (or tag), or by hash with --hash."""
    method = "eth_getBlockByHash" if by_hash else "eth_getBlockByNumber"
    _emit(None, state.client.execute(method, [block_id, full]))


@cli.command()
@click.argument("tx_hash")
@pass_state
def tx(state: CliState, tx_hash: str) -> None:
    """Transaction by hash."""
    _emit(None, state.client.execute("eth_getTransactionByHash", [tx_hash]))


@cli.command()
@click.argument("tx_hash")
@pass_state
def receipt(state: CliState, tx_hash: str) -> None:
    """Transaction receipt by hash."""
    _emit(None, state.client.execute("eth_getTransactionReceipt", [tx_hash]))


@cli.command()
@click.argument("filter_json")
@pass_state
def logs(state: CliState, filter_json: str) -> None:
    """Logs matching FILTER_JSON (one filter object or an array of them)."""
    filter_params = _parse_json_arg(filter_json, "FILTER_JSON")
    _emit(None, state.client.execute("eth_getLogs", normalize_log_filter(filter_params)))


# ============ Generic ============


@cli.command()
@click.argument("method")
@click.argument("params_json", required=False, default="[]")
@pass_state
def call(state: CliState, method: str, params_json: str) -> None:
    """Call any METHOD with a JSON array of positional PARAMS_JSON."""
    params = _parse_json_arg(params_json, "PARAMS_JSON")
    if not isinstance(params, list):
        raise click.BadParameter("PARAMS_JSON must be a JSON array")
    _emit(None, state.client.execute(method, params))


# ============ Entry Points ============


def main() -> None:
    """ethrpc CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
