"""CLI entry point for the spl_airdrop service."""

from __future__ import annotations

import asyncio
import json
import logging
import sys

import click
from solders.pubkey import Pubkey

from spl_airdrop.api.handler import AirdropHandler
from spl_airdrop.api.server import run_server
from spl_airdrop.config import load_config
from spl_airdrop.errors import AirdropError
from spl_airdrop.models.config import AirdropConfig
from spl_airdrop.solana.connection import open_session
from spl_airdrop.solana.explorer import resolve_cluster
from spl_airdrop.solana.keys import decode_secret_key
from spl_airdrop.solana.queries import LAMPORTS_PER_SOL, token_account_address
from spl_airdrop.storage import make_claim_store
from spl_airdrop.storage.sqlite import SQLiteClaimStore


def _load(ctx: click.Context) -> AirdropConfig:
    try:
        return load_config(ctx.obj["config_path"])
    except AirdropError as exc:
        click.echo(f"Error: {exc.error}", err=True)
        sys.exit(1)


def _require_settings(cfg: AirdropConfig) -> None:
    """Exit with error if a required setting is missing."""
    if missing := cfg.missing_setting():
        click.echo(f"Error: Missing {missing} environment variable.", err=True)
        click.echo("Set it in the environment or in the config TOML.", err=True)
        sys.exit(1)


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """spl-airdrop - One-time SPL token airdrop endpoint."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Server ─────────────────────────────────────────────


@cli.command()
@click.option("--host", default=None, help="Bind address (overrides config)")
@click.option("--port", type=int, default=None, help="Bind port (overrides config)")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Start the airdrop HTTP endpoint.

    Required settings are checked per request, so the server starts even
    when they are missing and answers 500 naming the absent variable.
    """
    cfg = _load(ctx)
    if host:
        cfg.host = host
    if port:
        cfg.port = port

    config_path = ctx.obj["config_path"]
    click.echo(f"Starting spl-airdrop on {cfg.host}:{cfg.port}{cfg.route}")
    asyncio.run(run_server(cfg, config_loader=lambda: load_config(config_path)))


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show resolved configuration."""
    cfg = _load(ctx)
    click.echo(f"RPC URL:     {cfg.rpc_url or '(not set)'}")
    click.echo(f"Cluster:     {resolve_cluster(cfg)}")
    click.echo(f"Mint:        {cfg.token_mint or '(not set)'}")
    click.echo(f"Amount:      {cfg.token_amount} {cfg.token_symbol} ({cfg.token_decimals} decimals)")
    click.echo(f"Claim store: {cfg.claim_store.value}")
    click.echo(f"DB path:     {cfg.db_path}")
    click.echo(f"Listen:      {cfg.host}:{cfg.port}{cfg.route}")
    click.echo(f"Secret:      {'***configured***' if cfg.sender_secret else '(not set)'}")


@cli.command()
@click.pass_context
def balance(ctx: click.Context) -> None:
    """Show the sender wallet's SOL and token balance."""
    cfg = _load(ctx)
    _require_settings(cfg)

    async def _balance():
        try:
            keypair = decode_secret_key(cfg.sender_secret)
            mint = Pubkey.from_string(cfg.token_mint)
        except (AirdropError, ValueError) as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

        session = open_session(cfg, keypair)
        try:
            queries = session.queries
            sender = keypair.pubkey()
            ata = token_account_address(sender, mint)
            click.echo(f"Sender:         {sender}")
            click.echo(f"Token account:  {ata}")

            lamports = await queries.get_sol_balance(sender)
            click.echo(f"SOL:            {lamports / LAMPORTS_PER_SOL:.9f}")

            try:
                token_balance = await queries.get_token_balance(ata)
            except Exception as exc:
                click.echo(f"Token balance:  unavailable ({exc})", err=True)
                sys.exit(1)
            whole = token_balance.amount / 10 ** token_balance.decimals
            claims_left = token_balance.amount // cfg.raw_amount if cfg.raw_amount else 0
            click.echo(f"Token balance:  {whole:,.{token_balance.decimals}f} {cfg.token_symbol}")
            click.echo(f"Claims left:    {claims_left} at {cfg.token_amount} per claim")
        finally:
            await session.close()

    asyncio.run(_balance())


@cli.command()
@click.option("--status", "filter_status", default=None, help="Filter by status (pending, completed, failed)")
@click.option("-n", "--limit", type=int, default=50, help="Number of claims to show")
@click.option("--reset", "reset_address", default=None, metavar="ADDRESS",
              help="Mark a stuck pending claim as failed so the wallet can claim again")
@click.pass_context
def claims(
    ctx: click.Context, filter_status: str | None, limit: int, reset_address: str | None,
) -> None:
    """List recorded claims from the SQLite claim ledger.

    A request interrupted mid-submission (e.g. server shutdown) leaves its
    claim ``pending``. Check the sender's history on the explorer first:
    if the transfer never landed, ``--reset ADDRESS`` releases the claim.
    """
    cfg = _load(ctx)

    async def _reset(store: SQLiteClaimStore, address: str) -> None:
        claim = await store.get_claim(address)
        if claim is None:
            click.echo(f"Error: No claim recorded for {address}", err=True)
            sys.exit(1)
        if claim.status != "pending":
            click.echo(
                f"Error: Claim for {address} is {claim.status}; only pending claims can be reset",
                err=True,
            )
            sys.exit(1)
        await store.release(address, "reset by operator")
        click.echo(f"Claim for {address} reset; the wallet may claim again.")

    async def _claims():
        store = SQLiteClaimStore(cfg.db_path)
        await store.initialize()
        try:
            if reset_address:
                await _reset(store, reset_address.strip())
                return

            records = await store.list_claims(filter_status, limit)
            if not records:
                click.echo("No claims recorded.")
                return

            for c in records:
                sig = f"{c.signature[:16]}..." if c.signature else "-"
                click.echo(f"  [{c.status:9s}] {c.wallet_address} amount={c.amount or 0} "
                           f"sig={sig} at={c.updated_at}")
                if c.error:
                    click.echo(f"              error: {c.error}")
        finally:
            await store.close()

    asyncio.run(_claims())


# ── One-off airdrop ────────────────────────────────────


@cli.command()
@click.argument("wallet_address")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def airdrop(ctx: click.Context, wallet_address: str, yes: bool) -> None:
    """Send the airdrop to WALLET_ADDRESS through the same checks as the endpoint."""
    cfg = _load(ctx)
    _require_settings(cfg)

    if not yes:
        click.confirm(
            f"Send {cfg.token_amount} {cfg.token_symbol} to {wallet_address}?", abort=True,
        )

    async def _airdrop():
        store = make_claim_store(cfg)
        await store.initialize()
        try:
            handler = AirdropHandler(config_loader=lambda: cfg, claim_store=store)
            return await handler.handle("POST", {"walletAddress": wallet_address})
        finally:
            await store.close()

    result = asyncio.run(_airdrop())
    click.echo(json.dumps(result.body, indent=2))
    if result.status != 200:
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
