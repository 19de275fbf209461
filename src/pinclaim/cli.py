"""CLI entry point for pinclaim."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, Awaitable, Callable

import click

from pinclaim.claims.expiration import is_expired
from pinclaim.claims.orchestrator import PinClaimOrchestrator, resolve_local_file
from pinclaim.claims.renewal import RenewalCoordinator
from pinclaim.claims.reprocess import ReprocessingCoordinator
from pinclaim.claims.status import PinStatusResolver
from pinclaim.config import load_config
from pinclaim.errors import (
    ClaimGenerationError,
    ClaimNotificationError,
    MissingArgument,
    PinClaimError,
    WalletError,
)
from pinclaim.models.config import ClientConfig
from pinclaim.models.records import ClaimSubmission
from pinclaim.service.pin_service import PinServiceClient
from pinclaim.storage.sqlite import SQLiteClaimJournal
from pinclaim.wallet.consumer import FileWalletLoader, load_signer
from pinclaim.wallet.generator import BurnClaimGenerator

log = logging.getLogger(__name__)


def _service(cfg: ClientConfig) -> PinServiceClient:
    return PinServiceClient(cfg.pin_service_url, cfg.http_timeout, cfg.max_upload_size)


def _wallet_loader(cfg: ClientConfig) -> FileWalletLoader:
    signer = load_signer(cfg.signer, config=cfg) if cfg.signer else None
    return FileWalletLoader(cfg.wallets_dir, cfg.wallet_url, signer, cfg.http_timeout)


def _generator(cfg: ClientConfig) -> BurnClaimGenerator:
    return BurnClaimGenerator(cfg.psf_token_id, cfg.write_price)


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _execute(command: str, work: Callable[[], Awaitable[None]]) -> None:
    """Run one command; every failure prints its message and exits 1."""
    try:
        asyncio.run(work())
    except ClaimNotificationError as exc:
        click.echo(f"Error in {command}: {exc}", err=True)
        click.echo("The pin claim is on the ledger but was not recorded by the service.", err=True)
        click.echo(f"  CID:                {exc.result.cid}", err=True)
        click.echo(f"  Proof-of-Burn TXID: {exc.result.pob_txid}", err=True)
        click.echo(f"  Pin Claim TXID:     {exc.result.claim_txid}", err=True)
        click.echo(f"Run 'pinclaim reprocess -c {exc.result.cid}' once the service accepts it.", err=True)
        sys.exit(1)
    except ClaimGenerationError as exc:
        click.echo(f"Error in {command}: {exc}", err=True)
        click.echo(f"  Proof-of-Burn TXID: {exc.pob_txid}", err=True)
        click.echo("The burn is recorded in 'pinclaim claim-history --orphaned'.", err=True)
        sys.exit(1)
    except PinClaimError as exc:
        click.echo(f"Error in {command}: {exc}", err=True)
        sys.exit(1)
    except Exception as exc:
        log.debug("Unexpected failure in %s", command, exc_info=True)
        click.echo(f"Error in {command}: {type(exc).__name__}: {exc}", err=True)
        sys.exit(1)


def _require_signer(cfg: ClientConfig) -> None:
    """Paid commands need a signer before anything is uploaded or burned."""
    if not cfg.signer:
        raise WalletError(
            "No transaction signer configured. Set wallet.signer in the "
            "config file or PINCLAIM_SIGNER."
        )


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """pinclaim - upload files to IPFS and pay for their pin claims."""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config_path)
    except PinClaimError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, ctx.obj["config"].log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Pin claims ─────────────────────────────────────────


@cli.command("pin-claim-file")
@click.option("-f", "--filename", default="", help="File name in the files directory (required)")
@click.option("-n", "--name", default="", help="Wallet name to pay for the pin claim (required)")
@click.pass_context
def pin_claim_file(ctx: click.Context, filename: str, name: str) -> None:
    """Upload a file to IPFS and generate a pin claim on the ledger."""
    cfg: ClientConfig = ctx.obj["config"]

    async def _pin_claim_file():
        PinClaimOrchestrator.validate(filename, name)
        _require_signer(cfg)
        journal = SQLiteClaimJournal(cfg.db_path)
        await journal.initialize()
        try:
            orchestrator = PinClaimOrchestrator(
                cfg, _service(cfg), _wallet_loader(cfg), _generator(cfg), journal=journal,
            )
            result = await orchestrator.pin_claim_file(filename, name)
        finally:
            await journal.close()

        click.echo("\nPin claim submitted successfully!")
        click.echo(f"  CID:                {result.cid}")
        click.echo(f"  Proof-of-Burn TXID: {result.pob_txid}")
        click.echo(f"  Pin Claim TXID:     {result.claim_txid}")

    _execute("pin-claim-file", _pin_claim_file)


@cli.command("pin-renew")
@click.option("-c", "--cid", default="", help="CID of the file to renew (required)")
@click.option("-n", "--name", default="", help="Wallet name to pay for renewal (required)")
@click.pass_context
def pin_renew(ctx: click.Context, cid: str, name: str) -> None:
    """Renew the pin claim for a CID with a new proof-of-burn."""
    cfg: ClientConfig = ctx.obj["config"]

    async def _renew():
        RenewalCoordinator.validate(cid, name)
        _require_signer(cfg)
        journal = SQLiteClaimJournal(cfg.db_path)
        await journal.initialize()
        try:
            coordinator = RenewalCoordinator(
                cfg,
                PinStatusResolver(_service(cfg)),
                _wallet_loader(cfg),
                _generator(cfg),
                journal=journal,
            )
            result = await coordinator.renew(cid, name)
        finally:
            await journal.close()

        if not result.expired:
            click.echo(f"WARNING: the pin claim had not expired yet ({result.previous_expiration}).")
        click.echo("\nPin claim renewed successfully!")
        click.echo(f"  Proof-of-Burn TXID: {result.pob_txid}")
        click.echo(f"  Pin Claim TXID:     {result.claim_txid}")
        click.echo("Pin claim has been renewed for one year.")

    _execute("pin-renew", _renew)


@cli.command("pin-status")
@click.option("-c", "--cid", default="", help="CID of the file to get the pin status of")
@click.pass_context
def pin_status(ctx: click.Context, cid: str) -> None:
    """Get the pin status of a CID."""
    cfg: ClientConfig = ctx.obj["config"]

    async def _status():
        record = await PinStatusResolver(_service(cfg)).get_status(cid)
        _echo_json(record.to_dict())
        if record.expiration_time and is_expired(record.expiration_time):
            click.echo("WARNING: The pin claim has expired!")

    _execute("pin-status", _status)


@cli.command("pin-upload")
@click.option("-f", "--filename", default="", help="File name in the files directory (required)")
@click.pass_context
def pin_upload(ctx: click.Context, filename: str) -> None:
    """Upload and pin a file to IPFS without claiming it."""
    cfg: ClientConfig = ctx.obj["config"]

    async def _upload():
        if not filename:
            raise MissingArgument("You must specify a filename with the -f flag.")
        path = resolve_local_file(cfg.files_dir, filename)
        result = await _service(cfg).upload_file(path, filename)
        _echo_json(result.raw)

    _execute("pin-upload", _upload)


@cli.command("pin-claim")
@click.option("-p", "--proofOfBurnTxid", "pob_txid", default="", help="Proof of Burn TxId (required)")
@click.option("-t", "--claimTxid", "claim_txid", default="", help="Claim TxId (required)")
@click.option("-f", "--filename", default="", help="File Name (required)")
@click.option("-a", "--address", default="", help="Address to claim the pin to (required)")
@click.option("-c", "--cid", default="", help="CID of the file (required)")
@click.pass_context
def pin_claim(
    ctx: click.Context,
    pob_txid: str,
    claim_txid: str,
    filename: str,
    address: str,
    cid: str,
) -> None:
    """Submit an existing proof-of-burn/claim pair to the pinning service."""
    cfg: ClientConfig = ctx.obj["config"]

    async def _claim():
        required = [
            (pob_txid, "a proof-of-burn txid with the -p flag"),
            (claim_txid, "a claim txid with the -t flag"),
            (filename, "a filename with the -f flag"),
            (address, "an address with the -a flag"),
            (cid, "a CID with the -c flag"),
        ]
        for value, what in required:
            if not value:
                raise MissingArgument(f"You must specify {what}.")

        data = await _service(cfg).submit_claim(ClaimSubmission(
            cid=cid,
            filename=filename,
            claim_txid=claim_txid,
            proof_of_burn_txid=pob_txid,
            address=address,
        ))
        _echo_json(data)

    _execute("pin-claim", _claim)


# ── Reprocessing ───────────────────────────────────────


@cli.command("unprocessed-pins")
@click.pass_context
def unprocessed_pins(ctx: click.Context) -> None:
    """List pin claims whose validClaim is still null."""
    cfg: ClientConfig = ctx.obj["config"]

    async def _unprocessed():
        records = await ReprocessingCoordinator(_service(cfg)).list_unprocessed()
        if not records:
            click.echo("No unprocessed pin claims.")
            return
        _echo_json([r.to_dict() for r in records])

    _execute("unprocessed-pins", _unprocessed)


@cli.command("reprocess")
@click.option("-c", "--cid", default="", help="CID of the file to repin")
@click.pass_context
def reprocess(ctx: click.Context, cid: str) -> None:
    """Resubmit the pin claim for a CID whose validClaim is null."""
    cfg: ClientConfig = ctx.obj["config"]

    async def _reprocess():
        if not cid:
            raise MissingArgument("You must specify a CID with the -c flag.")
        journal = SQLiteClaimJournal(cfg.db_path)
        await journal.initialize()
        try:
            data = await ReprocessingCoordinator(_service(cfg), journal).reprocess(cid)
        finally:
            await journal.close()
        _echo_json(data)

    _execute("reprocess", _reprocess)


@cli.command("claim-history")
@click.option("-c", "--cid", default=None, help="Only show claims for this CID")
@click.option("--orphaned", is_flag=True, help="Only show claims the service never recorded")
@click.pass_context
def claim_history(ctx: click.Context, cid: str | None, orphaned: bool) -> None:
    """Show proof-of-burn/claim pairs broadcast from this machine."""
    cfg: ClientConfig = ctx.obj["config"]

    async def _history():
        journal = SQLiteClaimJournal(cfg.db_path)
        await journal.initialize()
        try:
            if orphaned:
                entries = await journal.get_orphaned()
                if cid:
                    entries = [e for e in entries if e.cid == cid]
            else:
                entries = await journal.get_entries(cid)
        finally:
            await journal.close()

        if not entries:
            click.echo("No claims recorded.")
            return

        for e in entries:
            click.echo(
                f"  #{e.id} [{e.status:13s}] {e.operation:6s} cid={e.cid} "
                f"pob={e.pob_txid} claim={e.claim_txid} at={e.created_at}"
            )
            if e.message:
                click.echo(f"      {e.message}")

    _execute("claim-history", _history)


# ── Info ───────────────────────────────────────────────


@cli.command("config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Show the effective configuration."""
    cfg: ClientConfig = ctx.obj["config"]
    click.echo(f"Pin service:  {cfg.pin_service_url}")
    click.echo(f"Wallet API:   {cfg.wallet_url}")
    click.echo(f"Wallets dir:  {cfg.wallets_dir}")
    click.echo(f"Signer:       {cfg.signer or '(not set)'}")
    click.echo(f"PSF token:    {cfg.psf_token_id}")
    click.echo(f"Write price:  {cfg.write_price} PSF/MB")
    click.echo(f"Files dir:    {cfg.files_dir}")
    click.echo(f"Max upload:   {cfg.max_upload_size} bytes")
    click.echo(f"Journal:      {cfg.db_path}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
