"""CLI entry point for the deposit monitor."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from deposit_monitor.config import load_config
from deposit_monitor.daemon import DepositMonitor, run_monitor
from deposit_monitor.ethereum.source import DEPOSIT_EVENT_NAMES
from deposit_monitor.models.config import ConfigError, MonitorConfig

log = logging.getLogger(__name__)


def _mask(secret: str) -> str:
    return "***configured***" if secret else "(not set)"


def _build_monitor(cfg: MonitorConfig) -> DepositMonitor:
    """Construct the monitor or exit with the list of missing settings."""
    try:
        return DepositMonitor(cfg)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        if cfg.missing():
            click.echo("Set ETH_RPC_URL, TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID.", err=True)
        sys.exit(1)


@click.group()
@click.option("-c", "--config", "config_path", default=None, help="Path to config TOML file")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """deposit-monitor - USDT deposit alerts from an Ethereum contract to Telegram."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _apply_log_level(ctx: click.Context, cfg: MonitorConfig) -> None:
    if not ctx.obj["verbose"]:
        logging.getLogger().setLevel(cfg.log_level.upper())


# ── Monitor ────────────────────────────────────────────


@cli.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Start the monitor and poll until SIGINT/SIGTERM."""
    cfg = load_config(ctx.obj["config_path"])
    monitor = _build_monitor(cfg)
    _apply_log_level(ctx, cfg)

    click.echo(f"Starting deposit monitor (contract: {cfg.target_contract})")
    try:
        asyncio.run(run_monitor(cfg, monitor))
    except Exception as exc:
        log.critical("Monitor crashed: %s", exc, exc_info=True)
        sys.exit(1)
    click.echo("Monitor stopped")


# ── Info ───────────────────────────────────────────────


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the effective configuration."""
    cfg = load_config(ctx.obj["config_path"])
    click.echo(f"RPC URL:    {cfg.rpc_url or '(not set)'}")
    click.echo(f"Contract:   {cfg.target_contract}")
    click.echo(f"Token:      {cfg.token_contract}")
    click.echo(f"Interval:   {cfg.poll_interval:g}s")
    click.echo(f"Explorer:   {cfg.explorer_url}")
    click.echo(f"Timezone:   {cfg.timezone or '(system local)'}")
    click.echo(f"Bot token:  {_mask(cfg.bot_token)}")
    click.echo(f"Chat ID:    {cfg.chat_id or '(not set)'}")
    missing = cfg.missing()
    if missing:
        click.echo(f"\nMissing:    {', '.join(missing)}")


@cli.command()
@click.option("--blocks", type=int, default=100, show_default=True,
              help="How many recent blocks to scan for deposit logs")
@click.option("--notify", is_flag=True, help="Also send a test Telegram message")
@click.pass_context
def check(ctx: click.Context, blocks: int, notify: bool) -> None:
    """Check RPC connectivity (and optionally Telegram delivery)."""
    cfg = load_config(ctx.obj["config_path"])
    monitor = _build_monitor(cfg)
    _apply_log_level(ctx, cfg)

    async def _check() -> bool:
        try:
            height = await monitor.source.get_current_height()
            click.echo(f"Current block: {height}")

            start = max(0, height - blocks + 1)
            for name in DEPOSIT_EVENT_NAMES:
                try:
                    entries = await monitor.source.query_logs(name, start, height)
                except Exception as exc:
                    click.echo(f"  {name}: query failed ({exc})")
                    continue
                click.echo(f"  {name}: {len(entries)} logs in blocks {start}-{height}")

            if notify:
                ok = await monitor.notifier.send(
                    "✅ <b>Deposit monitor check</b>\n\n"
                    f"📍 Current block: {height}"
                )
                click.echo(f"Telegram:      {'sent' if ok else 'FAILED'}")
                return ok
            return True
        finally:
            await monitor.close()

    try:
        ok = asyncio.run(_check())
    except Exception as exc:
        click.echo(f"RPC check failed: {exc}", err=True)
        sys.exit(1)
    if not ok:
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
