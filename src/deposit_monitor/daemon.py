"""Main monitor loop - polls the chain and forwards USDT deposits to Telegram."""

from __future__ import annotations

import asyncio
import logging
import signal

from deposit_monitor.ethereum.source import DEPOSIT_EVENT_NAMES, Web3DepositSource
from deposit_monitor.interfaces.chain import ChainSource, RawEvent
from deposit_monitor.interfaces.notifier import Notifier
from deposit_monitor.messaging.notifier import TelegramNotifier
from deposit_monitor.messaging.templates import (
    TOKEN_SYMBOL,
    deposit_alert,
    local_timestamp,
    startup_message,
)
from deposit_monitor.models.config import MonitorConfig
from deposit_monitor.models.events import DepositEvent
from deposit_monitor.models.records import FilterResult, PollReport
from deposit_monitor.policy.filter import DepositFilter

log = logging.getLogger(__name__)


class DepositMonitor:
    """Block cursor poller for Deposit/Deposited events.

    Keeps an in-memory cursor (last scanned block). Each cycle queries the
    range (cursor, current height], alerts on nonzero USDT deposits and then
    advances the cursor. The cursor is not persisted: a restart begins at the
    chain head again.
    """

    def __init__(self, cfg: MonitorConfig) -> None:
        cfg.validate()
        self._cfg = cfg
        self._cursor: int | None = None
        self._running = False
        self._stopping = False

        self.source: ChainSource = Web3DepositSource(cfg.rpc_url, cfg.target_contract)
        self.notifier: Notifier = TelegramNotifier(cfg.bot_token, cfg.chat_id)
        self.filter = DepositFilter(cfg.token_contract)

    @property
    def cursor(self) -> int | None:
        return self._cursor

    @property
    def stopping(self) -> bool:
        return self._stopping

    async def initialize(self) -> None:
        """Baseline the cursor at the chain head and announce startup.

        A provider error propagates (fatal at startup). A failed startup
        notification is logged by the notifier and does not abort.
        """
        block = await self.source.get_current_height()
        self._cursor = block

        log.info("Deposit monitor started")
        log.info("  Current block: %d", block)
        log.info("  Contract: %s", self._cfg.target_contract)
        log.info("  Token: %s (%s)", TOKEN_SYMBOL, self._cfg.token_contract)
        log.info("  Interval: %gs", self._cfg.poll_interval)

        sent = await self.notifier.send(
            startup_message(block, self._cfg.target_contract, self._cfg.poll_interval)
        )
        if sent:
            log.info("Telegram connection OK")
        else:
            log.warning("Startup notification was not delivered, continuing")

    async def poll_once(self) -> PollReport | None:
        """Scan (cursor, current height] once.

        Returns None when the chain has not advanced. Errors reading the
        height propagate and leave the cursor unchanged.
        """
        if self._cursor is None:
            raise RuntimeError("poll_once() called before initialize()")

        current = await self.source.get_current_height()
        if current <= self._cursor:
            return None

        report = PollReport(from_block=self._cursor + 1, to_block=current)
        log.info(
            "Checking blocks %d to %d (%d blocks)",
            report.from_block, report.to_block, report.blocks_scanned,
        )

        batch: list[RawEvent] = []
        for name in DEPOSIT_EVENT_NAMES:
            try:
                entries = await self.source.query_logs(
                    name, report.from_block, report.to_block,
                )
            except Exception as exc:
                log.warning("%s query failed for %d-%d: %s",
                            name, report.from_block, report.to_block, exc)
                report.failed_queries.append(name)
                continue
            report.events_by_name[name] = len(entries)
            if entries:
                log.info("  Found %d %s events", len(entries), name)
            batch.extend(entries)

        if not batch:
            log.info("  No deposit events")

        for raw in batch:
            result = await self.handle_event(raw)
            if result is not None and result.delivered:
                report.alerts_sent += 1

        self._cursor = current
        return report

    async def handle_event(self, raw: RawEvent) -> FilterResult | None:
        """Decode one event, apply the token policy and alert if it passes.

        Returns the filter result, or None if the event could not be processed.
        """
        try:
            event = DepositEvent.from_log(raw)
            log.info(
                "Deposit event: user=%s token=%s amount=%d block=%d",
                event.user, event.token, event.amount, event.block_number,
            )

            result = self.filter.evaluate(event)
            if result.reason == "other_token":
                log.info("  Not %s, skipped", TOKEN_SYMBOL)
                return result
            if not result.accepted:
                log.info("  Amount is zero, skipped")
                return result

            log.info("  %s amount: %s", TOKEN_SYMBOL, result.display_amount)
            message = deposit_alert(
                event,
                result.display_amount or "",
                self._cfg.explorer_url,
                local_timestamp(self._cfg.timezone),
            )
            result.delivered = await self.notifier.send(message)
            if result.delivered:
                log.info("  Telegram alert sent")
            return result

        except Exception as exc:
            log.error("Failed to process event: %s", exc)
            log.error("  Event data: %r", raw)
            return None

    async def start(self) -> None:
        """Initialize, then run the poll loop until stopped.

        Client sessions are closed on stop() or a startup failure; a signal
        shutdown exits without cleanup.
        """
        try:
            await self.initialize()
            self._running = True
            log.info("Poll loop started, checking every %gs", self._cfg.poll_interval)
            await self._main_loop()
        finally:
            if not self._stopping:
                await self.close()
                log.info("Monitor shut down cleanly")

    def stop(self) -> None:
        """Ask the poll loop to exit after the current tick."""
        self._running = False

    def request_shutdown(self, sig: signal.Signals) -> None:
        """Record a termination signal; the caller cancels the running task."""
        self._stopping = True
        self._running = False
        log.info("Received %s, monitor stopped", sig.name)

    async def _main_loop(self) -> None:
        """Fixed-interval loop. Cycles never overlap: ticks missed while a
        slow cycle runs are skipped, not replayed."""
        loop = asyncio.get_running_loop()
        interval = self._cfg.poll_interval
        next_tick = loop.time() + interval

        while self._running:
            await asyncio.sleep(max(0.0, next_tick - loop.time()))
            if not self._running:
                break

            try:
                await self.poll_once()
            except Exception as exc:
                log.error("Block check failed: %s", exc, exc_info=True)

            next_tick += interval
            now = loop.time()
            if next_tick <= now:
                skipped = int((now - next_tick) // interval) + 1
                log.warning("Poll cycle overran its interval, skipping %d tick(s)", skipped)
                next_tick += skipped * interval

    async def close(self) -> None:
        for component in (self.source, self.notifier):
            closer = getattr(component, "close", None)
            if closer is not None:
                await closer()


async def run_monitor(cfg: MonitorConfig, monitor: DepositMonitor | None = None) -> None:
    """Entry point for running the monitor.

    SIGINT/SIGTERM cancel the monitor task immediately; in-flight queries and
    sends are abandoned and the coroutine returns normally.
    """
    monitor = monitor or DepositMonitor(cfg)
    loop = asyncio.get_running_loop()
    task = asyncio.ensure_future(monitor.start())

    def _signal_handler(sig: signal.Signals) -> None:
        monitor.request_shutdown(sig)
        task.cancel()

    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler, sig)
            installed.append(sig)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    try:
        await task
    except asyncio.CancelledError:
        if not monitor.stopping:
            raise
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
