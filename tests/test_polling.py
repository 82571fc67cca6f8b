"""Block cursor advancement and per-signature query handling."""

from __future__ import annotations

import pytest

from tests.conftest import START_BLOCK
from tests.factories import make_deposit_log


# ── Cursor baseline & no-op ──────────────────────────────────────


async def test_initialize_baselines_cursor_at_chain_head(monitor, mock_source):
    """No backfill: cursor starts at the current height, nothing queried."""
    await monitor.initialize()

    assert monitor.cursor == START_BLOCK
    assert mock_source.query_calls == []


async def test_poll_at_same_height_is_noop(started_monitor, mock_source):
    """Height == cursor → no log query, cursor unchanged."""
    report = await started_monitor.poll_once()

    assert report is None
    assert mock_source.query_calls == []
    assert started_monitor.cursor == START_BLOCK


async def test_poll_with_lower_height_does_not_rewind(started_monitor, mock_source):
    """A lagging node (height < cursor) never moves the cursor backwards."""
    mock_source.heights = [START_BLOCK - 3]

    assert await started_monitor.poll_once() is None
    assert started_monitor.cursor == START_BLOCK
    assert mock_source.query_calls == []


async def test_poll_before_initialize_raises(monitor):
    with pytest.raises(RuntimeError):
        await monitor.poll_once()


# ── Range partitioning ───────────────────────────────────────────


async def test_ranges_partition_successive_heights(started_monitor, mock_source):
    """h0 < h1 < ... → windows [prev+1, curr], contiguous and non-overlapping."""
    heights = [START_BLOCK + 1, START_BLOCK + 5, START_BLOCK + 5, START_BLOCK + 12]
    mock_source.heights = list(heights)

    for _ in heights:
        await started_monitor.poll_once()

    expected = [
        (START_BLOCK + 1, START_BLOCK + 1),
        (START_BLOCK + 2, START_BLOCK + 5),
        (START_BLOCK + 6, START_BLOCK + 12),
    ]
    assert mock_source.ranges("Deposit") == expected
    assert mock_source.ranges("Deposited") == expected
    assert started_monitor.cursor == START_BLOCK + 12

    covered = [b for lo, hi in expected for b in range(lo, hi + 1)]
    assert covered == list(range(START_BLOCK + 1, START_BLOCK + 13))


async def test_both_signatures_queried_in_order(started_monitor, mock_source):
    mock_source.heights = [START_BLOCK + 2]

    report = await started_monitor.poll_once()

    assert [name for name, _, _ in mock_source.query_calls] == ["Deposit", "Deposited"]
    assert report.from_block == START_BLOCK + 1
    assert report.to_block == START_BLOCK + 2
    assert report.blocks_scanned == 2
    assert report.total_events == 0


async def test_events_processed_in_query_order(started_monitor, mock_source, mock_notifier):
    """Deposit results first, then Deposited results, each in provider order."""
    mock_source.heights = [START_BLOCK + 10]
    mock_source.stage(
        "Deposit",
        make_deposit_log(amount=1_000_000, block_number=START_BLOCK + 7),
        make_deposit_log(amount=2_000_000, block_number=START_BLOCK + 9),
    )
    mock_source.stage(
        "Deposited",
        make_deposit_log(amount=3_000_000, block_number=START_BLOCK + 2, event="Deposited"),
    )

    report = await started_monitor.poll_once()

    assert report.events_by_name == {"Deposit": 2, "Deposited": 1}
    assert report.alerts_sent == 3
    amounts = [m.split("<b>Amount:</b> ")[1].split(" ")[0] for m in mock_notifier.messages]
    assert amounts == ["1.00", "2.00", "3.00"]


# ── Query failures ───────────────────────────────────────────────


async def test_failed_signature_does_not_block_other(started_monitor, mock_source, mock_notifier):
    """'Deposit' query raises → 'Deposited' events still alerted, cursor advances."""
    mock_source.heights = [START_BLOCK + 4]
    mock_source.failing["Deposit"] = ValueError("no matching event in ABI")
    mock_source.stage(
        "Deposited",
        make_deposit_log(amount=5_000_000, block_number=START_BLOCK + 3, event="Deposited"),
    )

    report = await started_monitor.poll_once()

    assert report.failed_queries == ["Deposit"]
    assert report.events_by_name == {"Deposited": 1}
    assert len(mock_notifier.messages) == 1
    assert "5.00 USDT" in mock_notifier.messages[0]
    assert started_monitor.cursor == START_BLOCK + 4


async def test_both_signatures_failing_still_advances(started_monitor, mock_source):
    """Per-signature failures count as empty results, not cycle failures."""
    mock_source.heights = [START_BLOCK + 4]
    mock_source.failing["Deposit"] = ConnectionError("timeout")
    mock_source.failing["Deposited"] = ConnectionError("timeout")

    report = await started_monitor.poll_once()

    assert report.failed_queries == ["Deposit", "Deposited"]
    assert started_monitor.cursor == START_BLOCK + 4


async def test_height_failure_leaves_cursor(started_monitor, mock_source):
    """Cycle-level failure propagates and the same range is retried next time."""
    mock_source.height_error = ConnectionError("rpc down")

    with pytest.raises(ConnectionError):
        await started_monitor.poll_once()
    assert started_monitor.cursor == START_BLOCK

    mock_source.height_error = None
    mock_source.heights = [START_BLOCK + 3]
    await started_monitor.poll_once()

    assert mock_source.ranges("Deposit") == [(START_BLOCK + 1, START_BLOCK + 3)]


async def test_bad_event_does_not_stop_batch(started_monitor, mock_source, mock_notifier, caplog):
    """Malformed record is logged with its payload; the next event still alerts."""
    mock_source.heights = [START_BLOCK + 2]
    broken = {"event": "Deposit", "args": {"user": "0xabc"}, "blockNumber": START_BLOCK + 1}
    mock_source.stage("Deposit", broken, make_deposit_log(block_number=START_BLOCK + 2))

    report = await started_monitor.poll_once()

    assert report.alerts_sent == 1
    assert len(mock_notifier.messages) == 1
    assert "Event data" in caplog.text
    assert started_monitor.cursor == START_BLOCK + 2


async def test_undelivered_alert_not_counted(started_monitor, mock_source, mock_notifier):
    """Telegram refusing the alert → attempted once, alerts_sent stays 0."""
    mock_notifier.succeed = False
    mock_source.heights = [START_BLOCK + 1]
    mock_source.stage("Deposit", make_deposit_log(block_number=START_BLOCK + 1))

    report = await started_monitor.poll_once()

    assert mock_notifier.attempts == 1
    assert report.alerts_sent == 0
    assert started_monitor.cursor == START_BLOCK + 1
