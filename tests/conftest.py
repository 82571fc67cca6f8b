"""Shared fixtures for deposit_monitor tests."""

from __future__ import annotations

import pytest
from pytest_metadata.plugin import metadata_key

from deposit_monitor.daemon import DepositMonitor
from deposit_monitor.models.config import MonitorConfig, TARGET_CONTRACT, USDT_CONTRACT

from tests.mocks import MockChainSource, MockNotifier

TEST_RPC_URL = "http://127.0.0.1:8545"
TEST_BOT_TOKEN = "123456789:AAEtestTOKENtestTOKENtestTOKENtest12"
TEST_CHAT_ID = "1234567890"

EXPLORER_BASE = "https://etherscan.io"

START_BLOCK = 19_000_000


def etherscan_link(kind: str, id: str, label: str | None = None) -> str:
    """Build an HTML anchor to etherscan for the report."""
    url = f"{EXPLORER_BASE}/{kind}/{id}"
    text = label or f"{id[:8]}...{id[-4:]}"
    return f'<a href="{url}" target="_blank">{text}</a>'


# ── Report metadata & explorer links ─────────────────────────────


def pytest_configure(config):
    """Add monitored contracts to the HTML report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Network"] = "Ethereum Mainnet"
    meta["Target Contract"] = TARGET_CONTRACT
    meta["Token (USDT)"] = USDT_CONTRACT


def pytest_html_results_summary(prefix, summary, postfix):
    """Inject clickable etherscan links into the report summary."""
    prefix.append(
        '<div style="margin:8px 0;padding:10px;background:#f8f9fa;border:1px solid #dee2e6;'
        'border-radius:4px;font-family:monospace;font-size:13px;">'
        "<strong>Etherscan Links</strong><br/>"
        f'Target: {etherscan_link("address", TARGET_CONTRACT, TARGET_CONTRACT)}<br/>'
        f'USDT: {etherscan_link("token", USDT_CONTRACT, USDT_CONTRACT)}'
        "</div>"
    )


def make_test_config(**overrides) -> MonitorConfig:
    """Build a MonitorConfig suitable for testing."""
    defaults = dict(
        poll_interval=0.01,
        rpc_url=TEST_RPC_URL,
        bot_token=TEST_BOT_TOKEN,
        chat_id=TEST_CHAT_ID,
        timezone="UTC",
    )
    defaults.update(overrides)
    return MonitorConfig(**defaults)


@pytest.fixture
def test_config():
    """Default MonitorConfig for tests."""
    return make_test_config()


@pytest.fixture
def mock_source():
    return MockChainSource(heights=[START_BLOCK])


@pytest.fixture
def mock_notifier():
    return MockNotifier(succeed=True)


@pytest.fixture
def monitor(test_config, mock_source, mock_notifier):
    """DepositMonitor with mocked chain source and notifier."""
    m = DepositMonitor(test_config)
    m.source = mock_source
    m.notifier = mock_notifier
    return m


@pytest.fixture
async def started_monitor(monitor):
    """Monitor whose cursor has been baselined at START_BLOCK."""
    await monitor.initialize()
    monitor.notifier.messages.clear()
    monitor.notifier.attempts = 0
    return monitor
