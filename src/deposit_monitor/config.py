"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from deposit_monitor.models.config import MonitorConfig


def load_config(
    config_path: str | Path | None = None,
    environ: dict[str, str] | None = None,
) -> MonitorConfig:
    """Load monitor configuration from a TOML file and environment variables.

    Priority (highest wins):
        1. Environment variables (ETH_RPC_URL, TELEGRAM_BOT_TOKEN, TELEGRAM_CHAT_ID,
           DEPOSIT_MONITOR_LOG_LEVEL)
        2. TOML config file
        3. Defaults from MonitorConfig

    The target contract, token and poll interval are not read from the
    environment; only the TOML file may override them.
    """
    env = os.environ if environ is None else environ

    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    values: dict = {}

    # ── Monitor section ────────────────────────────────────
    monitor = raw.get("monitor", {})
    if (v := monitor.get("poll_interval")) is not None:
        values["poll_interval"] = float(v)
    if v := monitor.get("log_level"):
        values["log_level"] = str(v)
    if v := monitor.get("timezone"):
        values["timezone"] = str(v)

    # ── Ethereum section ───────────────────────────────────
    ethereum = raw.get("ethereum", {})
    if v := ethereum.get("rpc_url"):
        values["rpc_url"] = str(v)
    if v := ethereum.get("target_contract"):
        values["target_contract"] = str(v)
    if v := ethereum.get("token_contract"):
        values["token_contract"] = str(v)
    if v := ethereum.get("explorer_url"):
        values["explorer_url"] = str(v)

    # ── Telegram section ───────────────────────────────────
    telegram = raw.get("telegram", {})
    if v := telegram.get("bot_token"):
        values["bot_token"] = str(v)
    if v := telegram.get("chat_id"):
        values["chat_id"] = str(v)

    # ── Environment variable overrides (highest priority) ──
    if rpc := env.get("ETH_RPC_URL"):
        values["rpc_url"] = rpc
    if token := env.get("TELEGRAM_BOT_TOKEN"):
        values["bot_token"] = token
    if chat := env.get("TELEGRAM_CHAT_ID"):
        values["chat_id"] = chat
    if level := env.get("DEPOSIT_MONITOR_LOG_LEVEL"):
        values["log_level"] = level

    return MonitorConfig(**values)
