"""Telegram notifier - delivers HTML alerts through the Bot API."""

from __future__ import annotations

import logging

from telegram import Bot, LinkPreviewOptions
from telegram.constants import ParseMode
from telegram.error import TelegramError

log = logging.getLogger(__name__)


class TelegramNotifier:
    """Sends messages to a single chat with python-telegram-bot.

    Delivery failures are logged and reported as ``False``; they never
    propagate, so a flaky Bot API cannot stop the poll loop.
    """

    def __init__(self, bot_token: str, chat_id: str | int) -> None:
        self._bot = Bot(token=bot_token)
        self._chat_id = chat_id

    async def send(self, text: str) -> bool:
        try:
            await self._bot.send_message(
                chat_id=self._chat_id,
                text=text,
                parse_mode=ParseMode.HTML,
                link_preview_options=LinkPreviewOptions(is_disabled=True),
            )
        except TelegramError as exc:
            log.error("Failed to send Telegram message: %s", exc)
            return False
        return True

    async def close(self) -> None:
        await self._bot.shutdown()
