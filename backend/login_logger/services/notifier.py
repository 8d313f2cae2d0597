# login_logger/services/notifier.py
"""
Уведомления о входе в Discord (webhook) и Telegram (bot sendMessage).
Доставка не гарантируется: ошибки каналов возвращаются в отчете и не
пробрасываются наружу.
"""
import asyncio
import logging
from typing import Any, Optional

import httpx

from login_logger.config import Settings
from login_logger.models import ChannelResult, NotificationReport

logger = logging.getLogger(__name__)

NA = "n/a"


class NotificationError(Exception):
    """Канал уведомлений ответил не-2xx"""


def _text(value: Any) -> str:
    return NA if value is None else str(value)


def _section(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def build_notification(record: dict) -> str:
    """Короткое человекочитаемое сообщение о входе"""
    device = _section(record.get("device"))
    screen = _section(device.get("screen"))
    width = screen.get("width")
    height = screen.get("height")
    size = f"{width}x{height}" if width is not None and height is not None else NA

    return "\n".join([
        "🔔 New login:",
        f"- user: {_text(record.get('username'))}",
        f"- ip: {_text(record.get('ip'))}",
        f"- os: {_text(device.get('platform'))}",
        f"- lang: {_text(device.get('language'))}",
        f"- screen: {size}",
        f"- time: {_text(record.get('timestamp'))}",
    ])


def _describe(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


class Notifier:
    def __init__(self, settings: Settings, client: httpx.AsyncClient):
        self.settings = settings
        self.client = client

    @staticmethod
    def create_client(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
        """HTTP-клиент с таймаутами connect/read по NOTIFY_TIMEOUT"""
        timeout = httpx.Timeout(settings.notify_timeout)
        return httpx.AsyncClient(timeout=timeout, transport=transport)

    async def _post(self, name: str, url: str, **kwargs) -> None:
        response = await self.client.post(url, **kwargs)
        if not response.is_success:
            raise NotificationError(f"{name} HTTP {response.status_code}")

    async def notify_discord(self, message: str) -> ChannelResult:
        """Отправить сообщение в Discord webhook"""
        url = self.settings.discord_webhook_url
        if not url:
            logger.debug("Discord webhook не настроен, пропускаем")
            return ChannelResult(channel="discord", ok=False, error="DISCORD_WEBHOOK_URL not set")

        content = message[:self.settings.discord_max_length]
        try:
            await self._post("Discord", url, json={"content": content})
        except (NotificationError, httpx.HTTPError) as e:
            return ChannelResult(channel="discord", ok=False, error=_describe(e))
        return ChannelResult(channel="discord", ok=True)

    async def notify_telegram(self, message: str) -> ChannelResult:
        """Отправить сообщение через Telegram bot API"""
        token = self.settings.telegram_bot_token
        chat_id = self.settings.telegram_chat_id
        if not token:
            return ChannelResult(channel="telegram", ok=False, error="TELEGRAM_BOT_TOKEN not set")
        if not chat_id:
            return ChannelResult(channel="telegram", ok=False, error="TELEGRAM_CHAT_ID not set")

        url = f"{self.settings.telegram_api_base}/bot{token}/sendMessage"
        try:
            await self._post("Telegram", url, data={"chat_id": chat_id, "text": message})
        except (NotificationError, httpx.HTTPError) as e:
            return ChannelResult(channel="telegram", ok=False, error=_describe(e))
        return ChannelResult(channel="telegram", ok=True)

    async def notify(self, record: dict) -> NotificationReport:
        """Разослать уведомление в оба канала параллельно.

        Каналы независимы: сбой одного не мешает второму.
        """
        message = build_notification(record)
        results = await asyncio.gather(
            self.notify_discord(message),
            self.notify_telegram(message),
            return_exceptions=True,
        )

        discord, telegram = [
            ChannelResult(channel=channel, ok=False, error=_describe(r)) if isinstance(r, Exception) else r
            for channel, r in zip(("discord", "telegram"), results)
        ]
        return NotificationReport(discord=discord, telegram=telegram)

    async def aclose(self):
        await self.client.aclose()
