# login_logger/models/notification.py
from pydantic import BaseModel
from typing import Optional


class ChannelResult(BaseModel):
    channel: str  # discord | telegram
    ok: bool
    error: Optional[str] = None


class NotificationReport(BaseModel):
    discord: ChannelResult
    telegram: ChannelResult

    @property
    def errors(self) -> dict:
        """Ошибки каналов: channel -> текст ошибки"""
        return {
            result.channel: result.error
            for result in (self.discord, self.telegram)
            if result.error
        }
