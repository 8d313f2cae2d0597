# login_logger/services/enricher.py
from datetime import datetime

from login_logger.utils.clock import isoformat_utc


def enrich(redacted_event: dict, ip: str, now: datetime) -> dict:
    """Добавить серверные поля ip и timestamp. Значения сервера перекрывают клиентские."""
    return {
        **redacted_event,
        "ip": ip,
        "timestamp": isoformat_utc(now),
    }
