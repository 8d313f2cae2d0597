# login_logger/config.py
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

# Основные настройки
SERVICE_NAME = "login-logger"
DEFAULT_BIND = "0.0.0.0"
DEFAULT_PORT = 4567

# Пути к файлам
BASE_DIR = Path(__file__).resolve().parent.parent
LOGS_FILE = BASE_DIR / "logs.jsonl"

# Ограничение частоты запросов
THROTTLE_MAX_PER_MIN = 60
THROTTLE_WINDOW = 60  # секунд

# Уведомления
TELEGRAM_API_BASE = "https://api.telegram.org"
NOTIFY_TIMEOUT = 5  # секунд, connect и read
DISCORD_MAX_LENGTH = 1900

# Логирование
LOG_LEVEL = "INFO"


def _env_str(name: str) -> Optional[str]:
    """Значение переменной окружения; пустая строка считается отсутствием."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_int(name: str, default: int) -> int:
    value = _env_str(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _env_bool(name: str, default: bool = False) -> bool:
    value = _env_str(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Настройки процесса. Читаются один раз при старте и не меняются."""

    model_config = ConfigDict(frozen=True)

    service_name: str = SERVICE_NAME
    bind: str = DEFAULT_BIND
    port: int = DEFAULT_PORT
    throttle_max_per_min: int = THROTTLE_MAX_PER_MIN
    logs_path: Path = LOGS_FILE

    discord_webhook_url: Optional[str] = None
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    telegram_api_base: str = TELEGRAM_API_BASE
    notify_timeout: float = NOTIFY_TIMEOUT
    discord_max_length: int = DISCORD_MAX_LENGTH

    trust_proxy_headers: bool = False
    log_level: str = LOG_LEVEL

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """Собрать настройки из окружения (с подгрузкой .env, если он есть)."""
        load_dotenv(env_file or os.getenv("ENV_FILE") or ".env")

        return cls(
            service_name=_env_str("SERVICE_NAME") or SERVICE_NAME,
            bind=_env_str("BIND") or DEFAULT_BIND,
            port=_env_int("PORT", DEFAULT_PORT),
            throttle_max_per_min=_env_int("THROTTLE_MAX_PER_MIN", THROTTLE_MAX_PER_MIN),
            logs_path=Path(_env_str("LOGS_PATH") or LOGS_FILE),
            discord_webhook_url=_env_str("DISCORD_WEBHOOK_URL"),
            telegram_bot_token=_env_str("TELEGRAM_BOT_TOKEN"),
            telegram_chat_id=_env_str("TELEGRAM_CHAT_ID"),
            telegram_api_base=(_env_str("TELEGRAM_API_BASE") or TELEGRAM_API_BASE).rstrip("/"),
            trust_proxy_headers=_env_bool("TRUST_PROXY_HEADERS"),
            log_level=(_env_str("LOG_LEVEL") or LOG_LEVEL).upper(),
        )
