"""
Общие фикстуры: настройки с временным журналом, подмененный сетевой слой
уведомлений и TestClient поверх собранного приложения.
"""
from pathlib import Path
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from login_logger.config import Settings
from login_logger.main import create_app

DISCORD_URL = "https://discord.test/api/webhooks/1/abc"
TELEGRAM_BASE = "https://telegram.test"


@pytest.fixture
def logs_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "logs.jsonl"


@pytest.fixture
def settings(logs_path: Path) -> Settings:
    return Settings(
        logs_path=logs_path,
        discord_webhook_url=DISCORD_URL,
        telegram_bot_token="123:TEST",
        telegram_chat_id="42",
        telegram_api_base=TELEGRAM_BASE,
        throttle_max_per_min=0,
    )


@pytest.fixture
def sent() -> List[httpx.Request]:
    return []


@pytest.fixture
def responder() -> dict:
    """Обработчики по хосту; тест может заменить любой из них"""
    return {
        "discord.test": lambda request: httpx.Response(204),
        "telegram.test": lambda request: httpx.Response(200, json={"ok": True}),
    }


@pytest.fixture
def transport(sent: List[httpx.Request], responder: dict) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        sent.append(request)
        return responder[request.url.host](request)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_client(transport: httpx.MockTransport) -> Callable[..., TestClient]:
    clients = []

    def factory(app_settings: Settings, **kwargs) -> TestClient:
        client = TestClient(create_app(app_settings, transport=transport), **kwargs)
        client.__enter__()
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, settings: Settings) -> TestClient:
    return make_client(settings)
