# login_logger/main.py
"""
Сборка FastAPI-приложения: роутеры, ограничение частоты, обработчики ошибок.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from login_logger import __version__
from login_logger.api import health_router, login_router
from login_logger.config import Settings
from login_logger.middleware import ThrottleMiddleware
from login_logger.models import ErrorResponse
from login_logger.services import JsonlStore, LoginPipeline, Notifier

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def _error(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=error).to_body())


def create_app(settings: Optional[Settings] = None,
               transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """Создать приложение. transport подменяет сетевой слой уведомлений (для тестов)."""
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        notifier = Notifier(settings, Notifier.create_client(settings, transport))
        app.state.pipeline = LoginPipeline(JsonlStore(settings.logs_path), notifier)
        logger.info(
            f"{settings.service_name} запущен: журнал {settings.logs_path}, "
            f"лимит {settings.throttle_max_per_min or 'выкл'}/мин"
        )
        try:
            yield
        finally:
            await notifier.aclose()
            logger.info(f"{settings.service_name} остановлен")

    app = FastAPI(title="Login Logger", version=__version__, lifespan=lifespan)
    app.state.settings = settings

    if settings.throttle_max_per_min > 0:
        app.add_middleware(ThrottleMiddleware, settings=settings)

    app.include_router(health_router)
    app.include_router(login_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # неизвестный маршрут и неподдерживаемый метод: одинаково 404
        if exc.status_code in (404, 405):
            return _error(404, "Not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Необработанная ошибка {request.method} {request.url.path}: {exc}")
        return _error(500, "Internal server error")

    return app
