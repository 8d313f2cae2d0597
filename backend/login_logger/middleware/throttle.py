# login_logger/middleware/throttle.py
"""
Ограничение частоты запросов: не больше N запросов в минуту с одного IP.
Окна фиксированные (по границам минуты), счетчики хранятся в памяти процесса.
"""
import threading
import time
import logging
from typing import Callable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from login_logger.config import THROTTLE_WINDOW, Settings
from login_logger.models import ErrorResponse
from login_logger.utils.network import get_client_ip

logger = logging.getLogger(__name__)


class MinuteThrottle:
    def __init__(self, max_requests: int, window: int = THROTTLE_WINDOW,
                 clock: Callable[[], float] = time.time):
        self.max_requests = max_requests
        self.window = window
        self.clock = clock
        self._counters: dict[str, int] = {}  # ip -> число запросов в текущем окне
        self._current_window = -1
        self._lock = threading.Lock()

    def allow(self, key: str) -> bool:
        """Учесть запрос и проверить, укладывается ли он в лимит окна."""
        window_index = int(self.clock() // self.window)
        with self._lock:
            if window_index != self._current_window:
                # новое окно, старые счетчики больше не нужны
                self._counters.clear()
                self._current_window = window_index
            count = self._counters.get(key, 0) + 1
            self._counters[key] = count
        return count <= self.max_requests

    def retry_after(self) -> int:
        """Секунд до начала следующего окна"""
        return self.window - int(self.clock() % self.window)

    def __len__(self) -> int:
        with self._lock:
            return len(self._counters)


class ThrottleMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, settings: Settings, throttle: Optional[MinuteThrottle] = None):
        super().__init__(app)
        self.settings = settings
        self.throttle = throttle or MinuteThrottle(settings.throttle_max_per_min)

    async def dispatch(self, request: Request, call_next):
        client_ip = get_client_ip(request, self.settings.trust_proxy_headers)
        if not self.throttle.allow(client_ip):
            logger.warning(f"Rate limit exceeded for {client_ip}")
            return JSONResponse(
                status_code=429,
                content=ErrorResponse(error="Rate limit exceeded").to_body(),
                headers={"Retry-After": str(self.throttle.retry_after())},
            )
        return await call_next(request)
