# login_logger/middleware/__init__.py
from .throttle import MinuteThrottle, ThrottleMiddleware

__all__ = ["MinuteThrottle", "ThrottleMiddleware"]
