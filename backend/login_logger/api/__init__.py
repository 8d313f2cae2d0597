# login_logger/api/__init__.py
from .login import router as login_router
from .health import router as health_router

__all__ = ["login_router", "health_router"]
