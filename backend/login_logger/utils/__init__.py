# login_logger/utils/__init__.py
from .clock import utcnow, isoformat_utc
from .network import get_client_ip

__all__ = [
    "utcnow",
    "isoformat_utc",
    "get_client_ip"
]
