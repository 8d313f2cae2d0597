# login_logger/models/__init__.py
from .notification import ChannelResult, NotificationReport
from .responses import LoginAccepted, ErrorResponse, HealthResponse

__all__ = [
    "ChannelResult", "NotificationReport",
    "LoginAccepted", "ErrorResponse", "HealthResponse"
]
