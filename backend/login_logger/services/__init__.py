# login_logger/services/__init__.py
from .validator import validate
from .redactor import redact, REDACTED, SENSITIVE_KEYS
from .enricher import enrich
from .persister import JsonlStore, PersistenceError
from .notifier import Notifier, NotificationError, build_notification
from .pipeline import LoginPipeline, PipelineOutcome, PipelineState

__all__ = [
    "validate",
    "redact",
    "REDACTED",
    "SENSITIVE_KEYS",
    "enrich",
    "JsonlStore",
    "PersistenceError",
    "Notifier",
    "NotificationError",
    "build_notification",
    "LoginPipeline",
    "PipelineOutcome",
    "PipelineState"
]
