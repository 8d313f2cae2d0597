# login_logger/services/pipeline.py
"""
Обработка одного запроса POST /login:
разбор → проверка → редактирование → обогащение → запись → уведомления.
"""
import json
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from login_logger.models import ErrorResponse, LoginAccepted, NotificationReport
from login_logger.services.enricher import enrich
from login_logger.services.notifier import Notifier
from login_logger.services.persister import JsonlStore, PersistenceError
from login_logger.services.redactor import redact
from login_logger.services.validator import validate
from login_logger.utils.clock import utcnow

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    REDACTED = "redacted"
    ENRICHED = "enriched"
    PERSISTED = "persisted"
    NOTIFIED = "notified"
    RESPONDED = "responded"
    # терминальные ошибки
    REJECTED_EMPTY = "rejected_empty"
    REJECTED_MALFORMED = "rejected_malformed"
    REJECTED_INVALID = "rejected_invalid"
    FAILED = "failed"


@dataclass
class PipelineOutcome:
    status_code: int
    body: dict
    history: List[PipelineState] = field(default_factory=list)
    record: Optional[dict] = None
    notifications: Optional[NotificationReport] = None

    @property
    def state(self) -> PipelineState:
        return self.history[-1]


MAX_NESTING = 100

_OPEN = frozenset(b"[{")
_CLOSE = frozenset(b"]}")
_QUOTE = ord('"')
_BACKSLASH = ord("\\")


def _reject_constant(name: str):
    raise ValueError(f"Unexpected token {name}")


def nesting_depth(raw: bytes) -> int:
    """Максимальная вложенность скобок вне строк, без рекурсии"""
    depth = deepest = 0
    in_string = escaped = False
    for byte in raw:
        if in_string:
            if escaped:
                escaped = False
            elif byte == _BACKSLASH:
                escaped = True
            elif byte == _QUOTE:
                in_string = False
        elif byte == _QUOTE:
            in_string = True
        elif byte in _OPEN:
            depth += 1
            deepest = max(deepest, depth)
        elif byte in _CLOSE:
            depth -= 1
    return deepest


def parse_body(raw: bytes):
    """Разбор JSON; NaN/Infinity не принимаются, их нельзя записать обратно в JSON.

    Вложенность ограничена MAX_NESTING до разбора, иначе рекурсивные стадии
    (разбор, редактирование, сериализация) упадут с RecursionError.
    """
    depth = nesting_depth(raw)
    if depth > MAX_NESTING:
        raise ValueError(f"nesting of {depth} is too deep")
    return json.loads(raw, parse_constant=_reject_constant)


class LoginPipeline:
    def __init__(
        self,
        store: JsonlStore,
        notifier: Notifier,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.notifier = notifier
        self.clock = clock

    @staticmethod
    def _reject(history: List[PipelineState], state: PipelineState, status_code: int,
                error: str, details=None) -> PipelineOutcome:
        history.append(state)
        body = ErrorResponse(error=error, details=details).to_body()
        return PipelineOutcome(status_code=status_code, body=body, history=history)

    async def process(self, raw: bytes, client_ip: str) -> PipelineOutcome:
        """Провести запрос через все стадии и вернуть итог с кодом ответа"""
        history = [PipelineState.RECEIVED]

        if raw is None or not raw.strip():
            return self._reject(history, PipelineState.REJECTED_EMPTY, 400, "Empty body")

        try:
            payload = parse_body(raw)
        except ValueError as e:
            return self._reject(history, PipelineState.REJECTED_MALFORMED, 400, "Invalid JSON", str(e))

        valid, errors = validate(payload)
        if not valid:
            logger.info(f"/login from {client_ip}: validation failed: {errors}")
            return self._reject(history, PipelineState.REJECTED_INVALID, 422, "Validation failed", errors)
        history.append(PipelineState.VALIDATED)

        redacted = redact(payload)
        history.append(PipelineState.REDACTED)

        record = enrich(redacted, client_ip, self.clock())
        history.append(PipelineState.ENRICHED)

        try:
            await asyncio.to_thread(self.store.append, record)
        except PersistenceError as e:
            logger.error(f"Failed to write log: {e}")
            return self._reject(history, PipelineState.FAILED, 500, "Failed to persist log")
        history.append(PipelineState.PERSISTED)

        report = await self.notifier.notify(record)
        history.append(PipelineState.NOTIFIED)
        self._log_report(client_ip, record, report)

        history.append(PipelineState.RESPONDED)
        return PipelineOutcome(
            status_code=201,
            body=LoginAccepted().model_dump(),
            history=history,
            record=record,
            notifications=report,
        )

    @staticmethod
    def _log_report(client_ip: str, record: dict, report: NotificationReport):
        logger.info(
            f"/login from {client_ip} user={record.get('username')} "
            f"discord={report.discord.ok} telegram={report.telegram.ok}"
        )
        for channel, error in report.errors.items():
            logger.warning(f"{channel.capitalize()} notify error: {error}")
