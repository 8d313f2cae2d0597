# login_logger/services/redactor.py
from typing import Any, FrozenSet, Iterable

SENSITIVE_KEYS = frozenset({"password", "token"})
REDACTED = "[REDACTED]"


def _walk(value: Any, keys: FrozenSet[str]) -> Any:
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in keys else _walk(v, keys)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_walk(item, keys) for item in value]
    return value


def redact(value: Any, sensitive_keys: Iterable[str] = SENSITIVE_KEYS) -> Any:
    """Рекурсивно заменить значения чувствительных ключей на [REDACTED].

    Обходит словари и списки на любой глубине, исходный объект не меняет.
    Повторный вызов на результате ничего не меняет.
    """
    keys = frozenset(k.lower() for k in sensitive_keys)
    return _walk(value, keys)
