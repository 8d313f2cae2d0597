# login_logger/services/validator.py
"""
Проверка формы входящего события входа.
Все нарушения собираются в список, кроме ошибки типа верхнего уровня.
"""
from typing import Any, List, Tuple


def _is_number(value: Any) -> bool:
    # bool является подклассом int, но в JSON это не число
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate(event: Any) -> Tuple[bool, List[str]]:
    """Проверить событие. Возвращает (valid, errors)."""
    errors: List[str] = []

    if not isinstance(event, dict):
        errors.append("Payload must be a JSON object")
        return False, errors

    username = event.get("username")
    if not isinstance(username, str) or not username.strip():
        errors.append("username is required (non-empty string)")

    device = event.get("device")
    if device is not None and not isinstance(device, dict):
        errors.append("device must be an object when provided")
    elif device is not None:
        screen = device.get("screen")
        if screen is not None and not isinstance(screen, dict):
            errors.append("device.screen must be an object")
        elif screen is not None:
            for dimension in ("width", "height"):
                value = screen.get(dimension)
                if value is not None and not _is_number(value):
                    errors.append(f"device.screen.{dimension} must be numeric when provided")

    return not errors, errors
