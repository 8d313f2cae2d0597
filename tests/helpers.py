"""Вспомогательные функции для тестов."""
import json
from pathlib import Path
from typing import List


def read_records(path: Path) -> List[dict]:
    """Прочитать журнал: каждая строка должна быть самостоятельным JSON"""
    if not path.exists():
        return []
    text = path.read_text(encoding="utf-8")
    assert text == "" or text.endswith("\n")
    return [json.loads(line) for line in text.splitlines()]
