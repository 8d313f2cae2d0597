# login_logger/services/persister.py
"""
Журнал входов: дозапись событий в JSONL-файл.
Одна строка = одна запись, только добавление, без изменений и удалений.
"""
import os
import json
import fcntl
import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Запись не попала в журнал"""


def serialize(record: dict) -> bytes:
    """Однострочный JSON + перевод строки"""
    line = json.dumps(record, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
    return line.encode("utf-8") + b"\n"


class JsonlStore:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _ensure_dirs(self):
        """Создаем директорию журнала"""
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def append(self, record: dict) -> None:
        """Дописать запись под эксклюзивной блокировкой файла.

        Блокировка держится до fsync, поэтому параллельные писатели
        (потоки и процессы) не перемешивают строки. При сбое посреди
        записи файл обрезается до исходной длины.
        """
        try:
            data = serialize(record)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Запись не сериализуется в JSON: {e}") from e

        try:
            self._ensure_dirs()
            # Без буфера: после отката закрытие файла не должно дописать хвост
            with open(self.path, 'ab', buffering=0) as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    offset = f.seek(0, os.SEEK_END)
                    try:
                        self._write_all(f, data)
                        os.fsync(f.fileno())
                    except OSError:
                        self._rollback(f, offset)
                        raise
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except OSError as e:
            logger.error(f"Ошибка записи в журнал {self.path}: {e}")
            raise PersistenceError(str(e)) from e

    @staticmethod
    def _write_all(f, data: bytes):
        view = memoryview(data)
        while view:
            written = f.write(view)
            view = view[written:]

    def _rollback(self, f, offset: int):
        """Убрать частично записанную строку (блокировка еще удерживается)"""
        try:
            os.ftruncate(f.fileno(), offset)
            os.fsync(f.fileno())
        except OSError as e:
            logger.error(f"Не удалось откатить частичную запись в {self.path}: {e}")
