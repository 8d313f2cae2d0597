"""Дозапись в JSONL-журнал под блокировкой."""
import json
import multiprocessing
import os
import threading
from pathlib import Path

import pytest

from helpers import read_records
from login_logger.services import persister
from login_logger.services.persister import JsonlStore, PersistenceError, serialize


def _append_many(path: str, worker: int, count: int):
    store = JsonlStore(path)
    for i in range(count):
        store.append({"worker": worker, "seq": i, "payload": "x" * 2048})


class TestSerialize:
    def test_single_line_with_terminator(self):
        data = serialize({"username": "ray", "note": "line1\nline2"})
        assert data.endswith(b"\n")
        assert data.count(b"\n") == 1
        assert json.loads(data) == {"username": "ray", "note": "line1\nline2"}

    def test_unicode_is_written_as_utf8(self):
        data = serialize({"username": "Renée"})
        assert "Renée".encode("utf-8") in data

    def test_nan_is_rejected(self):
        with pytest.raises(ValueError):
            serialize({"value": float("nan")})


class TestAppend:
    def test_creates_parent_directory(self, tmp_path: Path):
        path = tmp_path / "a" / "b" / "logs.jsonl"
        JsonlStore(path).append({"username": "ray"})
        assert read_records(path) == [{"username": "ray"}]

    def test_appends_in_order(self, tmp_path: Path):
        path = tmp_path / "logs.jsonl"
        store = JsonlStore(path)
        for i in range(3):
            store.append({"seq": i})
        assert [r["seq"] for r in read_records(path)] == [0, 1, 2]

    def test_keeps_existing_content(self, tmp_path: Path):
        path = tmp_path / "logs.jsonl"
        path.write_text('{"seq":0}\n', encoding="utf-8")
        JsonlStore(path).append({"seq": 1})
        assert read_records(path) == [{"seq": 0}, {"seq": 1}]

    def test_fsync_is_called(self, tmp_path: Path, monkeypatch):
        calls = []
        real_fsync = os.fsync
        monkeypatch.setattr(persister.os, "fsync", lambda fd: calls.append(fd) or real_fsync(fd))
        JsonlStore(tmp_path / "logs.jsonl").append({"username": "ray"})
        assert len(calls) == 1


class TestFailures:
    def test_unwritable_location(self, tmp_path: Path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(PersistenceError):
            JsonlStore(blocker / "logs.jsonl").append({"username": "ray"})

    def test_unserializable_record(self, tmp_path: Path):
        path = tmp_path / "logs.jsonl"
        with pytest.raises(PersistenceError):
            JsonlStore(path).append({"value": float("inf")})
        assert not path.exists()

    def test_failed_write_leaves_no_partial_line(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "logs.jsonl"
        store = JsonlStore(path)
        store.append({"seq": 0})

        def broken_fsync(fd):
            raise OSError(5, "Input/output error")

        monkeypatch.setattr(persister.os, "fsync", broken_fsync)
        with pytest.raises(PersistenceError) as exc_info:
            store.append({"seq": 1})
        assert isinstance(exc_info.value.__cause__, OSError)

        monkeypatch.undo()
        assert read_records(path) == [{"seq": 0}]

    def test_lock_is_released_after_failure(self, tmp_path: Path, monkeypatch):
        path = tmp_path / "logs.jsonl"
        store = JsonlStore(path)

        def broken_fsync(fd):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(persister.os, "fsync", broken_fsync)
        with pytest.raises(PersistenceError):
            store.append({"seq": 0})
        monkeypatch.undo()

        store.append({"seq": 1})
        assert read_records(path) == [{"seq": 1}]


class TestConcurrency:
    def test_threads_never_interleave(self, tmp_path: Path):
        path = tmp_path / "logs.jsonl"
        workers, per_worker = 8, 25
        threads = [
            threading.Thread(target=_append_many, args=(str(path), w, per_worker))
            for w in range(workers)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        records = read_records(path)
        assert len(records) == workers * per_worker
        assert {(r["worker"], r["seq"]) for r in records} == {
            (w, i) for w in range(workers) for i in range(per_worker)
        }

    def test_processes_never_interleave(self, tmp_path: Path):
        path = tmp_path / "logs.jsonl"
        ctx = multiprocessing.get_context("fork")
        workers, per_worker = 4, 20
        processes = [
            ctx.Process(target=_append_many, args=(str(path), w, per_worker))
            for w in range(workers)
        ]
        for p in processes:
            p.start()
        for p in processes:
            p.join(timeout=30)
            assert p.exitcode == 0

        records = read_records(path)
        assert len(records) == workers * per_worker
        for worker in range(workers):
            seqs = [r["seq"] for r in records if r["worker"] == worker]
            assert seqs == list(range(per_worker))
