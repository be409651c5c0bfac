"""Tests for filing identity, on-disk layout, and file helpers."""

from __future__ import annotations

import json
import tempfile
import threading
import time

import pytest

from filing_rag.errors import StorageError, ValidationError
from filing_rag.storage import locks
from filing_rag.storage.files import (
    atomic_write,
    read_json,
    read_jsonl,
    write_json,
    write_jsonl,
)
from filing_rag.storage.locks import filing_lock
from filing_rag.storage.paths import FilingKey, FilingStorage


class TestFilingKey:
    def test_normalizes(self):
        key = FilingKey(" aapl ", "10-k", " 2024-11-01 ")
        assert (key.ticker, key.form, key.filed) == ("AAPL", "10-K", "2024-11-01")

    def test_equal_after_normalization(self):
        assert FilingKey("aapl", "10-k", "2024-11-01") == FilingKey("AAPL", "10-K", "2024-11-01")
        assert len({FilingKey("aapl", "10-k", "2024-11-01"), FilingKey("AAPL", "10-K", "2024-11-01")}) == 1

    def test_folder_name(self):
        assert FilingKey("MSFT", "10-Q", "2024-04-25").folder_name == "10-Q_2024-04-25"

    def test_str(self):
        assert str(FilingKey("msft", "10-q", "2024-04-25")) == "MSFT 10-Q 2024-04-25"

    @pytest.mark.parametrize("ticker, form, filed", [
        ("../OUTSIDE", "X", "x"),
        ("AAPL", "10-K/../..", "2024-11-01"),
        ("AAPL", "10-K", ".."),
        ("AAPL", "10-K", "2024\\11\\01"),
        ("AAPL\x00", "10-K", "2024-11-01"),
        ("  ", "10-K", "2024-11-01"),
    ])
    def test_rejects_values_that_escape_the_data_root(self, ticker, form, filed):
        with pytest.raises(ValidationError):
            FilingKey(ticker, form, filed)

    def test_allows_dots_and_dashes(self):
        key = FilingKey("brk.b", "10-K.A", "2024-11-01")
        assert (key.ticker, key.folder_name) == ("BRK.B", "10-K.A_2024-11-01")


class TestFilingStorage:
    def test_paths(self, tmp_path):
        storage = FilingStorage(tmp_path)
        key = FilingKey("aapl", "10-K", "2024-11-01")
        base = tmp_path / "AAPL" / "10-K_2024-11-01"
        assert storage.filing_dir(key) == base
        assert storage.text_path(key) == base / "text.txt"
        assert storage.sections_path(key) == base / "sections.json"
        assert storage.chunks_path(key) == base / "chunks.jsonl"
        assert storage.embeddings_path(key) == base / "embeddings.json"

    def test_exists(self, storage, filing_key, write_text):
        assert not storage.exists(filing_key, "text.txt")
        write_text(filing_key, "hello")
        assert storage.exists(filing_key, "text.txt")

    def test_list_filings(self, storage, write_text):
        write_text(FilingKey("MSFT", "10-Q", "2024-04-25"), "a")
        write_text(FilingKey("AAPL", "10-K", "2024-11-01"), "b")
        write_text(FilingKey("AAPL", "10-K", "2023-11-03"), "c")
        (storage.data_root / "AAPL" / "notes").mkdir()

        assert storage.list_filings() == [
            FilingKey("AAPL", "10-K", "2023-11-03"),
            FilingKey("AAPL", "10-K", "2024-11-01"),
            FilingKey("MSFT", "10-Q", "2024-04-25"),
        ]

    def test_list_filings_missing_root(self, tmp_path):
        assert FilingStorage(tmp_path / "nope").list_filings() == []

    def test_list_filings_skips_unusable_names(self, storage, filing_key, write_text):
        write_text(filing_key, "a")
        (storage.data_root / "AAPL" / "_2024-11-01").mkdir()
        assert storage.list_filings() == [filing_key]


class TestFiles:
    def test_write_json_compact(self, tmp_path):
        path = tmp_path / "out" / "data.json"
        write_json(path, [{"a": 1, "b": [1.5, 2]}])
        assert path.read_text() == '[{"a":1,"b":[1.5,2]}]'
        assert read_json(path) == [{"a": 1, "b": [1.5, 2]}]

    def test_write_json_indented(self, tmp_path):
        path = tmp_path / "data.json"
        write_json(path, {"a": 1}, indent=2)
        assert path.read_text() == '{\n  "a": 1\n}'

    def test_read_json_missing(self, tmp_path):
        assert read_json(tmp_path / "missing.json") is None

    def test_read_json_corrupt(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[{]")
        with pytest.raises(StorageError):
            read_json(path)

    def test_jsonl_one_object_per_line(self, tmp_path):
        path = tmp_path / "chunks.jsonl"
        write_jsonl(path, [{"text": "a"}, {"text": "b"}])
        assert path.read_text().split("\n") == ['{"text":"a"}', '{"text":"b"}']
        assert read_jsonl(path) == [{"text": "a"}, {"text": "b"}]

    def test_jsonl_skips_blank_lines(self, tmp_path):
        path = tmp_path / "chunks.jsonl"
        path.write_text('{"text":"a"}\n\n{"text":"b"}\n')
        assert len(read_jsonl(path)) == 2

    def test_jsonl_corrupt_line(self, tmp_path):
        path = tmp_path / "chunks.jsonl"
        path.write_text('{"text":"a"}\nnot json\n')
        with pytest.raises(StorageError, match="line 2"):
            read_jsonl(path)

    def test_non_ascii_preserved(self, tmp_path):
        path = tmp_path / "data.json"
        write_json(path, {"name": "Management’s Discussion"})
        assert "’" in path.read_text(encoding="utf-8")

    def test_atomic_write_replaces_and_leaves_no_temp(self, tmp_path):
        path = tmp_path / "file.txt"
        atomic_write(path, "old")
        atomic_write(path, "new")
        assert path.read_text() == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]

    def test_failed_write_removes_temp_file(self, tmp_path, monkeypatch):
        real = tempfile.NamedTemporaryFile

        def disk_full(*args, **kwargs):
            handle = real(*args, **kwargs)

            def write(data):
                raise OSError(28, "No space left on device")

            handle.write = write
            return handle

        monkeypatch.setattr(tempfile, "NamedTemporaryFile", disk_full)

        with pytest.raises(StorageError, match="Failed to write"):
            atomic_write(tmp_path / "data.json", "{}")
        assert list(tmp_path.iterdir()) == []

    def test_reader_never_sees_partial_file(self, tmp_path):
        path = tmp_path / "data.json"
        write_json(path, list(range(10)))
        errors: list[Exception] = []
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                try:
                    json.loads(path.read_text())
                except Exception as exc:
                    errors.append(exc)

        t = threading.Thread(target=reader)
        t.start()
        try:
            for n in range(50):
                write_json(path, list(range(n * 100)))
        finally:
            stop.set()
            t.join()

        assert errors == []


class TestFilingLock:
    def test_serializes_same_key(self):
        key = FilingKey("AAPL", "10-K", "2024-11-01")
        events: list[str] = []

        def worker(name: str):
            with filing_lock(key):
                events.append(f"{name}-in")
                time.sleep(0.02)
                events.append(f"{name}-out")

        threads = [threading.Thread(target=worker, args=(str(i),)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for i in range(0, len(events), 2):
            assert events[i].endswith("-in")
            assert events[i + 1] == events[i].replace("-in", "-out")

    def test_normalized_keys_share_lock(self):
        acquired = threading.Event()
        release = threading.Event()
        second_entered = threading.Event()

        def holder():
            with filing_lock(FilingKey("aapl", "10-k", "2024-11-01")):
                acquired.set()
                release.wait(timeout=5)

        def contender():
            with filing_lock(FilingKey("AAPL", "10-K", "2024-11-01")):
                second_entered.set()

        t1 = threading.Thread(target=holder)
        t1.start()
        acquired.wait(timeout=5)
        t2 = threading.Thread(target=contender)
        t2.start()

        assert not second_entered.wait(timeout=0.1)
        release.set()
        t1.join()
        t2.join()
        assert second_entered.is_set()

    def test_reentrant(self):
        key = FilingKey("AAPL", "10-K", "2024-11-01")
        with filing_lock(key):
            with filing_lock(key):
                pass

    def test_registry_drops_released_keys(self):
        key = FilingKey("AAPL", "10-K", "2024-11-01")
        with filing_lock(key):
            with filing_lock(key):
                assert key in locks._locks
            assert key in locks._locks
        assert key not in locks._locks

    def test_registry_keeps_key_while_waiter_queued(self):
        key = FilingKey("AAPL", "10-K", "2024-11-01")
        release = threading.Event()
        acquired = threading.Event()

        def holder():
            with filing_lock(key):
                acquired.set()
                release.wait(timeout=5)

        t1 = threading.Thread(target=holder)
        t1.start()
        acquired.wait(timeout=5)
        t2 = threading.Thread(target=self._enter_and_exit, args=(key,))
        t2.start()
        time.sleep(0.05)
        assert locks._locks[key].users == 2

        release.set()
        t1.join()
        t2.join()
        assert key not in locks._locks

    @staticmethod
    def _enter_and_exit(key):
        with filing_lock(key):
            pass
