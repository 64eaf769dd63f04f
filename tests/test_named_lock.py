"""Tests for the cross-process named lock."""

import threading
import time

import pytest

from log_utils import sanitize_lock_key
from named_lock import LockTimeoutError, NamedLock, lock_file_name


class TestLockFileName:
    """Test mapping lock keys to filenames."""

    def test_short_key(self):
        assert lock_file_name("LogWriter_x.log") == "LogWriter_x.log.lock"

    def test_long_key_is_hashed(self):
        key = "LogWriter_" + "a" * 400
        name = lock_file_name(key)
        assert len(name.encode("utf-8")) <= 255
        assert name.endswith(".lock")
        assert name.startswith("LogWriter_aaa")

    def test_long_keys_stay_distinct(self):
        assert lock_file_name("k" * 300 + "1") != lock_file_name("k" * 300 + "2")


class TestNamedLock:
    """Test acquiring and releasing named locks."""

    def test_key_matches_sanitized_path(self, tmp_path, lock_dir):
        lock = NamedLock(tmp_path / "app.log", lock_dir=lock_dir)
        assert lock.key == sanitize_lock_key(tmp_path / "app.log")
        assert lock.lock_path.parent == lock_dir

    def test_context_manager_acquires_and_releases(self, tmp_path, lock_dir):
        lock = NamedLock(tmp_path / "app.log", lock_dir=lock_dir)
        with lock:
            assert lock.is_locked
        assert not lock.is_locked

    def test_creates_lock_dir(self, tmp_path):
        lock_dir = tmp_path / "nested" / "locks"
        with NamedLock(tmp_path / "app.log", lock_dir=lock_dir):
            assert lock_dir.is_dir()

    def test_released_on_exception(self, tmp_path, lock_dir):
        path = tmp_path / "app.log"
        with pytest.raises(RuntimeError):
            with NamedLock(path, lock_dir=lock_dir):
                raise RuntimeError("append failed")

        with NamedLock(path, timeout_ms=0, lock_dir=lock_dir) as again:
            assert again.is_locked

    def test_same_path_contends(self, tmp_path, lock_dir):
        path = tmp_path / "app.log"
        with NamedLock(path, lock_dir=lock_dir):
            with pytest.raises(LockTimeoutError) as exc_info:
                with NamedLock(path, timeout_ms=50, lock_dir=lock_dir):
                    pass
        assert exc_info.value.timeout_ms == 50
        assert exc_info.value.key == sanitize_lock_key(path)

    def test_different_paths_do_not_contend(self, tmp_path, lock_dir):
        with NamedLock(tmp_path / "a.log", lock_dir=lock_dir):
            with NamedLock(tmp_path / "b.log", timeout_ms=0, lock_dir=lock_dir) as other:
                assert other.is_locked

    def test_contention_across_threads(self, tmp_path, lock_dir):
        path = tmp_path / "app.log"
        holder_ready = threading.Event()
        release = threading.Event()

        def hold():
            with NamedLock(path, lock_dir=lock_dir):
                holder_ready.set()
                release.wait(timeout=5)

        thread = threading.Thread(target=hold, daemon=True)
        thread.start()
        assert holder_ready.wait(timeout=5)

        with pytest.raises(LockTimeoutError):
            NamedLock(path, timeout_ms=50, lock_dir=lock_dir).acquire()

        release.set()
        thread.join(timeout=5)

        start = time.monotonic()
        with NamedLock(path, timeout_ms=1000, lock_dir=lock_dir):
            pass
        assert time.monotonic() - start < 1.0

    def test_release_is_idempotent(self, tmp_path, lock_dir):
        lock = NamedLock(tmp_path / "app.log", lock_dir=lock_dir)
        lock.acquire()
        lock.release()
        lock.release()
        assert not lock.is_locked
