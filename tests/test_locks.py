"""Tests for the reader/writer lock"""

import threading
import time

import pytest

from authgate.core.locks import ReadWriteLock


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    inside = threading.Barrier(3, timeout=2)

    def reader():
        with lock.read_locked():
            # all three readers must be inside at once to pass the barrier
            inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)
    assert not any(t.is_alive() for t in threads)


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    events = []

    lock.acquire_write()

    def reader():
        with lock.read_locked():
            events.append("read")

    t = threading.Thread(target=reader)
    t.start()
    time.sleep(0.05)
    events.append("write-done")
    lock.release_write()
    t.join(timeout=5)

    assert events == ["write-done", "read"]


def test_waiting_writer_blocks_new_readers():
    lock = ReadWriteLock()
    order = []

    lock.acquire_read()

    def writer():
        with lock.write_locked():
            order.append("write")

    def late_reader():
        with lock.read_locked():
            order.append("late-read")

    w = threading.Thread(target=writer)
    w.start()
    time.sleep(0.05)  # writer is now waiting on the held read lock
    r = threading.Thread(target=late_reader)
    r.start()
    time.sleep(0.05)
    assert order == []

    lock.release_read()
    w.join(timeout=5)
    r.join(timeout=5)
    assert order == ["write", "late-read"]


def test_release_without_acquire_raises():
    lock = ReadWriteLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()


def test_lock_released_on_exception():
    lock = ReadWriteLock()
    with pytest.raises(ValueError):
        with lock.write_locked():
            raise ValueError("boom")
    # would deadlock if the write lock were still held
    with lock.read_locked():
        pass
